"""
Health API Routes
"""
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.config import settings
from app.database import check_database_connection, database_health

router = APIRouter()


@router.get("/health")
async def health_check() -> JSONResponse:
    """Application and database health"""
    db = database_health()
    ok = bool(db.get("ok")) and check_database_connection()
    return JSONResponse(
        status_code=status.HTTP_200_OK if ok else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if ok else "degraded",
            "database": db,
        },
    )


@router.get("/integrations")
async def check_integrations() -> dict:
    """Report which external credentials are configured."""
    checks = {
        "stripe": bool(settings.stripe_secret_key.get_secret_value()),
        "stripe_webhook": bool(settings.stripe_webhook_secret.get_secret_value()),
        "mailtrap": bool(settings.mailtrap_api_token.get_secret_value()),
    }
    return {
        "integrations": checks,
        "ready": all(checks.values()),
        "missing": [k for k, v in checks.items() if not v],
    }
