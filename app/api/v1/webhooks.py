"""
Webhook API Routes
Inbound provider callbacks
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.core.exceptions import AppError
from app.database import get_db
from app.integrations.stripe_gateway import StripeGateway, get_stripe_gateway
from app.schemas.subscription import WebhookAck
from app.services.stripe_webhook import handle_stripe_webhook

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/stripe", response_model=WebhookAck)
async def stripe_webhook(
    request: Request,
    db: Session = Depends(get_db),
    gateway: StripeGateway = Depends(get_stripe_gateway),
):
    """Receive a signed Stripe event."""
    payload = await request.body()
    signature = request.headers.get("Stripe-Signature")
    try:
        return await run_in_threadpool(handle_stripe_webhook, payload, signature, db, gateway)
    except AppError as exc:
        return exc.to_response()
    except Exception as exc:
        logger.exception("Unexpected error processing Stripe webhook")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Unexpected error occurred", "details": str(exc)},
        )
