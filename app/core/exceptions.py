"""Custom exception types for domain and API layers."""
from __future__ import annotations

from typing import Any

from fastapi import status
from fastapi.responses import JSONResponse


class AppError(Exception):
    """Base app exception, rendered as a JSON error body."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body

    def to_response(self) -> JSONResponse:
        return JSONResponse(status_code=self.status_code, content=self.to_dict())


class SignatureError(AppError):
    """Webhook signature header missing or verification failed."""

    status_code = status.HTTP_400_BAD_REQUEST


class ValidationError(AppError):
    """Required fields missing from a provider payload."""

    status_code = status.HTTP_400_BAD_REQUEST


class UnknownPlanError(AppError):
    """Price identifier has no plan in the catalog."""

    status_code = status.HTTP_400_BAD_REQUEST


class PersistenceError(AppError):
    """A side-effecting call failed while applying an event."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class IntegrationError(AppError):
    """External integration call failure."""

    status_code = status.HTTP_502_BAD_GATEWAY
