from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from app.config import settings
from app.core.exceptions import IntegrationError

logger = logging.getLogger(__name__)

MAILTRAP_SEND_URL = "https://send.api.mailtrap.io/api/send"


class EmailService:
    """Transactional email via the Mailtrap Send API."""

    def __init__(
        self,
        api_token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_token = api_token if api_token is not None else settings.mailtrap_api_token.get_secret_value()
        self.default_from_email = settings.mailtrap_sender_email
        self.default_from_name = settings.mailtrap_sender_name
        self._transport = transport

    async def send_email(
        self,
        to: str,
        subject: str,
        text: str,
        html: Optional[str] = None,
        category: Optional[str] = None,
        from_email: Optional[str] = None,
        from_name: Optional[str] = None,
    ) -> Dict[str, Any]:
        if not self.api_token:
            raise IntegrationError("MAILTRAP_API_TOKEN is not configured")

        payload: Dict[str, Any] = {
            "from": {
                "email": from_email or self.default_from_email,
                "name": from_name or self.default_from_name,
            },
            "to": [{"email": to}],
            "subject": subject,
            "text": text,
        }
        if html:
            payload["html"] = html
        if category:
            payload["category"] = category

        async with httpx.AsyncClient(timeout=20.0, transport=self._transport) as client:
            response = await client.post(
                MAILTRAP_SEND_URL,
                headers={
                    "Authorization": f"Bearer {self.api_token}",
                    "Content-Type": "application/json",
                },
                json=payload,
            )
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error("Mailtrap send failed status=%s body=%s", response.status_code, response.text)
            raise IntegrationError("Email delivery failed", response.text) from exc

        try:
            message_ids = response.json().get("message_ids", [])
        except (ValueError, AttributeError):
            logger.warning("Mailtrap returned a non-JSON body for %s", to)
            message_ids = []
        logger.info("Email sent to %s", to)
        return {"status": "sent", "message_ids": message_ids, "to": to}
