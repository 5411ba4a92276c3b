from __future__ import annotations

from typing import Any

import stripe

from app.config import settings


class StripeGateway:
    """Thin wrapper over the Stripe SDK calls the webhook needs."""

    def __init__(
        self,
        api_key: str | None = None,
        webhook_secret: str | None = None,
        api_version: str | None = None,
    ):
        self.api_key = api_key if api_key is not None else settings.stripe_secret_key.get_secret_value()
        self.webhook_secret = (
            webhook_secret if webhook_secret is not None else settings.stripe_webhook_secret.get_secret_value()
        )
        self.api_version = api_version or settings.stripe_api_version

    def construct_event(self, payload: bytes, signature: str) -> Any:
        """Verify the signature and parse the event.

        Raises stripe.SignatureVerificationError or ValueError on failure.
        """
        return stripe.Webhook.construct_event(payload, signature, self.webhook_secret)

    def retrieve_subscription(self, subscription_id: str) -> Any:
        return stripe.Subscription.retrieve(
            subscription_id,
            api_key=self.api_key,
            stripe_version=self.api_version,
        )


def get_stripe_gateway() -> StripeGateway:
    return StripeGateway()
