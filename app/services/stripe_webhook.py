"""
Stripe webhook processing.

Handles checkout.session.completed by recording the subscription and granting
the plan's points. Every other event type is acknowledged without side effects.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import stripe
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import PersistenceError, SignatureError, UnknownPlanError, ValidationError
from app.integrations.stripe_gateway import StripeGateway
from app.models import User
from app.services.billing_actions import create_or_update_subscription, update_user_points
from app.services.plan_catalog import plan_for_price

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"


def _field(obj: Any, key: str) -> Any:
    """Read a key from a StripeObject or dict, returning None when absent."""
    if obj is None:
        return None
    try:
        return obj[key]
    except (KeyError, IndexError, TypeError):
        return None


def _timestamp(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(int(value), tz=timezone.utc)


def verify_event(gateway: StripeGateway, payload: bytes, signature: Optional[str]) -> Any:
    if not signature:
        logger.error("No Stripe signature found")
        raise SignatureError("No Stripe signature")
    try:
        return gateway.construct_event(payload, signature)
    except (stripe.SignatureVerificationError, ValueError) as exc:
        logger.warning("Webhook signature verification failed: %s", exc)
        raise SignatureError(f"Webhook Error: {exc}")


def handle_checkout_completed(session: Any, db: Session, gateway: StripeGateway) -> None:
    user_id = _field(session, "client_reference_id")
    subscription_ref = _field(session, "subscription")
    subscription_id = subscription_ref if isinstance(subscription_ref, str) else _field(subscription_ref, "id")

    if not user_id or not subscription_id:
        logger.error("Missing userId or subscriptionId in session %s", _field(session, "id"))
        raise ValidationError("Invalid session data")

    logger.info("Retrieving subscription: %s", subscription_id)
    try:
        subscription = gateway.retrieve_subscription(subscription_id)
    except stripe.StripeError as exc:
        logger.error("Error retrieving subscription %s: %s", subscription_id, exc)
        raise PersistenceError("Error processing subscription", str(exc))

    items = _field(_field(subscription, "items"), "data") or []
    if not items:
        logger.error("No items found in subscription %s", subscription_id)
        raise ValidationError("Invalid subscription data")

    item = items[0]
    price_id = _field(_field(item, "price"), "id")
    logger.info("Price ID: %s", price_id)

    allowance = plan_for_price(price_id) if price_id else None
    if allowance is None:
        logger.error("Unknown price ID %s", price_id)
        raise UnknownPlanError("Unknown price ID")

    # Newer API versions carry the billing period on the item.
    period_start = _timestamp(_field(item, "current_period_start") or _field(subscription, "current_period_start"))
    period_end = _timestamp(_field(item, "current_period_end") or _field(subscription, "current_period_end"))
    if period_start is None or period_end is None:
        logger.error("No billing period found in subscription %s", subscription_id)
        raise ValidationError("Invalid subscription data")

    if db.get(User, user_id) is None:
        logger.error("User %s not found for subscription %s", user_id, subscription_id)
        raise PersistenceError("Error processing subscription", f"User {user_id} not found")

    updated = create_or_update_subscription(
        db,
        user_id,
        subscription_id,
        allowance.plan,
        "active",
        period_start,
        period_end,
    )
    if not updated:
        logger.error("Failed to create or update subscription %s", subscription_id)
        raise PersistenceError("Failed to create or update subscription")

    try:
        user = update_user_points(db, user_id, allowance.points)
    except SQLAlchemyError as exc:
        logger.error("Error updating points for user %s: %s", user_id, exc)
        raise PersistenceError("Error processing subscription", str(exc))
    if user is None:
        raise PersistenceError("Error processing subscription", f"User {user_id} not found")

    logger.info("Updated points for user %s: +%s", user_id, allowance.points)
    logger.info("Successfully processed subscription for user %s", user_id)


def handle_stripe_webhook(
    payload: bytes,
    signature: Optional[str],
    db: Session,
    gateway: StripeGateway,
) -> Dict[str, Any]:
    event = verify_event(gateway, payload, signature)
    event_type = _field(event, "type")
    logger.info("Received event type: %s", event_type)

    if event_type == CHECKOUT_COMPLETED:
        handle_checkout_completed(_field(_field(event, "data"), "object"), db, gateway)
    else:
        logger.info("Unhandled event type: %s", event_type)

    return {"received": True}
