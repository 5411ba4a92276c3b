"""
Persistence actions for subscription state and point balances.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import Subscription, User

logger = logging.getLogger(__name__)


def create_or_update_subscription(
    db: Session,
    user_id: str,
    stripe_subscription_id: str,
    plan: str,
    status: str,
    current_period_start: datetime,
    current_period_end: datetime,
) -> Optional[Subscription]:
    """
    Upsert the single subscription row owned by a user.

    Returns None when the write fails; the session is rolled back.
    """
    try:
        subscription = db.query(Subscription).filter(Subscription.user_id == user_id).first()
        if subscription is None:
            subscription = Subscription(user_id=user_id)
            db.add(subscription)

        subscription.stripe_subscription_id = stripe_subscription_id
        subscription.plan = plan
        subscription.status = status
        subscription.current_period_start = current_period_start
        subscription.current_period_end = current_period_end

        db.commit()
        db.refresh(subscription)
        return subscription
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Error creating or updating subscription for user %s: %s", user_id, exc)
        return None


def update_user_points(db: Session, user_id: str, points_to_add: int) -> Optional[User]:
    """Add points to a user's balance. Returns None when the user does not exist."""
    try:
        user = db.get(User, user_id)
        if user is None:
            logger.warning("Cannot add points, user %s not found", user_id)
            return None
        user.points = (user.points or 0) + points_to_add
        db.commit()
        db.refresh(user)
        return user
    except SQLAlchemyError:
        db.rollback()
        raise
