from __future__ import annotations

from app.config import settings
from app.schemas.subscription import PlanAllowance


def price_catalog() -> dict[str, PlanAllowance]:
    return {
        settings.stripe_price_basic: PlanAllowance(plan="Basic", points=100),
        settings.stripe_price_pro: PlanAllowance(plan="Pro", points=500),
    }


def plan_for_price(price_id: str) -> PlanAllowance | None:
    """Return the plan granted by a Stripe price id, or None when unknown."""
    return price_catalog().get(price_id)
