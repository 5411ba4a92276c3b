from __future__ import annotations

from pydantic import BaseModel


class PlanAllowance(BaseModel):
    plan: str
    points: int


class WebhookAck(BaseModel):
    received: bool = True
