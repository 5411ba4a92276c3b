"""External integration adapters."""

from .email import EmailService
from .stripe_gateway import StripeGateway, get_stripe_gateway

__all__ = [
    "EmailService",
    "StripeGateway",
    "get_stripe_gateway",
]
