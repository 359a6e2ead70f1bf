"""Pydantic models for storefront data entities."""

from .asaas_webhook import (
    AsaasPayment,
    AsaasWebhookEvent,
    OrderTransition,
    ResolutionOutcome,
    WebhookResult,
)
from .enums import AsaasEventType, CorrelationKey, OrderStatus, ResolutionKind
from .errors import (
    ERROR_MESSAGES,
    ERROR_RECOVERY,
    ErrorCode,
    ErrorResponse,
    StorefrontError,
)
from .order import Order

__all__ = [
    # Enums
    "AsaasEventType",
    "CorrelationKey",
    "OrderStatus",
    "ResolutionKind",
    # Order
    "Order",
    # Webhook
    "AsaasPayment",
    "AsaasWebhookEvent",
    "OrderTransition",
    "ResolutionOutcome",
    "WebhookResult",
    # Errors
    "ERROR_MESSAGES",
    "ERROR_RECOVERY",
    "ErrorCode",
    "ErrorResponse",
    "StorefrontError",
]
