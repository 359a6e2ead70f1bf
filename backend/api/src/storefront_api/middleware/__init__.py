"""ASGI middleware for the storefront API."""

from storefront_api.middleware.correlation import (
    CORRELATION_ID_HEADER,
    CorrelationIdMiddleware,
)
from storefront_api.middleware.webhook_preflight import WebhookPreflightMiddleware

__all__ = ["CORRELATION_ID_HEADER", "CorrelationIdMiddleware", "WebhookPreflightMiddleware"]
