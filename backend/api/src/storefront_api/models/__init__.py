"""API request/response models.

Domain models (Order, OrderStatus, ...) live in storefront.models; this
package holds HTTP-layer shapes only.
"""

from storefront_api.models.orders import PaymentStatusResponse
from storefront_api.models.webhooks import (
    NoPaymentDataResponse,
    WebhookErrorResponse,
    WebhookReceivedResponse,
)

__all__ = [
    "NoPaymentDataResponse",
    "PaymentStatusResponse",
    "WebhookErrorResponse",
    "WebhookReceivedResponse",
]
