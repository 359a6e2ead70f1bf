"""API routes package.

Routers are organized by domain:

- health: Health check endpoints
- orders: Order payment-status polling for checkout
- webhooks: Asaas payment webhook receiver

All routers are registered in main.py with /api prefix.
"""

from storefront_api.routes.health import router as health_router
from storefront_api.routes.orders import router as orders_router
from storefront_api.routes.webhooks import router as webhooks_router

__all__ = [
    "health_router",
    "orders_router",
    "webhooks_router",
]
