"""FastAPI application for the storefront backend API.

This package provides REST endpoints for:
- Health checks
- Asaas payment webhooks
- Order payment-status polling for checkout
"""

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from mangum import Mangum

from storefront.config import load_cors_origins
from storefront.utils.logging import StructuredFormatter
from storefront_api import __version__
from storefront_api.exceptions import register_exception_handlers
from storefront_api.middleware.correlation import CorrelationIdMiddleware
from storefront_api.middleware.webhook_preflight import WebhookPreflightMiddleware
from storefront_api.routes.health import router as health_router
from storefront_api.routes.orders import router as orders_router
from storefront_api.routes.webhooks import router as webhooks_router

_log_handler = logging.StreamHandler()
_log_handler.setFormatter(StructuredFormatter("%(levelname)s %(name)s: %(message)s"))
logging.basicConfig(level=logging.INFO, handlers=[_log_handler])


app = FastAPI(
    title="Storefront API",
    description="Payment webhooks and order status for the storefront",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=load_cors_origins(),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
# Runs before CORSMiddleware so the webhook preflight ignores CORS_ALLOW_ORIGINS
app.add_middleware(WebhookPreflightMiddleware)
app.add_middleware(CorrelationIdMiddleware)

# Register exception handlers for consistent error responses
register_exception_handlers(app)

app.include_router(health_router, prefix="/api")
app.include_router(orders_router, prefix="/api")
app.include_router(webhooks_router, prefix="/api")


@app.get("/api/ping")
async def ping() -> dict[str, Any]:
    """Root health check endpoint at /api/ping."""
    return {
        "status": "ok",
        "timestamp": datetime.now(UTC).isoformat(),
        "service": "storefront-api",
    }


# Lambda handler - Mangum wraps FastAPI for AWS Lambda + API Gateway
handler = Mangum(app, lifespan="off")


def run_server(host: str = "0.0.0.0", port: int = 8080, reload: bool = True) -> None:
    """Serve the app locally with uvicorn (reload watches both source trees)."""
    import uvicorn

    if not reload:
        uvicorn.run(app, host=host, port=port)
        return
    uvicorn.run(
        "storefront_api.main:app",
        host=host,
        port=port,
        reload=True,
        reload_dirs=["backend/api/src", "backend/shared/src"],
    )


if __name__ == "__main__":
    run_server()
