"""Preflight handling for the Asaas webhook.

The app-level CORSMiddleware enforces CORS_ALLOW_ORIGINS, which is meant
for the checkout pages. The webhook path keeps its own permissive policy:
any OPTIONS request to it is answered here with the webhook CORS headers,
whatever its Origin, before the app-level policy sees it.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.types import ASGIApp

from storefront_api.routes.webhooks import CORS_HEADERS, WEBHOOK_PATH


class WebhookPreflightMiddleware(BaseHTTPMiddleware):
    """Answers OPTIONS on the webhook path with the webhook CORS headers."""

    def __init__(self, app: ASGIApp, path: str = f"/api{WEBHOOK_PATH}") -> None:
        super().__init__(app)
        self.path = path

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method == "OPTIONS" and request.url.path.rstrip("/") == self.path:
            return PlainTextResponse("ok", headers=CORS_HEADERS)
        return await call_next(request)
