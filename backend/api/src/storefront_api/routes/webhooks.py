"""Webhook endpoints for external service integrations.

Provides endpoints for:
- Asaas payment webhook events (PAYMENT_CONFIRMED, PAYMENT_OVERDUE, ...)

These endpoints do NOT use customer authentication; Asaas authenticates
with the shared token sent in the asaas-access-token header.
"""

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.status import HTTP_200_OK, HTTP_500_INTERNAL_SERVER_ERROR

from storefront.models.errors import StorefrontError
from storefront.services.webhook_handler import ACCESS_TOKEN_HEADER, AsaasWebhookHandler
from storefront.utils.logging import get_logger
from storefront_api.dependencies import get_webhook_handler
from storefront_api.exceptions import get_http_status_for_error
from storefront_api.models.webhooks import (
    NoPaymentDataResponse,
    WebhookErrorResponse,
    WebhookReceivedResponse,
)

logger = get_logger(__name__)

router = APIRouter(tags=["webhooks"])

WEBHOOK_PATH = "/webhooks/asaas"

# Asaas calls server-to-server, but preflight is kept permissive for
# browser-based tooling that replays deliveries.
CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": (
        "authorization, x-client-info, apikey, content-type, asaas-access-token"
    ),
}


def _json_response(status_code: int, content: dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers=CORS_HEADERS)


@router.options(WEBHOOK_PATH, include_in_schema=False)
async def asaas_webhook_preflight() -> PlainTextResponse:
    """Answer CORS preflight requests."""
    return PlainTextResponse("ok", headers=CORS_HEADERS)


@router.post(
    WEBHOOK_PATH,
    summary="Receive Asaas payment webhook events",
    description="""
Endpoint for Asaas payment webhook events. Updates the order referenced
by `payment.externalReference` (or, when absent, the order whose
`asaas_payment_id` matches `payment.id`) to the status mapped from
`payment.status`.

**Authentication**: `asaas-access-token` header must equal the configured token.

**Redelivery**: only a storage failure while updating by externalReference
returns 500, so Asaas retries it; unmatched events are acknowledged.
""",
    response_model=WebhookReceivedResponse | NoPaymentDataResponse,
    responses={
        200: {"description": "Event acknowledged"},
        401: {"description": "Invalid access token", "model": WebhookErrorResponse},
        500: {
            "description": "Webhook not configured or order update failed",
            "model": WebhookErrorResponse,
        },
    },
)
async def handle_asaas_webhook(
    request: Request,
    handler: AsaasWebhookHandler = Depends(get_webhook_handler),
) -> JSONResponse:
    """Handle incoming Asaas webhook events.

    Every failure is converted to a JSON error response here so a
    delivery never escapes as an unhandled exception.
    """
    token = request.headers.get(ACCESS_TOKEN_HEADER)

    try:
        body = await request.body()
        result = handler.handle(token, body)
    except StorefrontError as e:
        return _json_response(get_http_status_for_error(e.code), {"error": e.message})
    except Exception as e:
        logger.exception("Webhook processing error: %s", e)
        return _json_response(
            HTTP_500_INTERNAL_SERVER_ERROR,
            {"error": str(e) or "Webhook processing error"},
        )

    return _json_response(result.status_code or HTTP_200_OK, result.body)
