"""Exception handlers mapping StorefrontError to HTTP responses.

Status codes by ErrorCode:
- 401: webhook access token mismatch
- 404: order not found
- 500: missing webhook configuration, unreadable payloads and storage
  failures (Asaas redelivers events answered with 5xx)

The webhook route converts its own errors to ``{"error": ...}`` bodies;
these handlers cover the remaining routes with the ErrorResponse shape.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from storefront.models.errors import ErrorCode, StorefrontError

logger = logging.getLogger(__name__)

ERROR_CODE_TO_HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.WEBHOOK_NOT_CONFIGURED: HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.INVALID_WEBHOOK_TOKEN: HTTP_401_UNAUTHORIZED,
    ErrorCode.INVALID_PAYLOAD: HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.ORDER_UPDATE_FAILED: HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.ORDER_NOT_FOUND: HTTP_404_NOT_FOUND,
}

INTERNAL_ERROR_BODY = {
    "success": False,
    "error_code": "ERR_INTERNAL",
    "message": "An unexpected error occurred",
    "recovery": "Please try again later or contact support",
    "details": None,
}


def get_http_status_for_error(code: ErrorCode) -> int:
    """HTTP status for an ErrorCode (400 when unmapped)."""
    return ERROR_CODE_TO_HTTP_STATUS.get(code, HTTP_400_BAD_REQUEST)


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    return JSONResponse(
        status_code=get_http_status_for_error(exc.code),
        content=exc.to_error_response().model_dump(mode="json"),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Answer 500 without exposing the exception to the client."""
    logger.exception("Unhandled exception on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content=INTERNAL_ERROR_BODY,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, storefront_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
