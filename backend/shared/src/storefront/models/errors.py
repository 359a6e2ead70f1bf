"""Standard error codes for the storefront backend.

Every error raised across the service layer carries one of these codes so
the HTTP layer can map it to a status code and a consistent JSON body.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Standard storefront error codes."""

    # Webhook error codes (ERR_WEBHOOK_001-ERR_WEBHOOK_003)
    WEBHOOK_NOT_CONFIGURED = "ERR_WEBHOOK_001"
    INVALID_WEBHOOK_TOKEN = "ERR_WEBHOOK_002"
    INVALID_PAYLOAD = "ERR_WEBHOOK_003"

    # Order error codes (ERR_ORDER_001-ERR_ORDER_002)
    ORDER_UPDATE_FAILED = "ERR_ORDER_001"
    ORDER_NOT_FOUND = "ERR_ORDER_002"


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.WEBHOOK_NOT_CONFIGURED: "Internal Server Error",
    ErrorCode.INVALID_WEBHOOK_TOKEN: "Unauthorized",
    ErrorCode.INVALID_PAYLOAD: "Webhook payload is not a JSON object",
    ErrorCode.ORDER_UPDATE_FAILED: "Failed to update order",
    ErrorCode.ORDER_NOT_FOUND: "Order not found",
}

# Recovery suggestions for operators and API clients
ERROR_RECOVERY: dict[ErrorCode, str] = {
    ErrorCode.WEBHOOK_NOT_CONFIGURED: "Set ASAAS_WEBHOOK_TOKEN for this deployment",
    ErrorCode.INVALID_WEBHOOK_TOKEN: "Verify the access token configured in the Asaas dashboard",
    ErrorCode.INVALID_PAYLOAD: "Send a JSON object body",
    ErrorCode.ORDER_UPDATE_FAILED: "The gateway will redeliver the event; check storage health",
    ErrorCode.ORDER_NOT_FOUND: "Verify the order ID",
}


class ErrorResponse(BaseModel):
    """Standard error body for API failures."""

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: ErrorCode
    message: str
    recovery: str
    details: Optional[dict[str, str]] = None

    @classmethod
    def from_code(
        cls,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
        message: Optional[str] = None,
    ) -> "ErrorResponse":
        """Build the response for a code, with its default message unless overridden."""
        return cls(
            error_code=code,
            message=message or ERROR_MESSAGES[code],
            recovery=ERROR_RECOVERY[code],
            details=details,
        )


class StorefrontError(Exception):
    """Exception raised by storefront operations.

    Caught at the HTTP boundary and converted to a JSON error response.
    """

    def __init__(
        self,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
        message: Optional[str] = None,
    ):
        self.code = code
        self.message = message or ERROR_MESSAGES[code]
        self.recovery = ERROR_RECOVERY[code]
        self.details = details
        super().__init__(self.message)

    def to_error_response(self) -> ErrorResponse:
        """Convert this exception to an ErrorResponse."""
        return ErrorResponse.from_code(self.code, self.details, self.message)
