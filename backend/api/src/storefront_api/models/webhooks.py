"""Response bodies of the Asaas webhook endpoint.

Asaas only looks at the status code; the bodies are kept small and stable
for anyone reading delivery logs in the Asaas dashboard.
"""

from pydantic import BaseModel, ConfigDict, Field


class WebhookReceivedResponse(BaseModel):
    """Event acknowledged (whether or not an order was updated)."""

    model_config = ConfigDict(strict=True)

    received: bool = True


class NoPaymentDataResponse(BaseModel):
    """Event acknowledged without a payment ID; nothing was updated."""

    model_config = ConfigDict(strict=True)

    message: str = Field(default="No payment data", examples=["No payment data"])


class WebhookErrorResponse(BaseModel):
    """Error body for 401/500 responses."""

    model_config = ConfigDict(strict=True)

    error: str = Field(
        ...,
        description="Error message",
        examples=["Unauthorized", "Failed to update order"],
    )
