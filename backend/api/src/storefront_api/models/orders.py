"""API models for order endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from storefront.models.enums import OrderStatus


class PaymentStatusResponse(BaseModel):
    """Current payment-related status of an order, polled by checkout."""

    model_config = ConfigDict(
        strict=True,
        json_schema_extra={
            "examples": [
                {"order_id": "8f14e45f-ceea-467f-a8f2-0b8a5c2b8e01", "status": "paid"}
            ]
        },
    )

    order_id: str = Field(..., description="Order ID")
    status: OrderStatus = Field(..., description="Order status")
