"""Order endpoints used by the checkout page.

Provides:
- Payment status polling while a PIX or boleto charge is pending
"""

from fastapi import APIRouter, Depends
from starlette.status import HTTP_404_NOT_FOUND

from storefront.models.errors import ErrorCode, StorefrontError
from storefront.services.order_store import OrderStore
from storefront_api.dependencies import get_order_store
from storefront_api.models.orders import PaymentStatusResponse

router = APIRouter(tags=["orders"])


@router.get(
    "/orders/{order_id}/payment-status",
    summary="Get order payment status",
    description="""
Returns the current status of an order. The checkout page polls this
after creating a PIX or boleto charge until the Asaas webhook marks the
order as `paid`.
""",
    response_model=PaymentStatusResponse,
    responses={HTTP_404_NOT_FOUND: {"description": "Order not found"}},
)
async def get_payment_status(
    order_id: str,
    store: OrderStore = Depends(get_order_store),
) -> PaymentStatusResponse:
    """Get the payment status of an order."""
    status = store.get_payment_status(order_id)
    if status is None:
        raise StorefrontError(ErrorCode.ORDER_NOT_FOUND, details={"order_id": order_id})
    return PaymentStatusResponse(order_id=order_id, status=status)
