"""Order model as seen by the payment webhook."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .enums import OrderStatus

_STATUS_VALUES = frozenset(s.value for s in OrderStatus)


class Order(BaseModel):
    """Persisted order record.

    Only the fields touched by payment reconciliation are modelled; the
    order-management system owns the rest of the record.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(
        ...,
        description="Order primary key (also sent to Asaas as externalReference)",
        examples=["8f14e45f-ceea-467f-a8f2-0b8a5c2b8e01"],
    )
    status: OrderStatus = Field(
        default=OrderStatus.PENDING,
        description="Order lifecycle status",
    )
    payment_confirmed_at: datetime | None = Field(
        default=None,
        description="When payment was confirmed; only set while status is paid",
    )
    asaas_payment_id: str | None = Field(
        default=None,
        description="Asaas payment ID (pay_xxx) used as fallback correlation key",
        examples=["pay_080225913252"],
    )
    updated_at: datetime | None = Field(
        default=None,
        description="Last modification timestamp",
    )

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> "Order":
        """Build an Order from a stored item.

        A missing status, or one this service does not know, reads as pending.
        """
        data = dict(item)
        if data.get("status") not in _STATUS_VALUES:
            data["status"] = OrderStatus.PENDING
        return cls.model_validate(data)
