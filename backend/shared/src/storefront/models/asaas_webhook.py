"""Asaas webhook models: inbound events, order transitions and outcomes."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .enums import CorrelationKey, OrderStatus, ResolutionKind


def _as_str(value: Any) -> str | None:
    """Return value as a non-empty string, or None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str) and value:
        return value
    return None


class AsaasPayment(BaseModel):
    """Payment object embedded in an Asaas webhook event.

    Only the fields used for reconciliation are kept; the gateway sends
    many more (value, billingType, dueDate, ...).
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = Field(
        default=None,
        description="Asaas payment ID",
        examples=["pay_080225913252"],
    )
    status: str | None = Field(
        default=None,
        description="Asaas payment status",
        examples=["CONFIRMED", "OVERDUE"],
    )
    external_reference: str | None = Field(
        default=None,
        alias="externalReference",
        description="Order ID sent when the charge was created",
    )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AsaasPayment":
        """Extract the payment fields, dropping values of unexpected type."""
        return cls(
            id=_as_str(data.get("id")),
            status=_as_str(data.get("status")),
            external_reference=_as_str(data.get("externalReference")),
        )


class AsaasWebhookEvent(BaseModel):
    """Inbound Asaas webhook event (not persisted)."""

    event: str | None = Field(
        default=None,
        description="Asaas event name",
        examples=["PAYMENT_CONFIRMED"],
    )
    payment: AsaasPayment | None = None

    @classmethod
    def parse_payload(cls, payload: dict[str, Any]) -> "AsaasWebhookEvent":
        """Build an event from a decoded JSON body.

        Never rejects a payload: missing or malformed fields read as absent.
        """
        event = payload.get("event")
        payment = payload.get("payment")
        return cls(
            event=event if isinstance(event, str) else None,
            payment=AsaasPayment.from_dict(payment) if isinstance(payment, dict) else None,
        )

    @property
    def payment_id(self) -> str | None:
        return self.payment.id if self.payment else None


class OrderTransition(BaseModel):
    """Status change applied to an order.

    Emitted after a successful write so follow-on actions (confirmation
    email, stock adjustment, admin alert) can react to it.
    """

    model_config = ConfigDict(frozen=True)

    order_id: str
    from_status: OrderStatus | None = None
    to_status: OrderStatus
    event: str | None = None
    payment_id: str | None = None
    correlation_key: CorrelationKey
    occurred_at: datetime
    is_regression: bool = Field(
        default=False,
        description="True when the transition is outside the legal transition set",
    )


class ResolutionOutcome(BaseModel):
    """Result of locating and updating the order(s) for an event."""

    kind: ResolutionKind
    correlation_key: CorrelationKey
    lookup_value: str
    transitions: list[OrderTransition] = Field(default_factory=list)
    error: str | None = None

    @classmethod
    def resolved(
        cls,
        correlation_key: CorrelationKey,
        lookup_value: str,
        transitions: list[OrderTransition],
    ) -> "ResolutionOutcome":
        return cls(
            kind=ResolutionKind.RESOLVED,
            correlation_key=correlation_key,
            lookup_value=lookup_value,
            transitions=transitions,
        )

    @classmethod
    def not_found(
        cls, correlation_key: CorrelationKey, lookup_value: str
    ) -> "ResolutionOutcome":
        return cls(
            kind=ResolutionKind.NOT_FOUND,
            correlation_key=correlation_key,
            lookup_value=lookup_value,
        )

    @classmethod
    def storage_error(
        cls,
        correlation_key: CorrelationKey,
        lookup_value: str,
        error: str,
        transitions: list[OrderTransition] | None = None,
    ) -> "ResolutionOutcome":
        """A failed write. transitions holds the writes that did commit."""
        return cls(
            kind=ResolutionKind.STORAGE_ERROR,
            correlation_key=correlation_key,
            lookup_value=lookup_value,
            error=error,
            transitions=transitions or [],
        )

    @property
    def order_ids(self) -> list[str]:
        return [t.order_id for t in self.transitions]


class WebhookResult(BaseModel):
    """Response the transport layer should send back to the gateway."""

    status_code: int = 200
    body: dict[str, Any]
    outcome: ResolutionOutcome | None = None
