"""Translation of the Asaas event and payment-status vocabulary.

Asaas payment statuses: https://docs.asaas.com/docs/webhook-para-cobrancas
"""

from typing import Any

from storefront.models.enums import AsaasEventType, OrderStatus

# Events that trigger an order update; anything else is acknowledged and ignored
HANDLED_EVENT_TYPES: frozenset[str] = frozenset(e.value for e in AsaasEventType)

# Asaas payment status -> internal order status
PAYMENT_STATUS_MAP: dict[str, OrderStatus] = {
    "CONFIRMED": OrderStatus.PAID,
    "RECEIVED": OrderStatus.PAID,
    "RECEIVED_IN_CASH": OrderStatus.PAID,
    "PENDING": OrderStatus.AWAITING_PAYMENT,
    "OVERDUE": OrderStatus.PAYMENT_OVERDUE,
    "REFUNDED": OrderStatus.REFUNDED,
    "REFUND_REQUESTED": OrderStatus.REFUNDED,
    "CHARGEBACK_REQUESTED": OrderStatus.REFUNDED,
    "CHARGEBACK_DISPUTE": OrderStatus.REFUNDED,
    "DUNNING_REQUESTED": OrderStatus.DUNNING,
    "DUNNING_RECEIVED": OrderStatus.DUNNING,
}


def map_payment_status(gateway_status: Any) -> OrderStatus:
    """Map an Asaas payment status to an order status.

    Total over any input: unknown values, including non-strings and None,
    map to pending.

    Args:
        gateway_status: Payment status as sent by Asaas (e.g. "CONFIRMED")

    Returns:
        The corresponding OrderStatus.
    """
    if not isinstance(gateway_status, str):
        return OrderStatus.PENDING
    return PAYMENT_STATUS_MAP.get(gateway_status, OrderStatus.PENDING)


def is_handled_event(event: Any) -> bool:
    """Check whether an Asaas event name is in the allow-list."""
    return isinstance(event, str) and event in HANDLED_EVENT_TYPES
