"""Legal order status transitions.

The webhook still applies every mapped status (last write wins); this
table only decides whether a transition is reported as a regression,
e.g. a late PAYMENT_OVERDUE delivered after the order was already paid.
"""

from storefront.models.enums import OrderStatus

S = OrderStatus

LEGAL_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    S.PENDING: frozenset(
        {S.AWAITING_PAYMENT, S.PAID, S.PAYMENT_OVERDUE, S.DUNNING, S.PROCESSING, S.CANCELLED}
    ),
    S.AWAITING_PAYMENT: frozenset({S.PENDING, S.PAID, S.PAYMENT_OVERDUE, S.CANCELLED}),
    S.PAYMENT_OVERDUE: frozenset(
        {S.PENDING, S.AWAITING_PAYMENT, S.PAID, S.DUNNING, S.CANCELLED}
    ),
    S.DUNNING: frozenset({S.PAID, S.PAYMENT_OVERDUE, S.REFUNDED, S.CANCELLED}),
    S.PAID: frozenset({S.PROCESSING, S.SHIPPED, S.REFUNDED, S.CANCELLED}),
    S.PROCESSING: frozenset({S.SHIPPED, S.REFUNDED, S.CANCELLED}),
    S.SHIPPED: frozenset({S.DELIVERED, S.REFUNDED}),
    S.DELIVERED: frozenset({S.REFUNDED}),
    S.REFUNDED: frozenset(),
    S.CANCELLED: frozenset(),
}


def is_legal_transition(from_status: OrderStatus | None, to_status: OrderStatus) -> bool:
    """Check whether moving from one status to another is a legal transition.

    An unknown previous status and re-applying the same status are always legal.
    """
    if from_status is None or from_status == to_status:
        return True
    return to_status in LEGAL_TRANSITIONS.get(from_status, frozenset())

