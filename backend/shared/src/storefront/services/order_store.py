"""Order persistence for payment reconciliation.

Wraps the orders table with the two correlation paths used by the Asaas
webhook and reports every attempt as a ResolutionOutcome instead of
raising, so callers decide which outcomes the gateway should see.
"""

import datetime as dt
import logging
from typing import Any, Callable

from botocore.exceptions import BotoCoreError, ClientError

from storefront.models.asaas_webhook import OrderTransition, ResolutionOutcome
from storefront.models.enums import CorrelationKey, OrderStatus
from storefront.models.order import Order
from storefront.services.dynamodb import DynamoDBService
from storefront.services.transitions import is_legal_transition

logger = logging.getLogger(__name__)


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.UTC)


class OrderStore:
    """Reads and updates order records in DynamoDB."""

    ORDERS_TABLE = "orders"
    PAYMENT_ID_INDEX = "asaas_payment_id-index"

    def __init__(
        self,
        db: DynamoDBService,
        table: str = ORDERS_TABLE,
        payment_id_index: str = PAYMENT_ID_INDEX,
        clock: Callable[[], dt.datetime] = _utcnow,
    ) -> None:
        """Initialize the order store.

        Args:
            db: DynamoDB service
            table: Orders table name without prefix
            payment_id_index: GSI keyed on asaas_payment_id
            clock: Source of the current time (UTC)
        """
        self._db = db
        self._table = table
        self._payment_id_index = payment_id_index
        self._clock = clock

    def get_order(self, order_id: str) -> Order | None:
        """Get an order by ID.

        Args:
            order_id: Order primary key

        Returns:
            Order or None if not found
        """
        item = self._db.get_item(self._table, {"id": order_id})
        if not item:
            return None
        return Order.from_item(item)

    def get_payment_status(self, order_id: str) -> OrderStatus | None:
        """Get the current status of an order, as polled by checkout.

        Returns:
            The order status (pending when unset) or None if the order
            does not exist.
        """
        order = self.get_order(order_id)
        return order.status if order else None

    def _apply_status(
        self,
        order_id: str,
        status: OrderStatus,
        *,
        event: str | None,
        payment_id: str | None,
        correlation_key: CorrelationKey,
    ) -> OrderTransition | None:
        """Write the new status to an existing order.

        payment_confirmed_at is stamped when the new status is paid and
        removed otherwise, on every write.

        Returns:
            The applied transition, or None if the order does not exist.

        Raises:
            ClientError, BotoCoreError: If the write fails
        """
        now = self._clock()
        values: dict[str, Any] = {
            ":status": status.value,
            ":now": now.isoformat(),
        }
        if status == OrderStatus.PAID:
            update_expression = (
                "SET #status = :status, payment_confirmed_at = :now, updated_at = :now"
            )
        else:
            update_expression = (
                "SET #status = :status, updated_at = :now REMOVE payment_confirmed_at"
            )

        previous = self._db.update_item(
            self._table,
            {"id": order_id},
            update_expression=update_expression,
            values=values,
            names={"#status": "status", "#id": "id"},  # status is reserved word
            condition="attribute_exists(#id)",
            return_values="ALL_OLD",
        )
        if previous is None:
            return None

        from_status = _parse_status(previous.get("status"))
        return OrderTransition(
            order_id=order_id,
            from_status=from_status,
            to_status=status,
            event=event,
            payment_id=payment_id,
            correlation_key=correlation_key,
            occurred_at=now,
            is_regression=not is_legal_transition(from_status, status),
        )

    def update_status_by_id(
        self,
        order_id: str,
        status: OrderStatus,
        *,
        event: str | None = None,
        payment_id: str | None = None,
    ) -> ResolutionOutcome:
        """Update an order addressed by its primary key (externalReference).

        Args:
            order_id: Order primary key
            status: New order status
            event: Asaas event name, for the emitted transition
            payment_id: Asaas payment ID, for the emitted transition

        Returns:
            resolved, not_found, or storage_error outcome
        """
        key = CorrelationKey.EXTERNAL_REFERENCE
        try:
            transition = self._apply_status(
                order_id,
                status,
                event=event,
                payment_id=payment_id,
                correlation_key=key,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to update order %s: %s", order_id, e)
            return ResolutionOutcome.storage_error(key, order_id, str(e))

        if transition is None:
            return ResolutionOutcome.not_found(key, order_id)
        return ResolutionOutcome.resolved(key, order_id, [transition])

    def update_status_by_payment_id(
        self,
        payment_id: str,
        status: OrderStatus,
        *,
        event: str | None = None,
    ) -> ResolutionOutcome:
        """Update every order whose asaas_payment_id matches the payment.

        Each matching order is written independently. When some writes
        fail, the outcome is storage_error and still carries the
        transitions of the writes that committed.

        Args:
            payment_id: Asaas payment ID
            status: New order status
            event: Asaas event name, for the emitted transition

        Returns:
            resolved, not_found, or storage_error outcome
        """
        key = CorrelationKey.ASAAS_PAYMENT_ID
        try:
            items = self._db.query_by_gsi(
                self._table,
                self._payment_id_index,
                "asaas_payment_id",
                payment_id,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to look up orders by asaas_payment_id %s: %s", payment_id, e)
            return ResolutionOutcome.storage_error(key, payment_id, str(e))

        transitions: list[OrderTransition] = []
        first_error: str | None = None
        for item in items:
            try:
                transition = self._apply_status(
                    item["id"],
                    status,
                    event=event,
                    payment_id=payment_id,
                    correlation_key=key,
                )
            except (ClientError, BotoCoreError) as e:
                logger.error("Failed to update order %s: %s", item["id"], e)
                first_error = first_error or str(e)
                continue
            if transition is not None:
                transitions.append(transition)

        if first_error is not None:
            return ResolutionOutcome.storage_error(key, payment_id, first_error, transitions)
        if not transitions:
            return ResolutionOutcome.not_found(key, payment_id)
        return ResolutionOutcome.resolved(key, payment_id, transitions)


def _parse_status(value: Any) -> OrderStatus | None:
    """Parse a stored status, tolerating values outside the enum."""
    if value is None:
        return None
    try:
        return OrderStatus(value)
    except ValueError:
        logger.warning("Order has unknown stored status %r", value)
        return None
