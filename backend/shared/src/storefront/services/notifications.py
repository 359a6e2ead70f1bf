"""In-process publisher for order status transitions.

Follow-on actions for a confirmed payment (confirmation email, stock
update, admin alert) subscribe here instead of living in the webhook.
"""

import logging
from typing import Callable

from storefront.models.asaas_webhook import OrderTransition

logger = logging.getLogger(__name__)

TransitionListener = Callable[[OrderTransition], None]


class TransitionPublisher:
    """Fan-out of applied order transitions to registered listeners."""

    def __init__(self) -> None:
        self._listeners: list[TransitionListener] = []

    def subscribe(self, listener: TransitionListener) -> None:
        """Register a listener. Registering the same listener twice is a no-op."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: TransitionListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def publish(self, transition: OrderTransition) -> int:
        """Deliver a transition to every listener.

        The order is already updated when this runs, so a failing listener
        is logged and the remaining listeners still run.

        Args:
            transition: The applied transition

        Returns:
            Number of listeners that handled the transition without error
        """
        delivered = 0
        for listener in list(self._listeners):
            try:
                listener(transition)
                delivered += 1
            except Exception:
                logger.exception(
                    "Transition listener %r failed for order %s",
                    listener,
                    transition.order_id,
                )
        return delivered


_publisher_instance: TransitionPublisher | None = None


def get_transition_publisher() -> TransitionPublisher:
    """Get or create the process-wide transition publisher."""
    global _publisher_instance
    if _publisher_instance is None:
        _publisher_instance = TransitionPublisher()
    return _publisher_instance


def reset_transition_publisher() -> None:
    """Drop the process-wide publisher and its listeners (for testing only)."""
    global _publisher_instance
    _publisher_instance = None
