"""Logging helpers for the storefront backend.

Every log line of a request carries its correlation ID, taken from the
X-Correlation-ID header or generated per request by the API middleware:

    [5f0c...] WARNING storefront.services.webhook_handler: Webhook event:
    PAYMENT_OVERDUE (pay_080225913252) | result=not_found | order=8f14e45f

Webhook outcomes are logged through log_webhook_event() so their fields are
available both in the message (for CloudWatch text search) and as record
attributes (for structured handlers).
"""

import logging
import uuid
from contextvars import ContextVar
from typing import Any

from storefront.models.asaas_webhook import OrderTransition

NO_CORRELATION_ID = "no-correlation-id"

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)

# Results that need attention but are not failures
_WARNING_RESULTS = frozenset({"skipped", "not_found", "unauthorized", "regression"})


def generate_correlation_id() -> str:
    return str(uuid.uuid4())


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Bind a correlation ID to the current context, generating one if empty.

    Returns:
        The bound correlation ID
    """
    value = correlation_id or generate_correlation_id()
    _correlation_id.set(value)
    return value


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def clear_correlation_id() -> None:
    _correlation_id.set(None)


class CorrelationIdFilter(logging.Filter):
    """Stamps each record with the current correlation ID."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or NO_CORRELATION_ID
        return True


class StructuredFormatter(logging.Formatter):
    """Formatter that prefixes every line with ``[correlation_id]``.

    Records from loggers without CorrelationIdFilter (uvicorn, boto) are
    stamped here so the prefix is always present.
    """

    def format(self, record: logging.LogRecord) -> str:
        correlation_id = getattr(record, "correlation_id", None)
        if correlation_id is None:
            correlation_id = get_correlation_id() or NO_CORRELATION_ID
            record.correlation_id = correlation_id
        return f"[{correlation_id}] {super().format(record)}"


def get_logger(name: str) -> logging.Logger:
    """Return the named logger with CorrelationIdFilter attached once."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, CorrelationIdFilter) for f in logger.filters):
        logger.addFilter(CorrelationIdFilter())
    return logger


def log_webhook_event(
    logger: logging.Logger,
    event_type: str | None,
    payment_id: str | None,
    *,
    order_id: str | None = None,
    result: str | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log one step of Asaas webhook processing.

    The level follows the result: ``error`` logs at ERROR, results in
    _WARNING_RESULTS at WARNING, anything else at INFO.

    Args:
        logger: Logger to write to
        event_type: Asaas event name (e.g. "PAYMENT_CONFIRMED")
        payment_id: Asaas payment ID
        order_id: Order the event was applied to, if known
        result: received, ignored, success, regression, not_found, error, ...
        error: Failure message
        **extra: Further key=value fields (correlation_key, from_status, ...)
    """
    fields: dict[str, Any] = {"event_type": event_type, "payment_id": payment_id}
    parts = [f"Webhook event: {event_type} ({payment_id})"]

    if result:
        fields["result"] = result
        parts.append(f"result={result}")
    if order_id:
        fields["order_id"] = order_id
        parts.append(f"order={order_id}")
    for key, value in extra.items():
        fields[key] = value
        parts.append(f"{key}={value}")
    if error:
        fields["error"] = error
        parts.append(f"error={error}")

    if result == "error":
        level = logging.ERROR
    elif result in _WARNING_RESULTS:
        level = logging.WARNING
    else:
        level = logging.INFO
    logger.log(level, " | ".join(parts), extra=fields)


def log_order_transition(logger: logging.Logger, transition: OrderTransition) -> None:
    """Log a status change written to an order (WARNING when it is a regression)."""
    log_webhook_event(
        logger,
        transition.event,
        transition.payment_id,
        order_id=transition.order_id,
        result="regression" if transition.is_regression else "success",
        from_status=transition.from_status.value if transition.from_status else None,
        to_status=transition.to_status.value,
        correlation_key=transition.correlation_key.value,
    )
