"""Webhook handler for processing Asaas payment events.

Provides business logic for handling webhook events separate from
HTTP routing concerns. This enables:
- Unit testing without HTTP overhead
- Reuse across different transport mechanisms (API Gateway, uvicorn)
"""

import json
from typing import Any

from storefront.config import WebhookSettings
from storefront.models.asaas_webhook import (
    AsaasWebhookEvent,
    ResolutionOutcome,
    WebhookResult,
)
from storefront.models.enums import ResolutionKind
from storefront.models.errors import ErrorCode, StorefrontError
from storefront.services.notifications import TransitionPublisher
from storefront.services.order_store import OrderStore
from storefront.services.status_mapping import is_handled_event, map_payment_status
from storefront.utils.logging import get_logger, log_order_transition, log_webhook_event

logger = get_logger(__name__)

ACCESS_TOKEN_HEADER = "asaas-access-token"

RECEIVED_BODY: dict[str, Any] = {"received": True}
NO_PAYMENT_DATA_BODY: dict[str, Any] = {"message": "No payment data"}


class AsaasWebhookHandler:
    """Handler for Asaas payment webhook events.

    Authenticates the caller with the shared access token, maps the Asaas
    payment status to an order status and writes it to the matching order.

    Error visibility differs by correlation path: a storage failure while
    updating by externalReference is raised so the gateway redelivers the
    event, while every outcome of the asaas_payment_id fallback is only
    logged and acknowledged.
    """

    def __init__(
        self,
        settings: WebhookSettings,
        store: OrderStore,
        publisher: TransitionPublisher | None = None,
    ) -> None:
        """Initialize webhook handler.

        Args:
            settings: Webhook configuration (token read once at startup)
            store: Order store used for updates
            publisher: Receives transitions after a successful write
        """
        self._settings = settings
        self._store = store
        self._publisher = publisher

    def authenticate(self, token: str | None) -> None:
        """Check the caller's access token.

        Raises:
            StorefrontError: WEBHOOK_NOT_CONFIGURED if no token is configured
                for this deployment, INVALID_WEBHOOK_TOKEN on mismatch
        """
        if not self._settings.is_configured:
            logger.error(
                "ASAAS_WEBHOOK_TOKEN is not configured; refusing to process webhook"
            )
            raise StorefrontError(ErrorCode.WEBHOOK_NOT_CONFIGURED)

        if token != self._settings.webhook_token:
            logger.warning("Webhook request with invalid %s header", ACCESS_TOKEN_HEADER)
            raise StorefrontError(ErrorCode.INVALID_WEBHOOK_TOKEN)

    @staticmethod
    def parse_body(body: bytes) -> dict[str, Any]:
        """Decode a webhook body into a JSON object.

        Raises:
            StorefrontError: INVALID_PAYLOAD if the body is not a JSON object
        """
        try:
            payload = json.loads(body)
        except (UnicodeDecodeError, ValueError) as e:
            raise StorefrontError(ErrorCode.INVALID_PAYLOAD, message=str(e)) from e

        if not isinstance(payload, dict):
            raise StorefrontError(ErrorCode.INVALID_PAYLOAD)
        return payload

    def handle(self, token: str | None, body: bytes) -> WebhookResult:
        """Handle one inbound webhook delivery.

        Args:
            token: Value of the asaas-access-token header (None if absent)
            body: Raw request body

        Returns:
            WebhookResult with the response to send

        Raises:
            StorefrontError: On authentication failure, malformed body,
                or a failed update by externalReference
        """
        self.authenticate(token)
        payload = self.parse_body(body)
        return self.process_event(AsaasWebhookEvent.parse_payload(payload))

    def process_event(self, event: AsaasWebhookEvent) -> WebhookResult:
        """Apply an authenticated event to the matching order.

        Args:
            event: Parsed Asaas event

        Returns:
            WebhookResult with the response to send

        Raises:
            StorefrontError: ORDER_UPDATE_FAILED if the update by
                externalReference fails in storage
        """
        payment_id = event.payment_id
        log_webhook_event(logger, event.event, payment_id, result="received")

        if not payment_id:
            return WebhookResult(body=dict(NO_PAYMENT_DATA_BODY))

        if not is_handled_event(event.event):
            log_webhook_event(logger, event.event, payment_id, result="ignored")
            return WebhookResult(body=dict(RECEIVED_BODY))

        new_status = map_payment_status(event.payment.status)
        order_id = event.payment.external_reference

        if order_id:
            outcome = self._store.update_status_by_id(
                order_id,
                new_status,
                event=event.event,
                payment_id=payment_id,
            )
            if outcome.kind == ResolutionKind.STORAGE_ERROR:
                log_webhook_event(
                    logger,
                    event.event,
                    payment_id,
                    order_id=order_id,
                    result="error",
                    error=outcome.error,
                )
                raise StorefrontError(
                    ErrorCode.ORDER_UPDATE_FAILED,
                    details={"order_id": order_id},
                    message=outcome.error,
                )
        else:
            outcome = self._store.update_status_by_payment_id(
                payment_id,
                new_status,
                event=event.event,
            )
            # Writes that committed before the failure are still emitted below
            if outcome.kind == ResolutionKind.STORAGE_ERROR:
                updated = {"updated": ",".join(outcome.order_ids)} if outcome.transitions else {}
                log_webhook_event(
                    logger,
                    event.event,
                    payment_id,
                    result="error",
                    error=outcome.error,
                    correlation_key=outcome.correlation_key.value,
                    **updated,
                )

        if outcome.kind == ResolutionKind.NOT_FOUND:
            log_webhook_event(
                logger,
                event.event,
                payment_id,
                order_id=order_id,
                result="not_found",
                correlation_key=outcome.correlation_key.value,
            )

        self._emit(outcome)
        return WebhookResult(body=dict(RECEIVED_BODY), outcome=outcome)

    def _emit(self, outcome: ResolutionOutcome) -> None:
        """Log and publish every committed transition of an outcome."""
        for transition in outcome.transitions:
            log_order_transition(logger, transition)
            if self._publisher is not None:
                self._publisher.publish(transition)
