"""Runtime configuration for the payment webhook.

Settings are read from the process environment once and passed to the
services that need them, so tests build WebhookSettings directly instead
of patching os.environ.

Environment variables:
    ASAAS_WEBHOOK_TOKEN: Shared access token Asaas sends in the
        asaas-access-token header.
    ASAAS_WEBHOOK_TOKEN_PARAMETER: SSM parameter holding the token, used
        when ASAAS_WEBHOOK_TOKEN is not set.
    ORDERS_TABLE: Orders table name without prefix (default: orders).
    ORDERS_PAYMENT_ID_INDEX: GSI on asaas_payment_id.
    CORS_ALLOW_ORIGINS: Comma-separated origins for the browser-facing API.
"""

import logging
import os

from botocore.exceptions import BotoCoreError
from pydantic import BaseModel, ConfigDict, Field

from storefront.services.ssm_service import SSMServiceError, get_ssm_service

logger = logging.getLogger(__name__)


class WebhookSettings(BaseModel):
    """Configuration injected into the webhook handler."""

    model_config = ConfigDict(frozen=True)

    webhook_token: str | None = Field(
        default=None,
        description="Expected value of the asaas-access-token header",
    )
    orders_table: str = Field(default="orders")
    payment_id_index: str = Field(default="asaas_payment_id-index")

    @property
    def is_configured(self) -> bool:
        """True when a non-empty webhook token is available."""
        return bool(self.webhook_token)

    @classmethod
    def from_environment(cls) -> "WebhookSettings":
        """Load settings from the environment (and SSM for the token).

        A token that cannot be loaded leaves the webhook unconfigured,
        which makes it refuse every request.
        """
        token = os.getenv("ASAAS_WEBHOOK_TOKEN") or None
        parameter = os.getenv("ASAAS_WEBHOOK_TOKEN_PARAMETER")
        if token is None and parameter:
            try:
                token = get_ssm_service().get_parameter(parameter) or None
            except (SSMServiceError, BotoCoreError) as e:
                logger.error("Could not load Asaas webhook token: %s", e)

        return cls(
            webhook_token=token,
            orders_table=os.getenv("ORDERS_TABLE", "orders"),
            payment_id_index=os.getenv("ORDERS_PAYMENT_ID_INDEX", "asaas_payment_id-index"),
        )


def load_cors_origins() -> list[str]:
    """Read CORS_ALLOW_ORIGINS as a list, defaulting to every origin."""
    origins = [
        origin.strip()
        for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
        if origin.strip()
    ]
    return origins or ["*"]
