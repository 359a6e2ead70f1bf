"""SSM Parameter Store reader for deployment secrets.

Deployments that do not inject ASAAS_WEBHOOK_TOKEN directly point
ASAAS_WEBHOOK_TOKEN_PARAMETER at a SecureString, e.g.
``/storefront/prod/asaas/webhook_token``.
"""

import logging
from functools import lru_cache
from typing import ClassVar

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)

_ERROR_HINTS = {
    "ParameterNotFound": "SSM parameter not found: {name}",
    "AccessDeniedException": (
        "Access denied to SSM parameter: {name}. "
        "Check IAM permissions for ssm:GetParameter."
    ),
}


class SSMServiceError(Exception):
    """A parameter could not be read."""


class SSMService:
    """Reads decrypted parameters, caching them for the life of the process."""

    # Shared by every instance so warm invocations skip the API call
    _cache: ClassVar[dict[str, str]] = {}

    def __init__(self) -> None:
        self._client = boto3.client("ssm")

    def get_parameter(self, name: str, *, use_cache: bool = True) -> str:
        """Return the decrypted value of a parameter.

        Args:
            name: Full parameter path
            use_cache: Return a previously read value without calling SSM

        Raises:
            SSMServiceError: If the parameter is missing, not readable, or
                the call fails
        """
        if use_cache and name in self._cache:
            return self._cache[name]

        logger.info("Fetching SSM parameter: %s", name)
        try:
            response = self._client.get_parameter(Name=name, WithDecryption=True)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "Unknown")
            hint = _ERROR_HINTS.get(code, "Failed to retrieve SSM parameter {name}: {error}")
            raise SSMServiceError(hint.format(name=name, error=e)) from e

        value: str = response["Parameter"]["Value"]
        self._cache[name] = value
        return value

    def clear_cache(self) -> None:
        self._cache.clear()


@lru_cache(maxsize=1)
def get_ssm_service() -> SSMService:
    """Get the process-wide SSMService."""
    return SSMService()
