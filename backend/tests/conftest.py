"""Pytest configuration and fixtures for storefront backend tests.

This module provides reusable fixtures for testing:
- DynamoDB mocking with moto (orders table + asaas_payment_id GSI)
- Order store, publisher and webhook handler wiring
- Sample Asaas webhook payloads
"""

import os
from datetime import datetime, timezone
from typing import Any, Callable, Generator

import boto3
import pytest
from moto import mock_aws

# === Environment Setup ===

# Set environment variables for testing before imports
os.environ.setdefault("AWS_DEFAULT_REGION", "sa-east-1")
os.environ.setdefault("DYNAMODB_TABLE_PREFIX", "test-storefront")

# Only set fake credentials for moto if no real credentials are present
if not os.environ.get("AWS_PROFILE") and not os.environ.get("AWS_ACCESS_KEY_ID"):
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

from storefront.config import WebhookSettings  # noqa: E402
from storefront.models.asaas_webhook import OrderTransition  # noqa: E402
from storefront.services.dynamodb import DynamoDBService  # noqa: E402
from storefront.services.notifications import TransitionPublisher  # noqa: E402
from storefront.services.order_store import OrderStore  # noqa: E402
from storefront.services.webhook_handler import AsaasWebhookHandler  # noqa: E402

TEST_WEBHOOK_TOKEN = "asaas_test_token_9f8e7d"
ORDERS_TABLE_NAME = "test-storefront-orders"
FIXED_NOW = datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


# === Singleton Reset ===


@pytest.fixture(autouse=True)
def reset_singletons() -> Generator[None, None, None]:
    """Reset cached services before and after each test.

    Ensures tests using mock_aws get fresh boto3 resources inside the mock
    context and settings re-read from the current environment.
    """
    from storefront_api.dependencies import reset_services

    reset_services()
    yield
    reset_services()


# === DynamoDB Fixtures ===


@pytest.fixture
def aws_credentials() -> None:
    """Mocked AWS Credentials for moto."""
    if not os.environ.get("AWS_PROFILE"):
        os.environ["AWS_ACCESS_KEY_ID"] = "testing"
        os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
        os.environ["AWS_SECURITY_TOKEN"] = "testing"
        os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "sa-east-1"


@pytest.fixture
def dynamodb_client(aws_credentials: None) -> Generator[Any, None, None]:
    """Create a mocked DynamoDB client."""
    with mock_aws():
        client = boto3.client("dynamodb", region_name="sa-east-1")
        yield client


@pytest.fixture
def orders_table(dynamodb_client: Any) -> str:
    """Create the orders table with the asaas_payment_id GSI."""
    dynamodb_client.create_table(
        TableName=ORDERS_TABLE_NAME,
        KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
        AttributeDefinitions=[
            {"AttributeName": "id", "AttributeType": "S"},
            {"AttributeName": "asaas_payment_id", "AttributeType": "S"},
        ],
        GlobalSecondaryIndexes=[
            {
                "IndexName": "asaas_payment_id-index",
                "KeySchema": [{"AttributeName": "asaas_payment_id", "KeyType": "HASH"}],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    return ORDERS_TABLE_NAME


@pytest.fixture
def db(orders_table: str) -> DynamoDBService:
    """DynamoDBService bound to the mocked tables."""
    return DynamoDBService(environment="test")


@pytest.fixture
def seed_order(db: DynamoDBService) -> Callable[..., dict[str, Any]]:
    """Factory that stores an order and returns the stored item."""

    def _seed(order_id: str, status: str = "pending", **fields: Any) -> dict[str, Any]:
        item = {
            "id": order_id,
            "status": status,
            "total": "289.90",
            "created_at": "2025-06-14T18:30:00+00:00",
            **fields,
        }
        db.put_item("orders", item)
        return item

    return _seed


@pytest.fixture
def order_store(db: DynamoDBService) -> OrderStore:
    """OrderStore with a fixed clock."""
    return OrderStore(db, clock=lambda: FIXED_NOW)


# === Webhook Fixtures ===


@pytest.fixture
def webhook_settings() -> WebhookSettings:
    """Settings with the test webhook token configured."""
    return WebhookSettings(webhook_token=TEST_WEBHOOK_TOKEN)


@pytest.fixture
def published() -> list[OrderTransition]:
    """Transitions delivered to the test publisher."""
    return []


@pytest.fixture
def publisher(published: list[OrderTransition]) -> TransitionPublisher:
    """Publisher recording every transition into `published`."""
    pub = TransitionPublisher()
    pub.subscribe(published.append)
    return pub


@pytest.fixture
def webhook_handler(
    webhook_settings: WebhookSettings,
    order_store: OrderStore,
    publisher: TransitionPublisher,
) -> AsaasWebhookHandler:
    """Handler wired to the mocked order store."""
    return AsaasWebhookHandler(webhook_settings, order_store, publisher)


@pytest.fixture
def make_event() -> Callable[..., dict[str, Any]]:
    """Factory for Asaas webhook payloads."""

    def _make(
        event: str = "PAYMENT_CONFIRMED",
        status: str | None = "CONFIRMED",
        payment_id: str | None = "pay_080225913252",
        external_reference: str | None = "order-123",
    ) -> dict[str, Any]:
        payment: dict[str, Any] = {
            "object": "payment",
            "customer": "cus_000005219613",
            "value": 289.9,
            "netValue": 284.1,
            "billingType": "PIX",
            "dueDate": "2025-06-16",
        }
        if payment_id is not None:
            payment["id"] = payment_id
        if status is not None:
            payment["status"] = status
        if external_reference is not None:
            payment["externalReference"] = external_reference
        return {
            "id": "evt_05b708f961d739ea7eba7e4db318f621&368604920",
            "event": event,
            "dateCreated": "2025-06-15 12:00:00",
            "payment": payment,
        }

    return _make
