"""Contract tests for POST /api/webhooks/asaas.

Exercises the endpoint end to end against a moto-mocked orders table:
- Token authentication (401, and 500 when no token is configured)
- Order updates by externalReference and by asaas_payment_id
- Acknowledged no-op deliveries (no payment data, unhandled events)
- Storage failures (500 only on the externalReference path)
- CORS preflight
"""

import json
from typing import Any, Callable
from unittest.mock import patch

import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient
from starlette.status import (
    HTTP_200_OK,
    HTTP_401_UNAUTHORIZED,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from storefront.services.dynamodb import DynamoDBService
from storefront_api.main import app

from conftest import TEST_WEBHOOK_TOKEN

WEBHOOK_URL = "/api/webhooks/asaas"

CORS_ALLOW_HEADERS = "authorization, x-client-info, apikey, content-type, asaas-access-token"


# === Test Fixtures ===


@pytest.fixture
def client() -> TestClient:
    """Create test client for API."""
    return TestClient(app)


@pytest.fixture
def configured(monkeypatch: pytest.MonkeyPatch, orders_table: str) -> None:
    """Webhook token configured and the orders table mocked."""
    monkeypatch.setenv("ASAAS_WEBHOOK_TOKEN", TEST_WEBHOOK_TOKEN)
    monkeypatch.delenv("ASAAS_WEBHOOK_TOKEN_PARAMETER", raising=False)


@pytest.fixture
def unconfigured(monkeypatch: pytest.MonkeyPatch, orders_table: str) -> None:
    """No webhook token available for this deployment."""
    monkeypatch.delenv("ASAAS_WEBHOOK_TOKEN", raising=False)
    monkeypatch.delenv("ASAAS_WEBHOOK_TOKEN_PARAMETER", raising=False)


@pytest.fixture
def post_event(client: TestClient) -> Callable[..., Any]:
    """POST a payload with the test token (or the given headers)."""

    def _post(payload: Any, headers: dict[str, str] | None = None):
        if headers is None:
            headers = {"asaas-access-token": TEST_WEBHOOK_TOKEN}
        return client.post(
            WEBHOOK_URL,
            content=json.dumps(payload),
            headers={"Content-Type": "application/json", **headers},
        )

    return _post


# === Authentication ===


class TestWebhookAuthentication:
    """Token check on every delivery."""

    def test_invalid_token_returns_401(self, configured, post_event, make_event, seed_order, db):
        seed_order("order-123", status="awaiting_payment")

        response = post_event(make_event(), headers={"asaas-access-token": "wrong"})

        assert response.status_code == HTTP_401_UNAUTHORIZED
        assert response.json() == {"error": "Unauthorized"}
        assert response.headers["access-control-allow-origin"] == "*"
        assert db.get_item("orders", {"id": "order-123"})["status"] == "awaiting_payment"

    def test_missing_token_returns_401(self, configured, post_event, make_event):
        response = post_event(make_event(), headers={})

        assert response.status_code == HTTP_401_UNAUTHORIZED

    def test_unconfigured_token_returns_500(self, unconfigured, post_event, make_event, seed_order, db):
        seed_order("order-123", status="awaiting_payment")

        response = post_event(make_event(), headers={"asaas-access-token": ""})

        assert response.status_code == HTTP_500_INTERNAL_SERVER_ERROR
        assert "error" in response.json()
        assert db.get_item("orders", {"id": "order-123"})["status"] == "awaiting_payment"

    def test_unconfigured_rejects_requests_without_token(self, unconfigured, post_event, make_event):
        response = post_event(make_event(), headers={})

        assert response.status_code == HTTP_500_INTERNAL_SERVER_ERROR


# === Order updates ===


class TestWebhookOrderUpdates:
    """Status updates for handled events."""

    def test_confirmed_payment_marks_order_paid(self, configured, post_event, make_event, seed_order, db):
        seed_order("o1", status="awaiting_payment")

        response = post_event(
            make_event(event="PAYMENT_CONFIRMED", status="CONFIRMED", payment_id="pay-1", external_reference="o1")
        )

        assert response.status_code == HTTP_200_OK
        assert response.json() == {"received": True}
        item = db.get_item("orders", {"id": "o1"})
        assert item["status"] == "paid"
        assert item["payment_confirmed_at"]

    def test_overdue_payment_clears_confirmation(self, configured, post_event, make_event, seed_order, db):
        seed_order("o2", status="paid", payment_confirmed_at="2025-06-01T10:00:00+00:00")

        response = post_event(
            make_event(event="PAYMENT_OVERDUE", status="OVERDUE", payment_id="pay-2", external_reference="o2")
        )

        assert response.status_code == HTTP_200_OK
        item = db.get_item("orders", {"id": "o2"})
        assert item["status"] == "payment_overdue"
        assert "payment_confirmed_at" not in item

    @pytest.mark.parametrize(
        "event,asaas_status,expected",
        [
            ("PAYMENT_RECEIVED", "RECEIVED_IN_CASH", "paid"),
            ("PAYMENT_REFUNDED", "REFUNDED", "refunded"),
            ("PAYMENT_UPDATED", "PENDING", "awaiting_payment"),
            ("PAYMENT_DUNNING_RECEIVED", "DUNNING_RECEIVED", "dunning"),
            ("PAYMENT_DELETED", "DELETED", "pending"),
        ],
    )
    def test_status_mapping(self, configured, post_event, make_event, seed_order, db, event, asaas_status, expected):
        seed_order("order-123", status="awaiting_payment")

        response = post_event(make_event(event=event, status=asaas_status))

        assert response.status_code == HTTP_200_OK
        assert db.get_item("orders", {"id": "order-123"})["status"] == expected

    def test_fallback_to_asaas_payment_id(self, configured, post_event, make_event, seed_order, db):
        seed_order("order-456", status="awaiting_payment", asaas_payment_id="pay-456")

        response = post_event(
            make_event(event="PAYMENT_RECEIVED", status="RECEIVED", payment_id="pay-456", external_reference=None)
        )

        assert response.status_code == HTTP_200_OK
        assert response.json() == {"received": True}
        assert db.get_item("orders", {"id": "order-456"})["status"] == "paid"

    def test_unknown_order_is_acknowledged(self, configured, post_event, make_event, db):
        response = post_event(make_event(external_reference="order-missing"))

        assert response.status_code == HTTP_200_OK
        assert response.json() == {"received": True}
        assert db.get_item("orders", {"id": "order-missing"}) is None


# === Acknowledged no-ops ===


class TestWebhookNoOps:
    """Deliveries acknowledged without touching any order."""

    def test_no_payment_data(self, configured, post_event):
        response = post_event({"event": "PAYMENT_CONFIRMED"})

        assert response.status_code == HTTP_200_OK
        assert response.json() == {"message": "No payment data"}

    def test_unhandled_event(self, configured, post_event, make_event, seed_order, db):
        seed_order("order-123", status="awaiting_payment")

        response = post_event(make_event(event="PAYMENT_CREATED", status="PENDING"))

        assert response.status_code == HTTP_200_OK
        assert response.json() == {"received": True}
        assert db.get_item("orders", {"id": "order-123"})["status"] == "awaiting_payment"


# === Errors ===


class TestWebhookErrors:
    """Malformed bodies and storage failures."""

    def test_invalid_json_returns_500(self, configured, client):
        response = client.post(
            WEBHOOK_URL,
            content=b"not json",
            headers={"asaas-access-token": TEST_WEBHOOK_TOKEN},
        )

        assert response.status_code == HTTP_500_INTERNAL_SERVER_ERROR
        assert "error" in response.json()

    def test_storage_error_on_external_reference_returns_500(self, configured, post_event, make_event):
        error = ClientError(
            {"Error": {"Code": "InternalServerError", "Message": "Internal server error"}},
            "UpdateItem",
        )
        with patch.object(DynamoDBService, "update_item", side_effect=error):
            response = post_event(make_event())

        assert response.status_code == HTTP_500_INTERNAL_SERVER_ERROR
        assert "Internal server error" in response.json()["error"]
        assert response.headers["access-control-allow-origin"] == "*"

    def test_storage_error_on_fallback_returns_200(self, configured, post_event, make_event):
        error = ClientError(
            {"Error": {"Code": "InternalServerError", "Message": "Internal server error"}},
            "Query",
        )
        with patch.object(DynamoDBService, "query_by_gsi", side_effect=error):
            response = post_event(make_event(external_reference=None))

        assert response.status_code == HTTP_200_OK
        assert response.json() == {"received": True}


# === CORS ===


class TestWebhookPreflight:
    """OPTIONS handling."""

    def test_options_without_origin_returns_ok(self, client):
        response = client.options(WEBHOOK_URL)

        assert response.status_code == HTTP_200_OK
        assert response.text == "ok"
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["access-control-allow-headers"] == CORS_ALLOW_HEADERS

    def test_options_needs_no_token(self, unconfigured, client):
        response = client.options(WEBHOOK_URL)

        assert response.status_code == HTTP_200_OK


class TestWebhookPreflightWithRestrictedOrigins:
    """Webhook preflight is independent of the storefront's CORS origins."""

    @pytest.fixture
    def restricted_client(self) -> TestClient:
        """App stacked like storefront_api.main, with origins restricted."""
        from fastapi import FastAPI
        from fastapi.middleware.cors import CORSMiddleware

        from storefront_api.middleware.webhook_preflight import WebhookPreflightMiddleware
        from storefront_api.routes.webhooks import router

        restricted = FastAPI()
        restricted.add_middleware(
            CORSMiddleware,
            allow_origins=["https://loja.example.com"],
            allow_methods=["*"],
            allow_headers=["*"],
        )
        restricted.add_middleware(WebhookPreflightMiddleware)
        restricted.include_router(router, prefix="/api")
        return TestClient(restricted)

    def test_preflight_from_other_origin_succeeds(self, restricted_client):
        response = restricted_client.options(
            WEBHOOK_URL,
            headers={
                "Origin": "https://tools.example.net",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "asaas-access-token, content-type",
            },
        )

        assert response.status_code == HTTP_200_OK
        assert response.text == "ok"
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["access-control-allow-headers"] == CORS_ALLOW_HEADERS

    def test_other_routes_keep_restricted_policy(self, restricted_client):
        response = restricted_client.options(
            "/api/orders/order-123/payment-status",
            headers={
                "Origin": "https://tools.example.net",
                "Access-Control-Request-Method": "GET",
            },
        )

        assert response.status_code != HTTP_200_OK

    def test_app_runs_preflight_before_cors_policy(self):
        from fastapi.middleware.cors import CORSMiddleware

        from storefront_api.middleware.webhook_preflight import WebhookPreflightMiddleware

        # user_middleware is ordered outermost first
        stack = [middleware.cls for middleware in app.user_middleware]
        assert stack.index(WebhookPreflightMiddleware) < stack.index(CORSMiddleware)
