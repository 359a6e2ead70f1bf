"""FastAPI dependency injection providers for shared services.

Services are built lazily once per process with @lru_cache, so warm
serverless invocations reuse the same settings, boto3 resource and
publisher.

Usage in routes:
    from storefront_api.dependencies import get_webhook_handler

    @router.post("/webhooks/asaas")
    async def receive(handler: AsaasWebhookHandler = Depends(get_webhook_handler)):
        ...

Service Dependency Graph:
    WebhookSettings (read once from environment / SSM)
    DynamoDBService (singleton via get_dynamodb_service)
        └── OrderStore
                └── AsaasWebhookHandler ── TransitionPublisher

Testing:
    Use reset_services() to clear cached instances between tests, or
    app.dependency_overrides to inject fixtures.
"""

from functools import lru_cache

from storefront.config import WebhookSettings
from storefront.services.dynamodb import get_dynamodb_service
from storefront.services.notifications import get_transition_publisher
from storefront.services.order_store import OrderStore
from storefront.services.webhook_handler import AsaasWebhookHandler


@lru_cache
def get_webhook_settings() -> WebhookSettings:
    """Get cached WebhookSettings loaded from the environment."""
    return WebhookSettings.from_environment()


@lru_cache
def get_order_store() -> OrderStore:
    """Get cached OrderStore instance.

    Returns:
        OrderStore configured with the DynamoDB singleton.
    """
    settings = get_webhook_settings()
    return OrderStore(
        db=get_dynamodb_service(),
        table=settings.orders_table,
        payment_id_index=settings.payment_id_index,
    )


@lru_cache
def get_webhook_handler() -> AsaasWebhookHandler:
    """Get cached AsaasWebhookHandler instance.

    Returns:
        AsaasWebhookHandler wired to settings, store and publisher.
    """
    return AsaasWebhookHandler(
        settings=get_webhook_settings(),
        store=get_order_store(),
        publisher=get_transition_publisher(),
    )


def reset_services() -> None:
    """Clear all cached service instances.

    Also resets the underlying DynamoDB and publisher singletons.
    """
    from storefront.services.dynamodb import reset_dynamodb_service
    from storefront.services.notifications import reset_transition_publisher

    get_webhook_settings.cache_clear()
    get_order_store.cache_clear()
    get_webhook_handler.cache_clear()

    reset_dynamodb_service()
    reset_transition_publisher()
