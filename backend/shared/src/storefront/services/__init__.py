"""Backend services for the storefront."""

from .dynamodb import DynamoDBService, get_dynamodb_service, reset_dynamodb_service
from .notifications import (
    TransitionPublisher,
    get_transition_publisher,
    reset_transition_publisher,
)
from .order_store import OrderStore
from .ssm_service import SSMService, SSMServiceError, get_ssm_service
from .status_mapping import HANDLED_EVENT_TYPES, is_handled_event, map_payment_status
from .transitions import LEGAL_TRANSITIONS, is_legal_transition

__all__ = [
    "DynamoDBService",
    "get_dynamodb_service",
    "reset_dynamodb_service",
    "TransitionPublisher",
    "get_transition_publisher",
    "reset_transition_publisher",
    "OrderStore",
    "SSMService",
    "SSMServiceError",
    "get_ssm_service",
    "HANDLED_EVENT_TYPES",
    "is_handled_event",
    "map_payment_status",
    "LEGAL_TRANSITIONS",
    "is_legal_transition",
]
