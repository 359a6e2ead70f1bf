"""Enumeration types for storefront data models."""

from enum import Enum


class OrderStatus(str, Enum):
    """Lifecycle status of an order."""

    PENDING = "pending"
    AWAITING_PAYMENT = "awaiting_payment"
    PAID = "paid"
    PAYMENT_OVERDUE = "payment_overdue"
    REFUNDED = "refunded"
    DUNNING = "dunning"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class AsaasEventType(str, Enum):
    """Asaas webhook events that trigger an order update."""

    PAYMENT_CONFIRMED = "PAYMENT_CONFIRMED"
    PAYMENT_RECEIVED = "PAYMENT_RECEIVED"
    PAYMENT_OVERDUE = "PAYMENT_OVERDUE"
    PAYMENT_REFUNDED = "PAYMENT_REFUNDED"
    PAYMENT_DELETED = "PAYMENT_DELETED"
    PAYMENT_UPDATED = "PAYMENT_UPDATED"
    PAYMENT_DUNNING_RECEIVED = "PAYMENT_DUNNING_RECEIVED"


class CorrelationKey(str, Enum):
    """Field used to match a webhook event to an order."""

    EXTERNAL_REFERENCE = "external_reference"
    ASAAS_PAYMENT_ID = "asaas_payment_id"


class ResolutionKind(str, Enum):
    """Result of resolving and updating an order."""

    RESOLVED = "resolved"
    NOT_FOUND = "not_found"
    STORAGE_ERROR = "storage_error"
