"""
Type definitions for the Yandex Pay SDK.

This module contains the enums and constants shared by the REST client
and the webhook subsystem.
"""

from enum import Enum


class Environment(str, Enum):
    """Yandex Pay API environments."""

    PRODUCTION = "production"
    SANDBOX = "sandbox"

    @classmethod
    def from_string(cls, value: str) -> "Environment":
        value_lower = value.strip().lower()
        for member in cls:
            if member.value == value_lower:
                return member
        raise ValueError(f"Unknown environment: {value}")


API_HOSTS = {
    Environment.PRODUCTION: "https://pay.yandex.ru",
    Environment.SANDBOX: "https://sandbox.pay.yandex.ru",
}

JWKS_URLS = {env: f"{host}/api/jwks" for env, host in API_HOSTS.items()}


class NotificationFormat(str, Enum):
    """Webhook payload generations."""

    LEGACY = "legacy"
    MODERN = "modern"


class EventType(str, Enum):
    """Event categories carried by modern webhook notifications."""

    ORDER_STATUS_UPDATED = "ORDER_STATUS_UPDATED"
    OPERATION_STATUS_UPDATED = "OPERATION_STATUS_UPDATED"
    SUBSCRIPTION_STATUS_UPDATED = "SUBSCRIPTION_STATUS_UPDATED"
    REFUND_STATUS_UPDATED = "REFUND_STATUS_UPDATED"

    @classmethod
    def values(cls) -> frozenset[str]:
        return frozenset(member.value for member in cls)


class OperationStatus(str, Enum):
    """Status of a single operation (capture, refund, ...)."""

    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAIL = "FAIL"


class PaymentStatus(str, Enum):
    """Payment status of an order."""

    PENDING = "PENDING"
    AUTHORIZED = "AUTHORIZED"
    CAPTURED = "CAPTURED"
    CONFIRMED = "CONFIRMED"
    PARTIALLY_REFUNDED = "PARTIALLY_REFUNDED"
    REFUNDED = "REFUNDED"
    VOIDED = "VOIDED"
    FAILED = "FAILED"


class SubscriptionStatus(str, Enum):
    """Status of a customer subscription."""

    NEW = "NEW"
    ACTIVE = "ACTIVE"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"


class OperationType(str, Enum):
    """Kinds of operations reported in operation notifications."""

    AUTHORIZE = "AUTHORIZE"
    BIND_CARD = "BIND_CARD"
    REFUND = "REFUND"
    CAPTURE = "CAPTURE"
    VOID = "VOID"
    RECURRING = "RECURRING"
    PREPAYMENT = "PREPAYMENT"
    SUBMIT = "SUBMIT"


ORDER_SUCCESS_STATUSES = frozenset(
    {
        PaymentStatus.AUTHORIZED.value,
        PaymentStatus.CAPTURED.value,
        PaymentStatus.CONFIRMED.value,
        PaymentStatus.PARTIALLY_REFUNDED.value,
        PaymentStatus.REFUNDED.value,
        PaymentStatus.VOIDED.value,
    }
)
ORDER_FAILURE_STATUSES = frozenset({PaymentStatus.FAILED.value})

REFUND_SUCCESS_STATUSES = frozenset(
    {PaymentStatus.REFUNDED.value, PaymentStatus.PARTIALLY_REFUNDED.value}
)

SUBSCRIPTION_FAILURE_STATUSES = frozenset(
    {SubscriptionStatus.CANCELLED.value, SubscriptionStatus.EXPIRED.value}
)

# Keys (after snake_case normalization) that only the legacy callback carries
LEGACY_FORMAT_KEYS = frozenset({"checksum", "md_order", "authorize_id"})
# Flat fields that mark an event-less payload as legacy
LEGACY_FLAT_STATUS_KEYS = ("status", "operation")

# Legacy callback values
LEGACY_STATUS_SUCCESS = "1"
LEGACY_STATUS_FAILURE = "0"
LEGACY_OPERATION_DECLINED_BY_TIMEOUT = "declinedByTimeout"

# Signed webhook tokens are always ES256
WEBHOOK_TOKEN_ALGORITHM = "ES256"


class NotificationOutcome(str, Enum):
    """Classification of a notification's status."""

    SUCCESS = "success"
    FAILED = "failed"
    PENDING = "pending"
