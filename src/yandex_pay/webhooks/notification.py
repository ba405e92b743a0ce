"""
Webhook notifications.

Two payload generations are in circulation:

* legacy callbacks: flat fields (``status``, ``operation``, ``md_order``, ...)
  signed with a shared-secret HMAC;
* modern notifications: nested ``operation`` / ``order`` / ``subscription``
  objects delivered inside an ES256 token.

``Notification.parse()`` decides the generation once and returns a
``LegacyNotification`` or ``ModernNotification``. Both expose the same
read-only accessors; only classification differs.
"""

from __future__ import annotations

import copy
import json
from abc import ABC, abstractmethod
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, ClassVar

from yandex_pay.core.exceptions import UnsupportedTypeError, ValidationError
from yandex_pay.core.types import (
    LEGACY_FORMAT_KEYS,
    LEGACY_FLAT_STATUS_KEYS,
    LEGACY_OPERATION_DECLINED_BY_TIMEOUT,
    LEGACY_STATUS_FAILURE,
    LEGACY_STATUS_SUCCESS,
    ORDER_FAILURE_STATUSES,
    ORDER_SUCCESS_STATUSES,
    REFUND_SUCCESS_STATUSES,
    SUBSCRIPTION_FAILURE_STATUSES,
    EventType,
    NotificationFormat,
    NotificationOutcome,
    OperationStatus,
    PaymentStatus,
    SubscriptionStatus,
)
from yandex_pay.utils.keys import normalize_keys, snake_case
from yandex_pay.webhooks import signature as signatures


def _first(*values: Any) -> Any:
    """First value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


def _is_one_of(value: Any, group: frozenset[str]) -> bool:
    return isinstance(value, str) and value in group


def _is_scalar(value: Any) -> bool:
    return value is not None and not isinstance(value, (Mapping, list, tuple))


def detect_format(data: Any) -> NotificationFormat:
    """
    Legacy if any legacy-only key is present at the top level, or if there
    is no ``event`` and a flat ``status`` or ``operation`` field is. Modern
    otherwise.
    """
    if not isinstance(data, Mapping):
        return NotificationFormat.MODERN

    top_level = {snake_case(k): v for k, v in data.items()}
    if top_level.keys() & LEGACY_FORMAT_KEYS:
        return NotificationFormat.LEGACY
    if "event" not in top_level and any(
        _is_scalar(top_level.get(key)) for key in LEGACY_FLAT_STATUS_KEYS
    ):
        return NotificationFormat.LEGACY
    return NotificationFormat.MODERN


class Notification(ABC):
    """
    Read-only view over a received webhook notification.

    All accessors are null-safe: a missing field or sub-object yields None.
    """

    format: ClassVar[NotificationFormat]

    def __init__(self, data: Mapping[str, Any] | None, raw_body: str | bytes | None = None) -> None:
        """
        Args:
            data: Notification payload as received
            raw_body: Exact request body the payload was parsed from, used for
                signature checks
        """
        self._raw_data: dict[str, Any] = copy.deepcopy(dict(data)) if isinstance(data, Mapping) else {}
        self._data: dict[str, Any] = normalize_keys(self._raw_data)
        self._raw_body = raw_body

    @classmethod
    def parse(cls, data: Mapping[str, Any] | None, raw_body: str | bytes | None = None) -> Notification:
        """
        Build the notification variant matching the payload's format.

        Raises:
            UnsupportedTypeError: Modern payload with a missing or unknown event
        """
        if detect_format(data) is NotificationFormat.LEGACY:
            return LegacyNotification(data, raw_body=raw_body)
        return ModernNotification(data, raw_body=raw_body)

    @classmethod
    def from_json(cls, body: str | bytes) -> Notification:
        """Parse a JSON request body, keeping it for signature checks."""
        try:
            data = json.loads(body)
        except (ValueError, TypeError) as e:
            raise ValidationError(f"Invalid JSON payload: {e}") from e
        if not isinstance(data, dict):
            raise ValidationError("Notification payload must be a JSON object")
        return cls.parse(data, raw_body=body)

    # ─── Raw data ────────────────────────────────────────────────────

    @property
    def data(self) -> Mapping[str, Any]:
        """Normalized (snake_case) payload."""
        return MappingProxyType(self._data)

    @property
    def raw_data(self) -> Mapping[str, Any]:
        """Payload with its original key names."""
        return MappingProxyType(self._raw_data)

    @property
    def raw_body(self) -> str | bytes | None:
        return self._raw_body

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)

    def _view(self, key: str) -> Mapping[str, Any] | None:
        value = self._data.get(key)
        if isinstance(value, Mapping):
            return MappingProxyType(value)
        return None

    def _view_get(self, key: str, field: str) -> Any:
        view = self._view(key)
        return view.get(field) if view is not None else None

    # ─── Identifiers ─────────────────────────────────────────────────

    @property
    def event_type(self) -> str | None:
        return self._data.get("event")

    @property
    def event(self) -> str | None:
        return self.event_type

    @property
    def order_id(self) -> str | None:
        """Merchant order id (the id passed when the order was created)."""
        return _first(
            self._view_get("operation", "order_id"),
            self._view_get("order", "order_id"),
            self._data.get("order_id"),
        )

    @property
    def operation_id(self) -> str | None:
        return _first(self._view_get("operation", "operation_id"), self._data.get("operation_id"))

    @property
    def external_operation_id(self) -> str | None:
        return self._view_get("operation", "external_operation_id")

    @property
    def operation_type(self) -> str | None:
        return self._view_get("operation", "operation_type")

    @property
    def operation_status(self) -> str | None:
        return self._view_get("operation", "status")

    @property
    def payment_status(self) -> str | None:
        return self._view_get("order", "payment_status")

    @property
    def subscription_id(self) -> str | None:
        return self._view_get("subscription", "customer_subscription_id")

    @property
    def subscription_status(self) -> str | None:
        return self._view_get("subscription", "status")

    @property
    def reason(self) -> str | None:
        return _first(self._data.get("reason"), self._data.get("reason_code"))

    # ─── Classification ──────────────────────────────────────────────

    @property
    @abstractmethod
    def status(self) -> str | None:
        ...

    @property
    @abstractmethod
    def outcome(self) -> NotificationOutcome | None:
        """Single classification the is_* predicates are derived from."""

    @property
    def is_success(self) -> bool:
        return self.outcome is NotificationOutcome.SUCCESS

    @property
    def is_failed(self) -> bool:
        return self.outcome is NotificationOutcome.FAILED

    @property
    def is_pending(self) -> bool:
        return self.outcome is NotificationOutcome.PENDING

    # ─── Authenticity ────────────────────────────────────────────────

    def has_valid_signature(self, secret: str | bytes, signature: str | bytes | None) -> bool:
        """
        Check an HMAC-SHA256 signature over the payload as received.

        Uses the raw body when one was supplied, otherwise the original
        (pre-normalization) payload re-serialized as compact JSON.
        """
        body = self._raw_body if self._raw_body is not None else self._raw_data
        return signatures.verify(secret, body, signature)

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} event={self.event_type!r} "
            f"order_id={self.order_id!r} status={self.status!r}>"
        )


class LegacyNotification(Notification):
    """Flat callback from the provider's earlier HMAC-signed contract."""

    format = NotificationFormat.LEGACY

    @property
    def status(self) -> str | None:
        return self._data.get("status")

    @property
    def operation(self) -> str | None:
        return self._data.get("operation")

    @property
    def amount(self) -> Any:
        return self._data.get("amount")

    @property
    def payment_id(self) -> str | None:
        return self._data.get("payment_id")

    @property
    def authorize_id(self) -> str | None:
        return self._data.get("authorize_id")

    @property
    def capture_id(self) -> str | None:
        return self._data.get("capture_id")

    @property
    def refund_id(self) -> str | None:
        return self._data.get("refund_id")

    @property
    def cancel_id(self) -> str | None:
        return self._data.get("cancel_id")

    @property
    def md_order(self) -> str | None:
        return self._data.get("md_order")

    @property
    def checksum(self) -> str | None:
        return self._data.get("checksum")

    @property
    def outcome(self) -> NotificationOutcome:
        # Some senders emit the status as an integer
        status = None if self.status is None else str(self.status)
        declined_by_timeout = self.operation == LEGACY_OPERATION_DECLINED_BY_TIMEOUT

        if status == LEGACY_STATUS_SUCCESS and not declined_by_timeout:
            return NotificationOutcome.SUCCESS
        if status == LEGACY_STATUS_FAILURE or declined_by_timeout:
            return NotificationOutcome.FAILED
        return NotificationOutcome.PENDING


class ModernNotification(Notification):
    """
    Notification decoded from a signed webhook token.

    Example:
        >>> n = ModernNotification({"event": "OPERATION_STATUS_UPDATED",
        ...                         "operation": {"status": "SUCCESS", "operationType": "CAPTURE"}})
        >>> n.operation, n.is_success
        ('capture', True)
    """

    format = NotificationFormat.MODERN

    def __init__(self, data: Mapping[str, Any] | None, raw_body: str | bytes | None = None) -> None:
        super().__init__(data, raw_body=raw_body)
        event = self.event_type
        if not _is_one_of(event, EventType.values()):
            raise UnsupportedTypeError(f"Unsupported notification type: {event}.", event_type=event)
        self._category = EventType(event)

    @property
    def category(self) -> EventType:
        return self._category

    @property
    def event_time(self) -> str | None:
        """Event time in RFC 3339 format."""
        return self._data.get("event_time")

    @property
    def merchant_id(self) -> str | None:
        return self._data.get("merchant_id")

    @property
    def operation_data(self) -> Mapping[str, Any] | None:
        return self._view("operation")

    @property
    def order_data(self) -> Mapping[str, Any] | None:
        return self._view("order")

    @property
    def subscription_data(self) -> Mapping[str, Any] | None:
        return self._view("subscription")

    @property
    def is_order_status_updated(self) -> bool:
        return self._category is EventType.ORDER_STATUS_UPDATED

    @property
    def is_operation_status_updated(self) -> bool:
        return self._category is EventType.OPERATION_STATUS_UPDATED

    @property
    def is_subscription_status_updated(self) -> bool:
        return self._category is EventType.SUBSCRIPTION_STATUS_UPDATED

    @property
    def is_refund_status_updated(self) -> bool:
        return self._category is EventType.REFUND_STATUS_UPDATED

    @property
    def cart_updated(self) -> bool | None:
        """Whether the cart was updated (points payments)."""
        return self._view_get("order", "cart_updated")

    @property
    def operation(self) -> str | None:
        """Operation type in lower case, e.g. ``"capture"``."""
        operation_type = self.operation_type
        return operation_type.lower() if isinstance(operation_type, str) else None

    @property
    def status(self) -> str | None:
        return _first(self.operation_status, self.payment_status, self.subscription_status)

    @property
    def outcome(self) -> NotificationOutcome | None:
        if self._category is EventType.OPERATION_STATUS_UPDATED:
            return self._operation_outcome()
        if self._category is EventType.ORDER_STATUS_UPDATED:
            return self._order_outcome()
        if self._category is EventType.SUBSCRIPTION_STATUS_UPDATED:
            return self._subscription_outcome()
        if self._category is EventType.REFUND_STATUS_UPDATED:
            return self._refund_outcome()
        return None

    def _operation_outcome(self) -> NotificationOutcome | None:
        status = self.operation_status
        if status == OperationStatus.SUCCESS:
            return NotificationOutcome.SUCCESS
        if status == OperationStatus.FAIL:
            return NotificationOutcome.FAILED
        if status == OperationStatus.PENDING:
            return NotificationOutcome.PENDING
        return None

    def _order_outcome(self) -> NotificationOutcome | None:
        status = self.payment_status
        if _is_one_of(status, ORDER_SUCCESS_STATUSES):
            return NotificationOutcome.SUCCESS
        if _is_one_of(status, ORDER_FAILURE_STATUSES):
            return NotificationOutcome.FAILED
        if status == PaymentStatus.PENDING:
            return NotificationOutcome.PENDING
        return None

    def _subscription_outcome(self) -> NotificationOutcome | None:
        status = self.subscription_status
        if status == SubscriptionStatus.ACTIVE:
            return NotificationOutcome.SUCCESS
        if _is_one_of(status, SUBSCRIPTION_FAILURE_STATUSES):
            return NotificationOutcome.FAILED
        if status == SubscriptionStatus.NEW:
            return NotificationOutcome.PENDING
        return None

    def _refund_outcome(self) -> NotificationOutcome | None:
        # Refund progress is reported on the refund operation when present,
        # otherwise only the order's payment status moves.
        if self.operation_data is not None:
            return self._operation_outcome()

        status = self.payment_status
        if _is_one_of(status, REFUND_SUCCESS_STATUSES):
            return NotificationOutcome.SUCCESS
        if _is_one_of(status, ORDER_FAILURE_STATUSES):
            return NotificationOutcome.FAILED
        if status == PaymentStatus.PENDING:
            return NotificationOutcome.PENDING
        return None


def parse_notification(data: Mapping[str, Any] | None, raw_body: str | bytes | None = None) -> Notification:
    """Module-level alias for ``Notification.parse``."""
    return Notification.parse(data, raw_body=raw_body)
