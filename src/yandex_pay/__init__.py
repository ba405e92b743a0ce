"""
Yandex Pay - Merchant API client and webhook verifier.

Usage:
    >>> from yandex_pay import YandexPay, Environment
    >>>
    >>> pay = YandexPay(api_key="YOUR_API_KEY", environment=Environment.SANDBOX)
    >>> pay.orders.get("order-123")
    >>>
    >>> notification = pay.webhooks.handle(request_body, request_headers)
    >>> if notification.is_success:
    ...     fulfil(notification.order_id)
"""

from yandex_pay.client import YandexPay
from yandex_pay.core.config import Config
from yandex_pay.core.exceptions import (
    ApiException,
    ConfigurationError,
    DecodeError,
    InvalidSignatureError,
    InvalidTokenError,
    JwksError,
    JwksFetchError,
    JwksParseError,
    KeyNotFoundError,
    TokenExpiredError,
    UnsupportedTypeError,
    ValidationError,
    WebhookError,
    YandexPayError,
)
from yandex_pay.core.http_client import ApiClient
from yandex_pay.core.logging import configure_logging, get_logger
from yandex_pay.core.types import (
    API_HOSTS,
    Environment,
    EventType,
    NotificationFormat,
    NotificationOutcome,
    OperationStatus,
    OperationType,
    PaymentStatus,
    SubscriptionStatus,
)
from yandex_pay.webhooks import (
    JwksKeyStore,
    LegacyNotification,
    ModernNotification,
    Notification,
    WebhookParser,
    WebhookTokenDecoder,
    clear_jwks_cache,
)

__version__ = "0.1.0"

__all__ = [
    # Client
    "YandexPay",
    "ApiClient",
    "Config",
    # Types
    "API_HOSTS",
    "Environment",
    "EventType",
    "NotificationFormat",
    "NotificationOutcome",
    "OperationStatus",
    "OperationType",
    "PaymentStatus",
    "SubscriptionStatus",
    # Webhooks
    "JwksKeyStore",
    "LegacyNotification",
    "ModernNotification",
    "Notification",
    "WebhookParser",
    "WebhookTokenDecoder",
    "clear_jwks_cache",
    # Exceptions
    "ApiException",
    "ConfigurationError",
    "DecodeError",
    "InvalidSignatureError",
    "InvalidTokenError",
    "JwksError",
    "JwksFetchError",
    "JwksParseError",
    "KeyNotFoundError",
    "TokenExpiredError",
    "UnsupportedTypeError",
    "ValidationError",
    "WebhookError",
    "YandexPayError",
    # Logging
    "configure_logging",
    "get_logger",
]
