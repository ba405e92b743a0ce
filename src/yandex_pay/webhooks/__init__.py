"""Webhook parsing and verification for Yandex Pay notifications."""

from yandex_pay.webhooks.decoder import WebhookTokenDecoder
from yandex_pay.webhooks.jwks import (
    JwksKeyStore,
    SigningKeySet,
    clear_jwks_cache,
    get_default_key_store,
)
from yandex_pay.webhooks.notification import (
    LegacyNotification,
    ModernNotification,
    Notification,
    detect_format,
    parse_notification,
)
from yandex_pay.webhooks.parser import WebhookParser
from yandex_pay.webhooks.signature import constant_time_equals, sign, verify

__all__ = [
    "JwksKeyStore",
    "LegacyNotification",
    "ModernNotification",
    "Notification",
    "SigningKeySet",
    "WebhookParser",
    "WebhookTokenDecoder",
    "clear_jwks_cache",
    "constant_time_equals",
    "detect_format",
    "get_default_key_store",
    "parse_notification",
    "sign",
    "verify",
]
