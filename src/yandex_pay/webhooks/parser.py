"""
Webhook Parser Infrastructure.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from yandex_pay.core.exceptions import InvalidSignatureError, ValidationError
from yandex_pay.core.logging import get_logger
from yandex_pay.core.types import Environment, NotificationFormat
from yandex_pay.webhooks.decoder import WebhookTokenDecoder
from yandex_pay.webhooks.jwks import JwksKeyStore
from yandex_pay.webhooks.notification import Notification

logger = get_logger("webhooks.parser")


def _looks_like_token(body: str) -> bool:
    return not body.startswith(("{", "[")) and body.count(".") == 2


class WebhookParser:
    """
    Framework-agnostic webhook parser.

    Verifies authenticity and converts raw request bodies into Notifications.
    Does NOT handle HTTP transport - that is the application's responsibility.
    Answer the provider with 2xx only after ``handle()`` returns; any raised
    error should become a non-2xx response so delivery is retried.

    Example:
        >>> parser = WebhookParser(secret="legacy-secret", environment=Environment.SANDBOX)
        >>> notification = parser.handle(request.body, request.headers)
        >>> if notification.is_success:
        ...     mark_paid(notification.order_id)
    """

    def __init__(
        self,
        secret: str | None = None,
        environment: Environment | str = Environment.PRODUCTION,
        verify: bool = True,
        verify_expiration: bool = True,
        key_store: JwksKeyStore | None = None,
        signature_header: str = "X-Signature",
    ) -> None:
        """
        Initialize parser.

        Args:
            secret: Shared secret for legacy HMAC-signed callbacks
            environment: Environment whose JWKS signs modern tokens
            verify: Verify token signatures (disable only for diagnostics)
            verify_expiration: Enforce token expiry
            key_store: JWKS key store (process-wide default if None)
            signature_header: Header carrying the legacy HMAC signature
        """
        self.secret = secret
        self.environment = (
            environment if isinstance(environment, Environment) else Environment.from_string(environment)
        )
        self.verify = verify
        self.verify_expiration = verify_expiration
        self.key_store = key_store
        self.signature_header = signature_header

    def decoder(self, token: str | bytes) -> WebhookTokenDecoder:
        """Build a token decoder with this parser's settings."""
        return WebhookTokenDecoder(
            token,
            verify=self.verify,
            verify_expiration=self.verify_expiration,
            environment=self.environment,
            key_store=self.key_store,
        )

    def verify_signature(self, notification: Notification, headers: Mapping[str, str] | None) -> bool:
        """
        Verify a legacy callback's HMAC signature.

        Returns:
            True if valid, or if verification is off and no secret is configured

        Raises:
            ValidationError: Verification is on but no secret is configured
            InvalidSignatureError: Signature missing or wrong
        """
        if not self.secret:
            if self.verify:
                raise ValidationError("Legacy notifications require a webhook secret")
            return True

        signature = self._header(headers, self.signature_header)
        if not signature:
            raise InvalidSignatureError(f"Missing {self.signature_header} header")

        if not notification.has_valid_signature(self.secret, signature):
            raise InvalidSignatureError("Signature mismatch")
        return True

    def handle(
        self,
        payload: str | bytes | Mapping[str, Any],
        headers: Mapping[str, str] | None = None,
    ) -> Notification:
        """
        Parse and authenticate a webhook request.

        Args:
            payload: Raw body (bytes/str) or parsed mapping
            headers: Request headers

        Returns:
            LegacyNotification or ModernNotification

        Raises:
            InvalidSignatureError: Signature invalid
            ValidationError: Payload malformed or not authenticated
            UnsupportedTypeError: Unknown modern event type
            DecodeError: Token could not be decoded or verified
        """
        # 1. Bring raw bodies to text
        if isinstance(payload, bytes):
            try:
                payload = payload.decode("utf-8")
            except UnicodeDecodeError as e:
                raise ValidationError(f"Webhook body is not valid UTF-8: {e}") from e

        # 2. Signed token: authenticity comes from the token itself
        if isinstance(payload, str):
            body = payload.strip()
            if _looks_like_token(body):
                notification = self.decoder(body).to_notification()
                logger.debug(f"Accepted webhook token: {notification!r}")
                return notification
            # Keep the exact body: the HMAC covers the bytes as sent
            notification = Notification.from_json(payload)
        elif isinstance(payload, Mapping):
            notification = Notification.parse(payload)
        else:
            raise ValidationError(f"Unsupported webhook payload type: {type(payload).__name__}")

        # 3. Plain JSON: legacy callbacks carry an HMAC, modern payloads must be tokens
        if notification.format is NotificationFormat.LEGACY:
            self.verify_signature(notification, headers)
        elif self.verify:
            raise ValidationError("Modern notifications must be delivered as a signed token")

        logger.debug(f"Accepted webhook: {notification!r}")
        return notification

    @staticmethod
    def _header(headers: Mapping[str, str] | None, name: str) -> str | None:
        if not headers:
            return None
        wanted = name.lower()
        for key, value in headers.items():
            if key.lower() == wanted:
                return value
        return None
