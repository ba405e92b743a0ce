"""
Exception hierarchy for the Yandex Pay SDK.

All SDK-specific exceptions inherit from YandexPayError for easy catching.
Webhook failures are further grouped under WebhookError so that a webhook
endpoint can turn any of them into a non-2xx response.
"""

from __future__ import annotations

from typing import Any


class YandexPayError(Exception):
    """
    Base exception for all Yandex Pay SDK errors.

    Example:
        >>> try:
        ...     client.orders.get("order-123")
        ... except YandexPayError as e:
        ...     print(f"Yandex Pay error: {e}")
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(YandexPayError, ValueError):
    """
    Configuration is missing or invalid.

    Also a ValueError, so plain ValueError handlers keep working.

    Raised when:
    - Required configuration values are not provided
    - Configuration values fail validation
    """

    pass


class ValidationError(YandexPayError):
    """
    Input validation error.

    Raised when:
    - A webhook body is not valid UTF-8 or JSON
    - A notification cannot be trusted in its delivered form
    """

    pass


class ApiException(YandexPayError):
    """
    REST API communication error.

    Raised when:
    - HTTP request fails (timeout, connection error)
    - Response body is not valid JSON
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code
        self.url = url

    def is_server_error(self) -> bool:
        """Check if this is a server-side error."""
        return self.status_code is not None and 500 <= self.status_code < 600


class WebhookError(YandexPayError):
    """Base exception for webhook parsing and verification."""

    pass


class UnsupportedTypeError(WebhookError):
    """A modern notification carries a missing or unknown event type."""

    def __init__(
        self,
        message: str,
        event_type: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.event_type = event_type


class DecodeError(WebhookError):
    """Base exception for signed webhook token failures."""

    pass


class InvalidTokenError(DecodeError):
    """
    Token is unusable.

    Raised when:
    - Token is blank or does not have three segments
    - Header or payload is not valid base64url JSON
    - Token declares an algorithm other than ES256
    - No public key matches the token's key id
    """

    pass


class KeyNotFoundError(InvalidTokenError):
    """No published signing key matches the requested key id."""

    def __init__(
        self,
        message: str,
        kid: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.kid = kid


class InvalidSignatureError(DecodeError):
    """Signature is present but does not verify."""

    pass


class TokenExpiredError(DecodeError):
    """Token expiry claim is in the past."""

    pass


class JwksError(DecodeError):
    """Base exception for signing key set retrieval."""

    pass


class JwksFetchError(JwksError):
    """Key set could not be fetched (transport failure or non-2xx status)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code
        self.url = url


class JwksParseError(JwksError):
    """Fetched key set is not valid JSON or holds no usable keys."""

    pass
