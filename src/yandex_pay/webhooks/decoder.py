"""
Signed webhook token decoding.

Modern Yandex Pay webhooks arrive as a compact ES256 token
(``header.payload.signature``). The signing key is picked from the
provider's JWKS by the token's ``kid``.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import TYPE_CHECKING, Any

import jwt

from yandex_pay.core.exceptions import (
    InvalidSignatureError,
    InvalidTokenError,
    TokenExpiredError,
)
from yandex_pay.core.logging import get_logger
from yandex_pay.core.types import WEBHOOK_TOKEN_ALGORITHM, Environment
from yandex_pay.webhooks.jwks import JwksKeyStore, get_default_key_store

if TYPE_CHECKING:
    from yandex_pay.webhooks.notification import Notification

logger = get_logger("webhooks.decoder")


def _b64url_decode(segment: str) -> bytes:
    padding = "=" * (-len(segment) % 4)
    return base64.urlsafe_b64decode(segment + padding)


class WebhookTokenDecoder:
    """
    Decodes and optionally verifies a webhook token.

    With ``verify=False`` the payload is decoded without looking at the
    signature at all. That mode exists for diagnostics and tests only.

    Example:
        >>> decoder = WebhookTokenDecoder(request_body, environment=Environment.SANDBOX)
        >>> notification = decoder.to_notification()
        >>> notification.is_success
        True
    """

    def __init__(
        self,
        raw_token: str | bytes | None,
        verify: bool = True,
        verify_expiration: bool = True,
        environment: Environment | str = Environment.PRODUCTION,
        key_store: JwksKeyStore | None = None,
        leeway: float = 0,
    ) -> None:
        """
        Args:
            raw_token: Token from the webhook request body
            verify: Verify signature, algorithm and expiry
            verify_expiration: Enforce the ``exp`` claim when verifying
            environment: Which JWKS endpoint publishes the signing keys
            key_store: Key store to resolve ``kid`` with (process-wide default if None)
            leeway: Clock skew tolerance for ``exp`` in seconds
        """
        if isinstance(raw_token, bytes):
            raw_token = raw_token.decode("utf-8", errors="replace")
        self.raw_token = raw_token.strip() if raw_token else ""
        self.verify = verify
        self.verify_expiration = verify_expiration
        self.environment = (
            environment if isinstance(environment, Environment) else Environment.from_string(environment)
        )
        self.leeway = leeway
        self._key_store = key_store
        self._header: dict[str, Any] | None = None

    @property
    def key_store(self) -> JwksKeyStore:
        if self._key_store is None:
            self._key_store = get_default_key_store()
        return self._key_store

    @property
    def header(self) -> dict[str, Any]:
        """Token header, parsed without signature verification."""
        if self._header is None:
            parts = self.raw_token.split(".")
            if len(parts) < 2 or not parts[0]:
                raise InvalidTokenError("Invalid token format")
            try:
                header = json.loads(_b64url_decode(parts[0]))
            except (binascii.Error, ValueError) as e:
                raise InvalidTokenError(f"Failed to parse token header: {e}") from e
            if not isinstance(header, dict):
                raise InvalidTokenError("Token header is not a JSON object")
            self._header = header
        return self._header

    @property
    def kid(self) -> str | None:
        return self.header.get("kid")

    @property
    def algorithm(self) -> str | None:
        return self.header.get("alg")

    def decode(self) -> dict[str, Any]:
        """
        Decode the token payload.

        Raises:
            InvalidTokenError: Malformed token, wrong algorithm, unknown key id
            InvalidSignatureError: Signature does not verify
            TokenExpiredError: ``exp`` is in the past
            JwksFetchError, JwksParseError: Signing keys could not be loaded
        """
        if not self.raw_token:
            raise InvalidTokenError("Token is blank")
        if self.raw_token.count(".") != 2:
            raise InvalidTokenError("Invalid token format: expected three segments")

        try:
            if self.verify:
                payload = self._decode_with_verification()
            else:
                payload = self._decode_without_verification()
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError(f"Token expired: {e}") from e
        except jwt.InvalidSignatureError as e:
            logger.warning(f"Webhook token signature rejected (kid={self.kid})")
            raise InvalidSignatureError(f"Invalid signature: {e}") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e

        if not isinstance(payload, dict):
            raise InvalidTokenError("Token payload is not a JSON object")
        return payload

    def to_notification(self) -> Notification:
        """Decode the token and wrap the payload in a Notification."""
        from yandex_pay.webhooks.notification import Notification

        return Notification.parse(self.decode())

    def _decode_without_verification(self) -> dict[str, Any]:
        if "alg" not in self.header:
            raise InvalidTokenError("Token header has no algorithm")
        return jwt.decode(
            self.raw_token,
            options={"verify_signature": False, "verify_exp": False, "verify_aud": False},
        )

    def _decode_with_verification(self) -> dict[str, Any]:
        algorithm = self.algorithm
        if algorithm != WEBHOOK_TOKEN_ALGORITHM:
            logger.warning(f"Rejected webhook token with algorithm {algorithm!r}")
            raise InvalidTokenError(
                f"Unsupported token algorithm: {algorithm!r} (expected {WEBHOOK_TOKEN_ALGORITHM})"
            )

        public_key = self.key_store.resolve(self.kid, self.environment)

        return jwt.decode(
            self.raw_token,
            public_key,
            algorithms=[WEBHOOK_TOKEN_ALGORITHM],
            leeway=self.leeway,
            options={"verify_exp": self.verify_expiration, "verify_aud": False},
        )
