"""
HMAC-SHA256 signatures for legacy webhook callbacks.

The signature must be computed over the exact bytes the provider signed,
so callers should pass the raw request body whenever they have it.
Structured payloads are re-serialized as compact JSON, which only matches
the sender's bytes if the sender used the same key order and spacing.
"""

from __future__ import annotations

import hashlib
import hmac
import json
from typing import Any

from yandex_pay.core.logging import get_logger

logger = get_logger("webhooks.signature")


def _to_bytes(value: Any) -> bytes:
    if isinstance(value, bytes):
        return value
    if isinstance(value, bytearray):
        return bytes(value)
    if isinstance(value, str):
        return value.encode("utf-8")
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def sign(secret: str | bytes, body: Any) -> str:
    """
    Compute the hex HMAC-SHA256 digest of a webhook body.

    Args:
        secret: Shared webhook secret
        body: Raw body (str/bytes) or a JSON-serializable structure

    Returns:
        Lowercase hex digest
    """
    return hmac.new(_to_bytes(secret), _to_bytes(body), hashlib.sha256).hexdigest()


def constant_time_equals(expected: bytes, actual: bytes) -> bool:
    """
    Compare two byte strings without an early exit on the first mismatch.

    Length is not secret, so a length mismatch returns immediately. Once
    lengths match every byte is visited.
    """
    if len(expected) != len(actual):
        return False

    result = 0
    for x, y in zip(expected, actual):
        result |= x ^ y
    return result == 0


def verify(secret: str | bytes, body: Any, signature: str | bytes | None) -> bool:
    """
    Check a webhook signature. Never raises.

    Returns False for a missing or empty signature or secret, for a body
    that cannot be serialized, and for any mismatch.
    """
    if not signature or not secret:
        return False

    try:
        expected = sign(secret, body).encode("ascii")
        actual = signature.encode("utf-8") if isinstance(signature, str) else bytes(signature)
    except (TypeError, ValueError) as e:
        logger.warning(f"Cannot prepare webhook signature check: {e}")
        return False

    if constant_time_equals(expected, actual):
        return True

    logger.warning("Webhook signature mismatch")
    return False
