"""
Key-name normalization for webhook payloads.

The provider has shipped both camelCase and snake_case field names over
time. Everything downstream reads the snake_case form produced here.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import Any

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")


def snake_case(name: Any) -> str:
    """
    Convert a key name to snake_case.

    Examples:
        >>> snake_case("orderId")
        'order_id'
        >>> snake_case("PaymentStatus")
        'payment_status'
        >>> snake_case("HTTPStatus")
        'http_status'
    """
    text = str(name)
    text = _ACRONYM_BOUNDARY.sub(r"\1_\2", text)
    text = _WORD_BOUNDARY.sub(r"\1_\2", text)
    return text.replace("-", "_").lower()


def deep_transform_keys(value: Any, key_fn: Callable[[Any], Any]) -> Any:
    """
    Return a copy of ``value`` with every mapping key passed through ``key_fn``.

    Mappings become plain dicts, lists and tuples keep their type and are
    walked element by element. Anything else is returned as-is. The input
    is never mutated.
    """
    if isinstance(value, Mapping):
        return {key_fn(k): deep_transform_keys(v, key_fn) for k, v in value.items()}
    if isinstance(value, list):
        return [deep_transform_keys(item, key_fn) for item in value]
    if isinstance(value, tuple):
        return tuple(deep_transform_keys(item, key_fn) for item in value)
    return value


def normalize_keys(value: Any) -> Any:
    """Recursively rewrite all mapping keys to snake_case."""
    return deep_transform_keys(value, snake_case)
