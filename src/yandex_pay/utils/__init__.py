"""Utility functions for the Yandex Pay SDK."""

from yandex_pay.utils.keys import deep_transform_keys, normalize_keys, snake_case

__all__ = [
    "deep_transform_keys",
    "normalize_keys",
    "snake_case",
]
