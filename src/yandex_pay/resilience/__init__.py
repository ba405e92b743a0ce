"""
Resilience Layer for the Yandex Pay SDK.

Provides the caller-level retry loop for REST calls.
"""

from .retry import DEFAULT_ATTEMPTS, DEFAULT_WAIT, execute_with_retry

__all__ = [
    "DEFAULT_ATTEMPTS",
    "DEFAULT_WAIT",
    "execute_with_retry",
]
