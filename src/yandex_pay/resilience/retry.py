"""
Retry Strategies using Tenacity.

The provider recommends a fixed pause between attempts rather than
exponential backoff, so the policy here is fixed-count, fixed-wait.
"""

from __future__ import annotations

from typing import Any, Callable

from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from yandex_pay.core.logging import get_logger

logger = get_logger("resilience.retry")

DEFAULT_ATTEMPTS = 5
DEFAULT_WAIT = 5.0  # seconds


def _log_retry(retry_state: Any) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(f"Retrying request... (Attempt {retry_state.attempt_number}): {error}")


def execute_with_retry(
    func: Callable[..., Any],
    *args: Any,
    attempts: int = DEFAULT_ATTEMPTS,
    wait: float = DEFAULT_WAIT,
    retry_on: type[BaseException] | tuple[type[BaseException], ...] = Exception,
    **kwargs: Any,
) -> Any:
    """
    Call ``func`` until it succeeds or ``attempts`` calls have failed.

    Only exceptions matching ``retry_on`` are retried; the last one is re-raised.
    """
    for attempt in Retrying(
        retry=retry_if_exception_type(retry_on),
        wait=wait_fixed(wait),
        stop=stop_after_attempt(attempts),
        reraise=True,
        before_sleep=_log_retry,
    ):
        with attempt:
            return func(*args, **kwargs)
