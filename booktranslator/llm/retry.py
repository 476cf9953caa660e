"""Retry wrapper for translation service calls.

Responsibilities:
- Re-attempt failed translation calls with linear backoff.
- Report each retried failure to an optional observer for logging.
"""

from __future__ import annotations

import time
from typing import Callable, TypeVar

from ..config import RetryPolicy
from ..errors import TranslationServiceError

_T = TypeVar("_T")

RetryObserver = Callable[[int, int, float, TranslationServiceError], None]


def call_with_retry(
    operation: Callable[[], _T],
    policy: RetryPolicy,
    *,
    sleeper: Callable[[float], None] = time.sleep,
    on_retry: RetryObserver | None = None,
) -> _T:
    """Run `operation`, retrying translation service failures.

    Attempt `n` failing waits `n * policy.backoff_seconds` before attempt `n + 1`.
    Exceptions other than `TranslationServiceError` propagate immediately.

    Args:
        operation: Zero-argument callable performing one service call.
        policy: Attempt count and backoff multiplier.
        sleeper: Blocking wait function, injectable for tests.
        on_retry: Called as `(attempt, max_attempts, wait_seconds, error)` before
            each wait.

    Returns:
        The first successful result of `operation`.

    Raises:
        TranslationServiceError: The last failure once attempts are exhausted.
    """

    max_attempts = max(1, policy.max_attempts)
    attempt = 1
    while True:
        try:
            return operation()
        except TranslationServiceError as exc:
            if attempt >= max_attempts:
                raise
            wait_seconds = policy.wait_seconds(attempt)
            if on_retry is not None:
                on_retry(attempt, max_attempts, wait_seconds, exc)
            sleeper(wait_seconds)
            attempt += 1
