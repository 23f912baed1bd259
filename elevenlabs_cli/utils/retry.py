"""Retry with exponential backoff for API calls."""

import logging
import random
import time
from typing import Callable, Optional, TypeVar

from ..exceptions import RateLimitError, Retryable, classify, retry_policy

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY = 1.0
RATE_LIMIT_BASE_DELAY = 5.0
DEFAULT_MAX_DELAY = 30.0
DEFAULT_JITTER = 0.5


def backoff_delay(
    attempt: int,
    base: float = DEFAULT_BASE_DELAY,
    cap: float = DEFAULT_MAX_DELAY,
    jitter: float = DEFAULT_JITTER,
) -> float:
    """Delay before retry number ``attempt`` (1-indexed): min(base * 2^(attempt-1), cap) + jitter."""
    delay = min(base * (2 ** (attempt - 1)), cap)
    if jitter > 0:
        delay += random.uniform(0, jitter)
    return delay


def with_retry(
    operation: Callable[[], T],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    base_delay: float = DEFAULT_BASE_DELAY,
    rate_limit_delay: float = RATE_LIMIT_BASE_DELAY,
    max_delay: float = DEFAULT_MAX_DELAY,
    sleep: Optional[Callable[[float], None]] = None,
    description: Optional[str] = None,
) -> T:
    """
    Call ``operation`` until it succeeds or fails with a non-retryable error.

    Errors whose kind maps to ``Retryable.NO`` are re-raised on the first
    failure. Retryable errors are retried up to ``max_attempts`` calls in
    total; the last error is re-raised once the attempts are used up.

    Args:
        operation: Zero-argument callable performing the request
        max_attempts: Total number of calls allowed
        base_delay: Backoff base for server/network/timeout errors
        rate_limit_delay: Backoff base for 429 responses
        max_delay: Upper bound of the exponential part of the delay
        sleep: Sleep function (defaults to time.sleep)
        description: Label used in log messages

    Returns:
        Whatever ``operation`` returns
    """
    label = description or getattr(operation, "__name__", "operation")
    attempt = 1
    while True:
        try:
            return operation()
        except Exception as e:
            kind = classify(e)
            policy = retry_policy(kind)
            if policy is Retryable.NO or attempt >= max_attempts:
                raise

            base = rate_limit_delay if policy is Retryable.YES_WITH_BACKOFF else base_delay
            delay = backoff_delay(attempt, base=base, cap=max_delay)
            if isinstance(e, RateLimitError) and e.retry_after:
                delay = max(delay, e.retry_after)

            logger.warning(
                f"{label} failed ({kind.value}), retrying in {delay:.1f}s "
                f"(attempt {attempt + 1}/{max_attempts})"
            )
            (sleep or time.sleep)(delay)
            attempt += 1
