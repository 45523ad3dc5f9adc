# windowseat/utils/retry.py
"""
Retry with exponential backoff and jitter for flaky network calls.

``with_retry`` calls ``fn(attempt)`` for attempts 0..max_retries. When an
attempt fails and the failure is retryable, it waits
``min(initial * multiplier**attempt, max)`` milliseconds (plus or minus
the jitter fraction) and tries again. When retries run out, or the failure
is not retryable, the original exception propagates unchanged.
"""
import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

import requests

from ..constants import APIConstants

RETRYABLE_ERROR_MESSAGES = (
    'etimedout',
    'econnreset',
    'econnrefused',
    'enotfound',
    'timed out',
    'connection reset',
    'connection refused',
    'connection aborted',
    'fetch failed',
    'network request failed',
)


@dataclass
class RetryConfig:
    max_retries: int = 3
    initial_delay_ms: int = 1000
    max_delay_ms: int = 10000
    backoff_multiplier: float = 2
    jitter_factor: float = 0.1


@dataclass
class RetryEvent:
    """Passed to ``on_retry`` right before the helper waits."""
    attempt: int  # 1-based number of the retry about to happen
    max_retries: int
    delay: int  # milliseconds
    error: Exception


def is_retryable_status(status: Optional[int]) -> bool:
    return status in APIConstants.RETRYABLE_STATUS_CODES


def _error_status(error: BaseException) -> Optional[int]:
    status = getattr(error, 'status', None)
    if status is None and isinstance(error, requests.exceptions.HTTPError) and error.response is not None:
        status = error.response.status_code
    return status


def is_never_retryable(error: BaseException) -> bool:
    """Errors flagged ``no_retry`` and 401s, whatever a caller's predicate says."""
    return bool(getattr(error, 'no_retry', False)) or _error_status(error) == 401


def is_retryable_error(error: Optional[BaseException]) -> bool:
    """
    Network-class failures and retryable HTTP statuses are worth another
    attempt; anything flagged ``no_retry`` (or a 401) never is.
    """
    if error is None or is_never_retryable(error):
        return False

    status = _error_status(error)
    if status is not None and is_retryable_status(status):
        return True

    if isinstance(error, (requests.exceptions.ConnectionError, requests.exceptions.Timeout)):
        return True
    if isinstance(error, (ConnectionError, TimeoutError)):
        return True

    message = str(error).lower()
    return any(fragment in message for fragment in RETRYABLE_ERROR_MESSAGES)


def calculate_delay(attempt: int, config: Optional[RetryConfig] = None,
                    rand: Callable[[], float] = random.random) -> int:
    """Backoff delay in milliseconds for the given 0-based attempt."""
    config = config or RetryConfig()
    exponential = config.initial_delay_ms * (config.backoff_multiplier ** attempt)
    capped = min(exponential, config.max_delay_ms)
    jitter = capped * config.jitter_factor * (rand() * 2 - 1)
    return int(round(capped + jitter))


def with_retry(fn: Callable[[int], Any],
               max_retries: int = 3,
               initial_delay_ms: int = 1000,
               max_delay_ms: int = 10000,
               backoff_multiplier: float = 2,
               jitter_factor: float = 0.1,
               should_retry: Optional[Callable[[Exception, int], bool]] = None,
               on_retry: Optional[Callable[[RetryEvent], None]] = None,
               sleep: Callable[[float], None] = time.sleep) -> Any:
    config = RetryConfig(
        max_retries=max_retries,
        initial_delay_ms=initial_delay_ms,
        max_delay_ms=max_delay_ms,
        backoff_multiplier=backoff_multiplier,
        jitter_factor=jitter_factor,
    )

    for attempt in range(max_retries + 1):
        try:
            return fn(attempt)
        except Exception as e:
            can_retry = attempt < max_retries and not is_never_retryable(e)
            if not can_retry:
                raise
            if should_retry is not None:
                wants_retry = should_retry(e, attempt)
            else:
                wants_retry = is_retryable_error(e)
            if not wants_retry:
                raise

            delay = calculate_delay(attempt, config)
            logging.debug(f"Attempt {attempt + 1}/{max_retries + 1} failed ({e}); retrying in {delay}ms")
            if on_retry:
                on_retry(RetryEvent(attempt=attempt + 1, max_retries=max_retries, delay=delay, error=e))
            sleep(delay / 1000)
