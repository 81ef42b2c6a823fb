"""
Exponential backoff executor.

Wraps any fallible coroutine factory and retries it with a deterministic
delay schedule:

    delay(attempt) = min(initial_delay_ms * 2 ** attempt, max_delay_ms)

where ``attempt`` is the 0-based index of the attempt that just failed.
There is no jitter, so the schedule for a given policy is a pure function
of its numbers and tests can assert it exactly. Attempts run strictly one
after another. After the final attempt fails the original exception is
re-raised unchanged.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

import structlog

from sentiment_pipeline.monitoring.metrics import backoff_retries_total

logger = structlog.get_logger(__name__)

T = TypeVar("T")

RetryObserver = Callable[[int, BaseException], None]
SleepFunc = Callable[[float], Awaitable[None]]

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_INITIAL_DELAY_MS = 1000
DEFAULT_MAX_DELAY_MS = 10000

_RETRYABLE_CODES = {"rate_limit_exceeded", "ECONNRESET", "ETIMEDOUT", "ENOTFOUND"}


def compute_backoff_delay(initial_delay_ms: int, max_delay_ms: int, attempt: int) -> int:
    """
    Delay in milliseconds to wait after the failed attempt ``attempt`` (0-based).

    Examples:
        >>> compute_backoff_delay(2000, 10000, 0)
        2000
        >>> compute_backoff_delay(2000, 10000, 3)
        10000
    """
    return min(initial_delay_ms * 2 ** attempt, max_delay_ms)


@dataclass(frozen=True)
class BackoffPolicy:
    """
    Retry configuration for one call site.

    Attributes:
        max_attempts: Total attempts including the first one
        initial_delay_ms: Delay after the first failure
        max_delay_ms: Ceiling for any single delay
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    initial_delay_ms: int = DEFAULT_INITIAL_DELAY_MS
    max_delay_ms: int = DEFAULT_MAX_DELAY_MS

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.initial_delay_ms < 0 or self.max_delay_ms < 0:
            raise ValueError("delays must be >= 0")

    def delay_for(self, attempt: int) -> int:
        return compute_backoff_delay(self.initial_delay_ms, self.max_delay_ms, attempt)

    def delays(self) -> list[int]:
        """Full wait schedule: one delay between each pair of attempts."""
        return [self.delay_for(attempt) for attempt in range(self.max_attempts - 1)]


def is_retryable_error(error: BaseException) -> bool:
    """
    Check whether an error looks transient.

    Recognizes rate limits (429), server errors (5xx), connection resets,
    DNS failures and timeouts. Exceptions may also declare themselves through
    a boolean ``retryable`` attribute.
    """
    retryable = getattr(error, "retryable", None)
    if isinstance(retryable, bool):
        return retryable

    if isinstance(error, (asyncio.TimeoutError, TimeoutError, ConnectionError)):
        return True

    if getattr(error, "code", None) in _RETRYABLE_CODES:
        return True

    status = getattr(error, "status_code", None) or getattr(error, "status", None)
    if isinstance(status, int) and (status == 429 or 500 <= status < 600):
        return True

    message = str(error).lower()
    return "timeout" in message or "timed out" in message


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    initial_delay_ms: int = DEFAULT_INITIAL_DELAY_MS,
    max_delay_ms: int = DEFAULT_MAX_DELAY_MS,
    on_retry: Optional[RetryObserver] = None,
    operation_name: str = "operation",
    sleep: SleepFunc = asyncio.sleep,
) -> T:
    """
    Execute ``operation`` with exponential backoff.

    Args:
        operation: Zero-argument callable returning a fresh awaitable per attempt
        max_attempts: Total attempts including the first one
        initial_delay_ms: Delay after the first failure
        max_delay_ms: Ceiling for any single delay
        on_retry: Observer called with (attempt_number, error) before each wait;
            attempt_number is 1-based
        operation_name: Label for logs and metrics
        sleep: Awaitable sleep taking seconds (injected in tests)

    Returns:
        Result of the first successful attempt

    Raises:
        The exception raised by the final attempt, unchanged
    """
    policy = BackoffPolicy(max_attempts, initial_delay_ms, max_delay_ms)

    for attempt in range(policy.max_attempts):
        try:
            return await operation()
        except Exception as e:
            if attempt >= policy.max_attempts - 1:
                logger.error(
                    "All attempts failed",
                    operation=operation_name,
                    max_attempts=policy.max_attempts,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise

            delay_ms = policy.delay_for(attempt)
            retryable = is_retryable_error(e)
            logger.warning(
                f"Attempt {attempt + 1}/{policy.max_attempts} failed",
                operation=operation_name,
                error=str(e),
                error_type=type(e).__name__,
                retryable=retryable,
                retry_in_ms=delay_ms,
            )
            backoff_retries_total.labels(
                operation=operation_name, retryable=str(retryable).lower()
            ).inc()

            if on_retry is not None:
                on_retry(attempt + 1, e)

            await sleep(delay_ms / 1000)

    # Unreachable: the loop either returns or re-raises
    raise RuntimeError("retry_with_backoff exited without a result")
