"""
Backoff executor shared by every outbound call.

Source fetches and the batch classification call both go through
retry_with_backoff. The delay schedule is deterministic (no jitter):

    min(initial_delay_ms * 2 ** attempt, max_delay_ms)

Usage:
    >>> from sentiment_pipeline.retry import retry_with_backoff
    >>> data = await retry_with_backoff(lambda: fetcher.fetch("aviation", 10))
"""

from sentiment_pipeline.retry.backoff import (
    BackoffPolicy,
    compute_backoff_delay,
    is_retryable_error,
    retry_with_backoff,
)

__all__ = [
    "BackoffPolicy",
    "compute_backoff_delay",
    "is_retryable_error",
    "retry_with_backoff",
]
