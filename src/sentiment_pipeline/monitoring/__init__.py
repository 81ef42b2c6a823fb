"""Monitoring and metrics instrumentation for the Post Sentiment Pipeline.

Exports custom Prometheus metrics for operational monitoring and alerting.
"""

from sentiment_pipeline.monitoring.metrics import (
    backoff_retries_total,
    classification_batches_total,
    llm_latency_seconds,
    llm_tokens_total,
    posts_ingested_total,
    records_classified_total,
    source_fetch_failures_total,
)

__all__ = [
    "posts_ingested_total",
    "source_fetch_failures_total",
    "backoff_retries_total",
    "classification_batches_total",
    "records_classified_total",
    "llm_latency_seconds",
    "llm_tokens_total",
]
