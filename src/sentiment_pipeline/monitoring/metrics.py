"""Custom Prometheus metrics for the Post Sentiment Pipeline.

These metrics are exposed at /metrics endpoint and should be scraped by Prometheus.
Alert rules should be configured for:
- source_fetch_failures_total (a source is consistently unreachable)
- classification_batches_total{outcome="failed"} (classifier outage)
- records_classified_total{outcome="failed"} (store write failures)
"""

from prometheus_client import Counter, Histogram

# === Ingestion Metrics ===

posts_ingested_total = Counter(
    "posts_ingested_total",
    "Total posts stored as pending records by source",
    ["source"],
)
"""
Ingested posts counter.

Labels:
- source: configured source name (e.g., FighterJets, aviation)
"""

source_fetch_failures_total = Counter(
    "source_fetch_failures_total",
    "Total sources that failed after exhausting retries",
    ["source"],
)
"""
Source fetch failures counter.

Alert thresholds:
- WARN: any single source failing on consecutive runs
- CRITICAL: all sources failing (pipeline aborts at the scrape stage)
"""

# === Retry Metrics ===

backoff_retries_total = Counter(
    "backoff_retries_total",
    "Total retry attempts scheduled by the backoff executor",
    ["operation", "retryable"],
)
"""
Backoff retries counter.

Labels:
- operation: source_fetch, batch_classification
- retryable: true if the error looked transient (network, 429, 5xx, timeout)
"""

# === Classification Metrics ===

classification_batches_total = Counter(
    "classification_batches_total",
    "Total classification batches by mode and outcome",
    ["mode", "outcome"],
)
"""
Classification batches counter.

Labels:
- mode: normal (pending records), retry (failed records)
- outcome: completed, failed, empty
"""

records_classified_total = Counter(
    "records_classified_total",
    "Total records reconciled after a batch classification",
    ["outcome"],
)
"""
Per-record reconciliation outcomes.

Labels:
- outcome: completed, fallback, failed
"""

# === LLM Performance Metrics ===

llm_latency_seconds = Histogram(
    "llm_latency_seconds",
    "LLM generation latency in seconds",
    ["model", "success"],
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0],
)
"""
LLM generation latency histogram.

Buckets cover a single batch request of up to 40 posts.
"""

llm_tokens_total = Counter(
    "llm_tokens_total",
    "Total tokens consumed by model and type",
    ["model", "token_type"],
)
"""
Token consumption counter.

Labels:
- model: Model name
- token_type: prompt (input tokens), completion (output tokens)

Used for cost estimation.
"""
