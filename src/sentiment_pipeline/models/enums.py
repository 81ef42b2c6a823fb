"""
Enumerations for the Post Sentiment Pipeline data models.

All enums are closed taxonomies - no values outside these sets are permitted.
"""

from enum import Enum


class RecordStatus(str, Enum):
    """
    Lifecycle status of an ingested record.

    Allowed transitions:
        pending -> processing -> completed | failed
        failed -> processing (retry mode only)
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class Sentiment(str, Enum):
    """
    Post sentiment classification.

    Sentiment is single-label (exactly one value per post).
    """

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class HealthVerdict(str, Enum):
    """Derived monitoring verdict over the record store."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    PROCESSING = "processing"
    IDLE = "idle"
