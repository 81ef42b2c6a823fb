"""
Health reporter.

Derives a verdict from record counts:

    degraded    failed > completed * 0.5
    processing  more than 5 records in processing
    idle        no records at all
    healthy     otherwise

Checks are evaluated in that order.
"""

import structlog

from sentiment_pipeline.models.enums import HealthVerdict, RecordStatus
from sentiment_pipeline.models.results import (
    HealthMetrics,
    HealthSnapshot,
    HealthSummary,
    StatusCounts,
)
from sentiment_pipeline.persistence.lifecycle import LifecycleStore

logger = structlog.get_logger(__name__)

DEGRADED_FAILURE_RATIO = 0.5
PROCESSING_BACKLOG_THRESHOLD = 5


def derive_verdict(counts: StatusCounts, total: int) -> HealthVerdict:
    """Pure verdict function over status counts."""
    if counts.failed > counts.completed * DEGRADED_FAILURE_RATIO:
        return HealthVerdict.DEGRADED
    if counts.processing > PROCESSING_BACKLOG_THRESHOLD:
        return HealthVerdict.PROCESSING
    if total == 0:
        return HealthVerdict.IDLE
    return HealthVerdict.HEALTHY


def format_rate(part: int, total: int) -> str:
    """Percentage with one decimal, or "N/A" for an empty store."""
    if total == 0:
        return "N/A"
    return f"{part / total * 100:.1f}%"


class HealthReporter:
    """Read-only aggregate view over the record store."""

    def __init__(self, lifecycle: LifecycleStore):
        self.lifecycle = lifecycle

    async def snapshot(self) -> HealthSnapshot:
        by_status = await self.lifecycle.status_counts()
        counts = StatusCounts(
            pending=by_status.get(RecordStatus.PENDING, 0),
            processing=by_status.get(RecordStatus.PROCESSING, 0),
            completed=by_status.get(RecordStatus.COMPLETED, 0),
            failed=by_status.get(RecordStatus.FAILED, 0),
        )
        total = counts.pending + counts.processing + counts.completed + counts.failed
        verdict = derive_verdict(counts, total)

        logger.debug("Health snapshot", verdict=verdict.value, total=total)
        return HealthSnapshot(
            status=verdict,
            metrics=HealthMetrics(
                total=total,
                by_status=counts,
                last_analyzed_at=await self.lifecycle.latest_analyzed_at(),
            ),
            summary=HealthSummary(
                success_rate=format_rate(counts.completed, total),
                failure_rate=format_rate(counts.failed, total),
            ),
        )
