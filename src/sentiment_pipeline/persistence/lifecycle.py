"""
Record lifecycle transitions.

    (insert) -> pending --claim--> processing -> completed
                                              -> failed --claim (retry mode)--> processing

Every transition goes through this module so status and payload fields
always move together.
"""

from datetime import datetime
from typing import Optional

import structlog

from sentiment_pipeline.models.enums import RecordStatus
from sentiment_pipeline.models.records import (
    ItemRecord,
    NewRecord,
    PostAnalysis,
    RecordPatch,
    utc_now,
)
from sentiment_pipeline.persistence.base import ItemStore

logger = structlog.get_logger(__name__)


class LifecycleStore:
    """Intent-level operations over an ItemStore."""

    def __init__(self, store: ItemStore):
        self.store = store

    async def create_pending(self, records: list[NewRecord]) -> list[ItemRecord]:
        """Store normalized candidates as pending records."""
        if not records:
            return []
        return await self.store.insert(records)

    async def select_for(self, status: RecordStatus, limit: int) -> list[ItemRecord]:
        """Oldest ``limit`` records currently in ``status``."""
        return await self.store.select(status, limit)

    async def claim(self, ids: list[str]) -> int:
        """
        Move records to processing in one bulk write.

        Clears any earlier error so processing records never carry one.
        """
        claimed = await self.store.update_many(
            ids, RecordPatch(status=RecordStatus.PROCESSING, error_message=None)
        )
        logger.debug("Claimed records", requested=len(ids), claimed=claimed)
        return claimed

    async def mark_completed(self, record_id: str, analysis: PostAnalysis) -> ItemRecord:
        return await self.store.update_one(
            record_id,
            RecordPatch(
                status=RecordStatus.COMPLETED,
                sentiment=analysis.sentiment,
                analysis=analysis,
                analyzed_at=utc_now(),
                error_message=None,
            ),
        )

    async def mark_failed(self, record_id: str, message: str) -> ItemRecord:
        return await self.store.update_one(
            record_id, RecordPatch(status=RecordStatus.FAILED, error_message=message)
        )

    async def mark_batch_failed(self, ids: list[str], message: str) -> int:
        """Mark every listed record failed with the same diagnostic."""
        return await self.store.update_many(
            ids, RecordPatch(status=RecordStatus.FAILED, error_message=message)
        )

    async def clear(self) -> int:
        return await self.store.delete_all()

    async def status_counts(self) -> dict[RecordStatus, int]:
        return await self.store.count_by_status()

    async def latest_analyzed_at(self) -> Optional[datetime]:
        return await self.store.latest_analyzed_at()
