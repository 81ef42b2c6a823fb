"""
In-process record store.

Used for single-process deployments (``STORE_BACKEND=memory``) and tests.
A single asyncio.Lock serializes writes so bulk updates are atomic with
respect to other coroutines.
"""

import asyncio
from datetime import datetime
from typing import Optional

import structlog

from sentiment_pipeline.models.enums import RecordStatus
from sentiment_pipeline.models.records import ItemRecord, NewRecord, RecordPatch
from sentiment_pipeline.persistence.base import ItemStore
from sentiment_pipeline.persistence.exceptions import StoreError

logger = structlog.get_logger(__name__)


class InMemoryItemStore(ItemStore):
    """Dictionary-backed ItemStore."""

    def __init__(self):
        self._records: dict[str, ItemRecord] = {}
        self._lock = asyncio.Lock()

    async def insert(self, records: list[NewRecord]) -> list[ItemRecord]:
        created = [ItemRecord.from_new(record) for record in records]
        async with self._lock:
            for record in created:
                self._records[record.id] = record
        return created

    async def select(self, status: RecordStatus, limit: int) -> list[ItemRecord]:
        matching = [r for r in self._records.values() if r.status == status]
        matching.sort(key=lambda r: r.created_at)
        return matching[:limit]

    async def update_many(self, ids: list[str], patch: RecordPatch) -> int:
        async with self._lock:
            updated = {
                record_id: self._records[record_id].apply(patch)
                for record_id in ids
                if record_id in self._records
            }
            self._records.update(updated)
        return len(updated)

    async def update_one(self, record_id: str, patch: RecordPatch) -> ItemRecord:
        async with self._lock:
            record = self._records.get(record_id)
            if record is None:
                raise StoreError(f"Record {record_id} not found", details={"id": record_id})
            updated = record.apply(patch)
            self._records[record_id] = updated
        return updated

    async def get(self, record_id: str) -> Optional[ItemRecord]:
        return self._records.get(record_id)

    async def delete_all(self) -> int:
        async with self._lock:
            deleted = len(self._records)
            self._records.clear()
        logger.debug("Cleared in-memory store", deleted=deleted)
        return deleted

    async def count_by_status(self) -> dict[RecordStatus, int]:
        counts = {status: 0 for status in RecordStatus}
        for record in self._records.values():
            counts[record.status] += 1
        return counts

    async def latest_analyzed_at(self) -> Optional[datetime]:
        stamps = [r.analyzed_at for r in self._records.values() if r.analyzed_at is not None]
        return max(stamps) if stamps else None
