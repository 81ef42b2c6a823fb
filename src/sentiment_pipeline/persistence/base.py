"""
Abstract record store.

Stores hold ItemRecord documents keyed by id and indexed by status. Selection
is oldest-first by ``created_at``. Content fields are never modified after
insert; updates go through RecordPatch.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from sentiment_pipeline.models.enums import RecordStatus
from sentiment_pipeline.models.records import ItemRecord, NewRecord, RecordPatch


class ItemStore(ABC):
    """Persistence interface for ItemRecords."""

    @abstractmethod
    async def insert(self, records: list[NewRecord]) -> list[ItemRecord]:
        """Insert new records as ``pending`` and return them with assigned ids."""

    @abstractmethod
    async def select(self, status: RecordStatus, limit: int) -> list[ItemRecord]:
        """Return up to ``limit`` records in ``status``, oldest first."""

    @abstractmethod
    async def update_many(self, ids: list[str], patch: RecordPatch) -> int:
        """
        Apply one patch to every listed record as a single write.

        Unknown ids are skipped. Returns the number of records updated.
        """

    @abstractmethod
    async def update_one(self, record_id: str, patch: RecordPatch) -> ItemRecord:
        """Apply a patch to one record and return the updated record."""

    @abstractmethod
    async def delete_all(self) -> int:
        """Delete every record. Returns the number deleted."""

    @abstractmethod
    async def count_by_status(self) -> dict[RecordStatus, int]:
        """Record counts for every status (zero when absent)."""

    @abstractmethod
    async def latest_analyzed_at(self) -> Optional[datetime]:
        """Most recent ``analyzed_at`` across all records, if any."""

    async def close(self) -> None:
        """Release connections. Default implementation does nothing."""
