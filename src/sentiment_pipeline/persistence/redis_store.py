"""
Redis-backed record store.

Storage layout:
- Records: String per record, key = "{prefix}:record:{id}", JSON document
- Status index: Sorted set "{prefix}:status:{status}" (score = created_at)
- Analyzed index: Sorted set "{prefix}:analyzed" (score = analyzed_at)

Bulk updates WATCH the affected record keys and commit every document and
index change in one MULTI/EXEC, so a claim is all-or-nothing.
"""

from datetime import datetime, timezone
from typing import Optional

import structlog
from redis.asyncio import Redis as AsyncRedis
from redis.exceptions import RedisError

from sentiment_pipeline.models.enums import RecordStatus
from sentiment_pipeline.models.records import ItemRecord, NewRecord, RecordPatch
from sentiment_pipeline.persistence.base import ItemStore
from sentiment_pipeline.persistence.exceptions import StoreError

logger = structlog.get_logger(__name__)


class RedisItemStore(ItemStore):
    """ItemStore over redis.asyncio."""

    def __init__(self, redis_client: AsyncRedis, key_prefix: str = "sentiment"):
        """
        Args:
            redis_client: AsyncRedis client (decode_responses=True)
            key_prefix: Namespace for every key written by this store
        """
        self.redis = redis_client
        self.key_prefix = key_prefix
        self.analyzed_key = f"{key_prefix}:analyzed"

    def _record_key(self, record_id: str) -> str:
        return f"{self.key_prefix}:record:{record_id}"

    def _status_key(self, status: RecordStatus) -> str:
        return f"{self.key_prefix}:status:{status.value}"

    def _queue_write(self, pipe, previous: Optional[ItemRecord], record: ItemRecord) -> None:
        """Buffer the document write and index moves for one record."""
        pipe.set(self._record_key(record.id), record.model_dump_json())
        if previous is None or previous.status != record.status:
            if previous is not None:
                pipe.zrem(self._status_key(previous.status), record.id)
            pipe.zadd(self._status_key(record.status), {record.id: record.created_at.timestamp()})
        if record.analyzed_at is not None:
            pipe.zadd(self.analyzed_key, {record.id: record.analyzed_at.timestamp()})

    async def insert(self, records: list[NewRecord]) -> list[ItemRecord]:
        created = [ItemRecord.from_new(record) for record in records]
        if not created:
            return []
        try:
            async with self.redis.pipeline(transaction=True) as pipe:
                for record in created:
                    self._queue_write(pipe, None, record)
                await pipe.execute()
        except RedisError as e:
            logger.error("Failed to insert records", count=len(created), error=str(e))
            raise StoreError(f"Failed to insert records: {e}", details={"count": len(created)}) from e
        return created

    async def select(self, status: RecordStatus, limit: int) -> list[ItemRecord]:
        if limit <= 0:
            return []
        try:
            ids = await self.redis.zrange(self._status_key(status), 0, limit - 1)
            if not ids:
                return []
            documents = await self.redis.mget([self._record_key(i) for i in ids])
        except RedisError as e:
            raise StoreError(f"Failed to select {status.value} records: {e}") from e
        return [ItemRecord.model_validate_json(doc) for doc in documents if doc is not None]

    async def update_many(self, ids: list[str], patch: RecordPatch) -> int:
        if not ids:
            return 0
        keys = [self._record_key(i) for i in ids]
        try:
            async with self.redis.pipeline(transaction=True) as pipe:
                await pipe.watch(*keys)
                documents = await pipe.mget(keys)
                current = [ItemRecord.model_validate_json(doc) for doc in documents if doc is not None]
                pipe.multi()
                for record in current:
                    self._queue_write(pipe, record, record.apply(patch))
                await pipe.execute()
        except RedisError as e:
            logger.error("Bulk update failed", count=len(ids), error=str(e))
            raise StoreError(f"Bulk update failed: {e}", details={"ids": ids}) from e
        return len(current)

    async def update_one(self, record_id: str, patch: RecordPatch) -> ItemRecord:
        key = self._record_key(record_id)
        try:
            async with self.redis.pipeline(transaction=True) as pipe:
                await pipe.watch(key)
                document = await pipe.get(key)
                if document is None:
                    raise StoreError(f"Record {record_id} not found", details={"id": record_id})
                previous = ItemRecord.model_validate_json(document)
                updated = previous.apply(patch)
                pipe.multi()
                self._queue_write(pipe, previous, updated)
                await pipe.execute()
        except RedisError as e:
            raise StoreError(f"Update of {record_id} failed: {e}", details={"id": record_id}) from e
        return updated

    async def delete_all(self) -> int:
        status_keys = [self._status_key(status) for status in RecordStatus]
        try:
            async with self.redis.pipeline(transaction=False) as pipe:
                for status_key in status_keys:
                    pipe.zrange(status_key, 0, -1)
                id_lists = await pipe.execute()
            ids = {record_id for id_list in id_lists for record_id in id_list}

            async with self.redis.pipeline(transaction=True) as pipe:
                for record_id in ids:
                    pipe.delete(self._record_key(record_id))
                pipe.delete(*status_keys, self.analyzed_key)
                await pipe.execute()
        except RedisError as e:
            raise StoreError(f"Failed to clear records: {e}") from e

        logger.info("Cleared Redis store", deleted=len(ids), prefix=self.key_prefix)
        return len(ids)

    async def count_by_status(self) -> dict[RecordStatus, int]:
        statuses = list(RecordStatus)
        try:
            async with self.redis.pipeline(transaction=False) as pipe:
                for status in statuses:
                    pipe.zcard(self._status_key(status))
                counts = await pipe.execute()
        except RedisError as e:
            raise StoreError(f"Failed to count records: {e}") from e
        return {status: int(count) for status, count in zip(statuses, counts)}

    async def latest_analyzed_at(self) -> Optional[datetime]:
        try:
            newest = await self.redis.zrevrange(self.analyzed_key, 0, 0, withscores=True)
        except RedisError as e:
            raise StoreError(f"Failed to read analyzed index: {e}") from e
        if not newest:
            return None
        _, score = newest[0]
        return datetime.fromtimestamp(float(score), tz=timezone.utc)
