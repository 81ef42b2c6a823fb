"""
Unit tests for InMemoryItemStore and LifecycleStore transitions.
"""

import pytest

from sentiment_pipeline.models.enums import RecordStatus, Sentiment
from sentiment_pipeline.models.records import PostAnalysis, RecordPatch
from sentiment_pipeline.persistence.exceptions import StoreError
from tests.fixtures.factories import make_new_records


@pytest.mark.asyncio
async def test_insert_creates_pending_records_with_ids(memory_store):
    records = await memory_store.insert(make_new_records(3))

    assert len({r.id for r in records}) == 3
    assert all(r.status == RecordStatus.PENDING for r in records)
    assert (await memory_store.count_by_status())[RecordStatus.PENDING] == 3


@pytest.mark.asyncio
async def test_select_is_oldest_first_and_limited(memory_store):
    inserted = await memory_store.insert(make_new_records(5))

    selected = await memory_store.select(RecordStatus.PENDING, 3)

    assert [r.id for r in selected] == [r.id for r in inserted[:3]]


@pytest.mark.asyncio
async def test_update_many_skips_unknown_ids(memory_store):
    inserted = await memory_store.insert(make_new_records(2))

    updated = await memory_store.update_many(
        [inserted[0].id, "missing"], RecordPatch(status=RecordStatus.PROCESSING)
    )

    assert updated == 1
    counts = await memory_store.count_by_status()
    assert counts[RecordStatus.PROCESSING] == 1
    assert counts[RecordStatus.PENDING] == 1


@pytest.mark.asyncio
async def test_update_one_unknown_id_raises(memory_store):
    with pytest.raises(StoreError):
        await memory_store.update_one("missing", RecordPatch(status=RecordStatus.PROCESSING))


@pytest.mark.asyncio
async def test_delete_all_returns_count(memory_store):
    await memory_store.insert(make_new_records(4))

    assert await memory_store.delete_all() == 4
    assert await memory_store.count_by_status() == {status: 0 for status in RecordStatus}


class TestLifecycleStore:
    @pytest.mark.asyncio
    async def test_full_success_path(self, lifecycle, memory_store):
        [record] = await lifecycle.create_pending(make_new_records(1))

        await lifecycle.claim([record.id])
        claimed = await memory_store.get(record.id)
        assert claimed.status == RecordStatus.PROCESSING

        analysis = PostAnalysis(sentiment=Sentiment.POSITIVE, summary="Loves the Eurofighter")
        completed = await lifecycle.mark_completed(record.id, analysis)

        assert completed.status == RecordStatus.COMPLETED
        assert completed.sentiment == Sentiment.POSITIVE
        assert completed.analysis == analysis
        assert completed.analyzed_at is not None
        assert completed.error_message is None
        assert completed.content == record.content
        assert completed.created_at == record.created_at

    @pytest.mark.asyncio
    async def test_retry_claim_clears_previous_error(self, lifecycle, memory_store):
        [record] = await lifecycle.create_pending(make_new_records(1))
        await lifecycle.claim([record.id])
        await lifecycle.mark_batch_failed([record.id], "Batch failed after 3 retries: boom")

        failed = await lifecycle.select_for(RecordStatus.FAILED, 40)
        assert failed[0].error_message == "Batch failed after 3 retries: boom"

        await lifecycle.claim([record.id])
        reclaimed = await memory_store.get(record.id)
        assert reclaimed.status == RecordStatus.PROCESSING
        assert reclaimed.error_message is None

    @pytest.mark.asyncio
    async def test_create_pending_with_nothing_does_not_touch_store(self, lifecycle):
        assert await lifecycle.create_pending([]) == []

    @pytest.mark.asyncio
    async def test_latest_analyzed_at(self, lifecycle):
        assert await lifecycle.latest_analyzed_at() is None

        records = await lifecycle.create_pending(make_new_records(2))
        analysis = PostAnalysis(sentiment=Sentiment.NEUTRAL, summary="Spotting report")
        first = await lifecycle.mark_completed(records[0].id, analysis)
        second = await lifecycle.mark_completed(records[1].id, analysis)

        assert await lifecycle.latest_analyzed_at() == max(first.analyzed_at, second.analyzed_at)

    @pytest.mark.asyncio
    async def test_clear(self, lifecycle):
        await lifecycle.create_pending(make_new_records(3))

        assert await lifecycle.clear() == 3
        assert await lifecycle.status_counts() == {status: 0 for status in RecordStatus}
