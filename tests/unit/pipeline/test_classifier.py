"""
Unit tests for BatchClassifier.

Covers the claim, the single LLM call per batch, positional reconciliation
with fallback, total batch failure and retry mode.
"""

from unittest.mock import AsyncMock

import pytest

from sentiment_pipeline.llm.exceptions import LLMConnectionError
from sentiment_pipeline.llm.prompt_builder import PromptBuilder
from sentiment_pipeline.models.enums import RecordStatus, Sentiment
from sentiment_pipeline.models.records import FALLBACK_ANALYSIS
from sentiment_pipeline.persistence.exceptions import StoreError
from sentiment_pipeline.pipeline.classifier import BatchClassifier
from sentiment_pipeline.retry.backoff import BackoffPolicy
from tests.fixtures.factories import (
    make_analyses,
    make_llm_response,
    make_new_records,
    mock_llm_client,
)


def make_classifier(llm_client, lifecycle, sleep, batch_size=40) -> BatchClassifier:
    return BatchClassifier(
        llm_client=llm_client,
        prompt_builder=PromptBuilder(model="gpt-4o-mini"),
        lifecycle=lifecycle,
        batch_size=batch_size,
        policy=BackoffPolicy(max_attempts=3, initial_delay_ms=2000, max_delay_ms=10000),
        sleep=sleep,
    )


async def all_records(store):
    records = []
    for status in RecordStatus:
        records.extend(await store.select(status, 1000))
    return records


@pytest.mark.asyncio
async def test_full_batch_succeeds(lifecycle, memory_store, recording_sleep):
    await lifecycle.create_pending(make_new_records(5))
    llm = mock_llm_client(make_llm_response(make_analyses(5, sentiment="positive")))

    result = await make_classifier(llm, lifecycle, recording_sleep).classify()

    assert result.success is True
    assert result.analyzed_count == 5
    assert result.failed_count == 0
    assert llm.generate.await_count == 1
    records = await all_records(memory_store)
    assert all(r.status == RecordStatus.COMPLETED for r in records)
    assert all(r.sentiment == Sentiment.POSITIVE for r in records)
    assert all(r.analyzed_at is not None and r.error_message is None for r in records)


@pytest.mark.asyncio
async def test_analyses_are_mapped_by_position(lifecycle, memory_store, recording_sleep):
    inserted = await lifecycle.create_pending(make_new_records(2))
    reply = {
        "analyses": [
            {"sentiment": "negative", "summary": "First"},
            {"sentiment": "positive", "summary": "Second"},
        ]
    }
    llm = mock_llm_client(make_llm_response(reply))

    await make_classifier(llm, lifecycle, recording_sleep).classify()

    first = await memory_store.get(inserted[0].id)
    second = await memory_store.get(inserted[1].id)
    assert (first.sentiment, first.analysis.summary) == (Sentiment.NEGATIVE, "First")
    assert (second.sentiment, second.analysis.summary) == (Sentiment.POSITIVE, "Second")


@pytest.mark.asyncio
async def test_batch_is_capped_at_batch_size(lifecycle, memory_store, recording_sleep):
    await lifecycle.create_pending(make_new_records(45))
    llm = mock_llm_client(make_llm_response(make_analyses(40)))

    result = await make_classifier(llm, lifecycle, recording_sleep).classify()

    assert result.total == 40
    assert result.analyzed_count == 40
    counts = await lifecycle.status_counts()
    assert counts[RecordStatus.COMPLETED] == 40
    assert counts[RecordStatus.PENDING] == 5
    request = llm.generate.await_args.args[0]
    assert "Post 40:" in request.prompt
    assert "Post 41:" not in request.prompt


@pytest.mark.asyncio
async def test_short_reply_gets_fallback_for_missing_positions(lifecycle, memory_store, recording_sleep):
    inserted = await lifecycle.create_pending(make_new_records(5))
    llm = mock_llm_client(make_llm_response(make_analyses(3, sentiment="negative")))

    result = await make_classifier(llm, lifecycle, recording_sleep).classify()

    assert result.success is True
    assert result.analyzed_count == 5
    assert result.failed_count == 0
    for record in inserted[:3]:
        assert (await memory_store.get(record.id)).sentiment == Sentiment.NEGATIVE
    for record in inserted[3:]:
        stored = await memory_store.get(record.id)
        assert stored.status == RecordStatus.COMPLETED
        assert stored.analysis == FALLBACK_ANALYSIS


@pytest.mark.asyncio
async def test_malformed_reply_completes_everything_with_fallback(lifecycle, memory_store, recording_sleep):
    await lifecycle.create_pending(make_new_records(3))
    llm = mock_llm_client(make_llm_response("this is not JSON"))

    result = await make_classifier(llm, lifecycle, recording_sleep).classify()

    assert result.success is True
    assert result.analyzed_count == 3
    records = await all_records(memory_store)
    assert all(r.analysis == FALLBACK_ANALYSIS for r in records)
    assert all(r.sentiment == Sentiment.NEUTRAL for r in records)


@pytest.mark.asyncio
async def test_invalid_entry_falls_back_without_shifting_neighbors(lifecycle, memory_store, recording_sleep):
    inserted = await lifecycle.create_pending(make_new_records(3))
    reply = {
        "analyses": [
            {"sentiment": "positive", "summary": "One"},
            {"sentiment": "furious", "summary": "Two"},
            {"sentiment": "negative", "summary": "Three"},
        ]
    }
    llm = mock_llm_client(make_llm_response(reply))

    await make_classifier(llm, lifecycle, recording_sleep).classify()

    assert (await memory_store.get(inserted[1].id)).analysis == FALLBACK_ANALYSIS
    assert (await memory_store.get(inserted[2].id)).analysis.summary == "Three"


@pytest.mark.asyncio
async def test_total_failure_marks_every_record_failed(lifecycle, memory_store, recording_sleep):
    await lifecycle.create_pending(make_new_records(4))
    llm = mock_llm_client(side_effect=LLMConnectionError("Network error: connection refused"))

    result = await make_classifier(llm, lifecycle, recording_sleep).classify()

    assert result.success is False
    assert result.analyzed_count == 0
    assert result.failed_count == 4
    assert llm.generate.await_count == 3
    assert [call.args[0] for call in recording_sleep.await_args_list] == [2.0, 4.0]
    records = await all_records(memory_store)
    assert all(r.status == RecordStatus.FAILED for r in records)
    assert all(
        r.error_message == "Batch failed after 3 retries: Network error: connection refused"
        for r in records
    )
    assert (await lifecycle.status_counts())[RecordStatus.PROCESSING] == 0


@pytest.mark.asyncio
async def test_recovers_when_a_later_attempt_succeeds(lifecycle, recording_sleep):
    await lifecycle.create_pending(make_new_records(2))
    llm = mock_llm_client(
        side_effect=[LLMConnectionError("reset"), make_llm_response(make_analyses(2))]
    )

    result = await make_classifier(llm, lifecycle, recording_sleep).classify()

    assert result.success is True
    assert result.analyzed_count == 2
    assert llm.generate.await_count == 2


@pytest.mark.asyncio
async def test_empty_store_is_a_no_op(lifecycle, recording_sleep):
    llm = mock_llm_client(make_llm_response(make_analyses(0)))

    result = await make_classifier(llm, lifecycle, recording_sleep).classify()

    assert result.success is True
    assert result.analyzed_count == 0
    assert result.message == "No pending records to analyze"
    llm.generate.assert_not_awaited()


@pytest.mark.asyncio
async def test_retry_mode_targets_failed_records(lifecycle, memory_store, recording_sleep):
    records = await lifecycle.create_pending(make_new_records(3))
    await lifecycle.claim([records[0].id, records[1].id])
    await lifecycle.mark_batch_failed([records[0].id, records[1].id], "Batch failed after 3 retries: x")
    llm = mock_llm_client(make_llm_response(make_analyses(2)))

    result = await make_classifier(llm, lifecycle, recording_sleep).classify(retry=True)

    assert result.target_status == RecordStatus.FAILED
    assert result.analyzed_count == 2
    assert (await memory_store.get(records[0].id)).status == RecordStatus.COMPLETED
    assert (await memory_store.get(records[0].id)).error_message is None
    assert (await memory_store.get(records[2].id)).status == RecordStatus.PENDING


@pytest.mark.asyncio
async def test_retry_mode_with_nothing_failed(lifecycle, recording_sleep):
    await lifecycle.create_pending(make_new_records(2))
    llm = mock_llm_client(make_llm_response(make_analyses(2)))

    result = await make_classifier(llm, lifecycle, recording_sleep).classify(retry=True)

    assert result.message == "No failed records to analyze"
    llm.generate.assert_not_awaited()


@pytest.mark.asyncio
async def test_records_are_claimed_before_the_model_call(lifecycle, recording_sleep):
    await lifecycle.create_pending(make_new_records(2))
    seen_counts = {}

    async def generate(request):
        seen_counts.update(await lifecycle.status_counts())
        return make_llm_response(make_analyses(2))

    llm = mock_llm_client(side_effect=generate)

    await make_classifier(llm, lifecycle, recording_sleep).classify()

    assert seen_counts[RecordStatus.PROCESSING] == 2
    assert seen_counts[RecordStatus.PENDING] == 0


@pytest.mark.asyncio
async def test_failed_write_only_fails_that_record(lifecycle, memory_store, recording_sleep):
    inserted = await lifecycle.create_pending(make_new_records(3))
    broken_id = inserted[1].id
    original_mark_completed = lifecycle.mark_completed

    async def mark_completed(record_id, analysis):
        if record_id == broken_id:
            raise StoreError("write rejected")
        return await original_mark_completed(record_id, analysis)

    lifecycle.mark_completed = AsyncMock(side_effect=mark_completed)
    llm = mock_llm_client(make_llm_response(make_analyses(3)))

    result = await make_classifier(llm, lifecycle, recording_sleep).classify()

    assert result.analyzed_count == 2
    assert result.failed_count == 1
    broken = await memory_store.get(broken_id)
    assert broken.status == RecordStatus.FAILED
    assert broken.error_message == "write rejected"
    assert (await memory_store.get(inserted[0].id)).status == RecordStatus.COMPLETED
