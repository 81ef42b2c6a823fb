"""
Unit tests for PipelineService and build_services wiring.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from sentiment_pipeline.llm.ollama_client import OllamaClient
from sentiment_pipeline.llm.openai_client import OpenAIClient
from sentiment_pipeline.models.enums import HealthVerdict, RecordStatus
from sentiment_pipeline.persistence.memory_store import InMemoryItemStore
from sentiment_pipeline.persistence.redis_store import RedisItemStore
from sentiment_pipeline.pipeline.service import build_llm_client, build_services
from tests.fixtures.factories import (
    FakeSourceFetcher,
    make_analyses,
    make_llm_response,
    make_post,
    mock_llm_client,
)


def test_build_llm_client_selects_provider(test_settings):
    assert isinstance(build_llm_client(test_settings), OpenAIClient)

    ollama_settings = test_settings.model_copy(update={"LLM_PROVIDER": "ollama"})
    assert isinstance(build_llm_client(ollama_settings), OllamaClient)

    with pytest.raises(ValueError):
        build_llm_client(test_settings.model_copy(update={"LLM_PROVIDER": "bard"}))


def test_build_services_uses_configured_store(test_settings):
    service = build_services(test_settings)
    assert isinstance(service.lifecycle.store, InMemoryItemStore)

    redis_settings = test_settings.model_copy(update={"STORE_BACKEND": "redis"})
    with patch("sentiment_pipeline.persistence.redis_client.AsyncConnectionPool") as mock_pool:
        mock_pool.from_url.return_value = MagicMock()
        service = build_services(redis_settings)
    assert isinstance(service.lifecycle.store, RedisItemStore)
    assert service.lifecycle.store.key_prefix == redis_settings.REDIS_KEY_PREFIX


def test_build_services_applies_retry_settings(test_settings):
    settings = test_settings.model_copy(
        update={"RETRY_MAX_ATTEMPTS": 4, "CLASSIFIER_RETRY_INITIAL_DELAY_MS": 2000}
    )

    service = build_services(settings)

    assert service.classifier.policy.delays() == [2000, 4000, 8000]
    assert service.collector.policy.delays() == [1000, 2000, 4000]
    assert service.classifier.batch_size == 40


@pytest.mark.asyncio
async def test_end_to_end_with_fakes(test_settings, recording_sleep):
    fetcher = FakeSourceFetcher(
        {
            "FighterJets": [make_post("Su-57 spotted over the Black Sea", source="r/FighterJets")],
            "aviation": [make_post("A380 final approach at Heathrow", source="r/aviation")],
        }
    )
    llm = mock_llm_client(make_llm_response(make_analyses(2)))
    service = build_services(
        test_settings,
        store=InMemoryItemStore(),
        fetcher=fetcher,
        llm_client=llm,
        sleep=recording_sleep,
    )

    report = await service.run_pipeline()
    health = await service.health()

    assert report.success is True
    assert report.summary == "Scraped 2 posts, analyzed 2 successfully"
    assert health.metrics.by_status.completed == 2
    assert health.status == HealthVerdict.HEALTHY

    cleared = await service.clear()
    assert cleared.deleted == 2
    assert cleared.message == "All data cleared successfully"
    assert (await service.health()).status == HealthVerdict.IDLE


@pytest.mark.asyncio
async def test_close_closes_owned_resources(test_settings):
    fetcher = FakeSourceFetcher({})
    fetcher.close = AsyncMock()
    llm = mock_llm_client()
    service = build_services(test_settings, fetcher=fetcher, llm_client=llm)

    await service.close()

    # Injected collaborators are owned by the caller
    fetcher.close.assert_not_awaited()
    llm.close.assert_not_awaited()


@pytest.mark.asyncio
async def test_analyze_retry_flag_is_forwarded(test_settings, recording_sleep):
    llm = mock_llm_client(make_llm_response(make_analyses(0)))
    service = build_services(test_settings, fetcher=FakeSourceFetcher({}), llm_client=llm, sleep=recording_sleep)

    result = await service.analyze(retry=True)

    assert result.target_status == RecordStatus.FAILED
