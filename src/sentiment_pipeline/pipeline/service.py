"""
Administrative service surface and dependency wiring.

``build_services(settings)`` constructs every collaborator once (HTTP
clients, record store, collector, classifier, reporters) and returns a
PipelineService that the HTTP layer keeps on ``app.state``.
"""

import asyncio
from typing import Optional

import structlog

from sentiment_pipeline.config import Settings
from sentiment_pipeline.llm.base_client import BaseLLMClient
from sentiment_pipeline.llm.ollama_client import OllamaClient
from sentiment_pipeline.llm.openai_client import OpenAIClient
from sentiment_pipeline.llm.prompt_builder import PromptBuilder
from sentiment_pipeline.logging_config import bind_run_context
from sentiment_pipeline.models.results import (
    ClassificationResult,
    ClearResult,
    CollectionResult,
    HealthSnapshot,
    PipelineReport,
)
from sentiment_pipeline.persistence.base import ItemStore
from sentiment_pipeline.persistence.lifecycle import LifecycleStore
from sentiment_pipeline.persistence.memory_store import InMemoryItemStore
from sentiment_pipeline.persistence.redis_client import RedisClient
from sentiment_pipeline.persistence.redis_store import RedisItemStore
from sentiment_pipeline.pipeline.classifier import BatchClassifier
from sentiment_pipeline.pipeline.collector import IngestionCollector
from sentiment_pipeline.pipeline.health import HealthReporter
from sentiment_pipeline.pipeline.orchestrator import PipelineOrchestrator
from sentiment_pipeline.retry.backoff import BackoffPolicy, SleepFunc
from sentiment_pipeline.sources.base import BaseSourceFetcher
from sentiment_pipeline.sources.reddit import RedditSourceFetcher

logger = structlog.get_logger(__name__)


class PipelineService:
    """Entry points for the pipeline, scrape, analyze, clear and health operations."""

    def __init__(
        self,
        collector: IngestionCollector,
        classifier: BatchClassifier,
        orchestrator: PipelineOrchestrator,
        health_reporter: HealthReporter,
        lifecycle: LifecycleStore,
        closeables: Optional[list] = None,
    ):
        self.collector = collector
        self.classifier = classifier
        self.orchestrator = orchestrator
        self.health_reporter = health_reporter
        self.lifecycle = lifecycle
        self._closeables = closeables or []

    async def run_pipeline(self) -> PipelineReport:
        bind_run_context("pipeline")
        return await self.orchestrator.run()

    async def scrape(self) -> CollectionResult:
        bind_run_context("scrape")
        return await self.collector.collect()

    async def analyze(self, retry: bool = False) -> ClassificationResult:
        bind_run_context("analyze_retry" if retry else "analyze")
        return await self.classifier.classify(retry=retry)

    async def clear(self) -> ClearResult:
        deleted = await self.lifecycle.clear()
        logger.info("Cleared all records", deleted=deleted)
        return ClearResult(success=True, deleted=deleted, message="All data cleared successfully")

    async def health(self) -> HealthSnapshot:
        return await self.health_reporter.snapshot()

    async def close(self) -> None:
        """Close HTTP clients and store connections."""
        for resource in self._closeables:
            await resource.close()


def build_llm_client(settings: Settings) -> BaseLLMClient:
    """Select the LLM client from ``LLM_PROVIDER``."""
    provider = settings.LLM_PROVIDER.lower()
    if provider == "openai":
        return OpenAIClient(
            api_key=settings.OPENAI_API_KEY,
            base_url=settings.OPENAI_BASE_URL,
            timeout=settings.LLM_TIMEOUT,
        )
    if provider == "ollama":
        return OllamaClient(base_url=settings.OLLAMA_BASE_URL, timeout=settings.LLM_TIMEOUT)
    raise ValueError(f"Unknown LLM_PROVIDER: {settings.LLM_PROVIDER}")


def build_services(
    settings: Settings,
    *,
    store: Optional[ItemStore] = None,
    fetcher: Optional[BaseSourceFetcher] = None,
    llm_client: Optional[BaseLLMClient] = None,
    sleep: SleepFunc = asyncio.sleep,
) -> PipelineService:
    """
    Wire the pipeline from settings.

    Any collaborator passed explicitly replaces the one built from settings.
    """
    closeables: list = []

    if store is None:
        backend = settings.STORE_BACKEND.lower()
        if backend == "redis":
            redis_client = RedisClient(settings)
            store = RedisItemStore(redis_client.get_client(), key_prefix=settings.REDIS_KEY_PREFIX)
            closeables.append(redis_client)
        elif backend == "memory":
            store = InMemoryItemStore()
        else:
            raise ValueError(f"Unknown STORE_BACKEND: {settings.STORE_BACKEND}")

    if fetcher is None:
        fetcher = RedditSourceFetcher(
            base_url=settings.SOURCE_BASE_URL,
            user_agent=settings.SOURCE_USER_AGENT,
            timeout=settings.SOURCE_TIMEOUT,
        )
        closeables.append(fetcher)

    if llm_client is None:
        llm_client = build_llm_client(settings)
        closeables.append(llm_client)

    model = settings.OPENAI_MODEL if settings.LLM_PROVIDER.lower() == "openai" else settings.OLLAMA_MODEL
    prompt_builder = PromptBuilder(
        model=model,
        topic=settings.CLASSIFICATION_TOPIC,
        content_char_limit=settings.CONTENT_CHAR_LIMIT,
        temperature=settings.LLM_TEMPERATURE,
        max_tokens=settings.LLM_MAX_TOKENS,
    )

    lifecycle = LifecycleStore(store)
    collector = IngestionCollector(
        fetcher=fetcher,
        lifecycle=lifecycle,
        sources=settings.SOURCES,
        fetch_limit=settings.SOURCE_FETCH_LIMIT,
        min_content_length=settings.MIN_CONTENT_LENGTH,
        politeness_delay_ms=settings.SOURCE_POLITENESS_DELAY_MS,
        policy=BackoffPolicy(
            max_attempts=settings.RETRY_MAX_ATTEMPTS,
            initial_delay_ms=settings.RETRY_INITIAL_DELAY_MS,
            max_delay_ms=settings.RETRY_MAX_DELAY_MS,
        ),
        sleep=sleep,
    )
    classifier = BatchClassifier(
        llm_client=llm_client,
        prompt_builder=prompt_builder,
        lifecycle=lifecycle,
        batch_size=settings.BATCH_SIZE,
        policy=BackoffPolicy(
            max_attempts=settings.RETRY_MAX_ATTEMPTS,
            initial_delay_ms=settings.CLASSIFIER_RETRY_INITIAL_DELAY_MS,
            max_delay_ms=settings.RETRY_MAX_DELAY_MS,
        ),
        sleep=sleep,
    )
    orchestrator = PipelineOrchestrator(
        collector=collector,
        classifier=classifier,
        settle_delay_ms=settings.SETTLE_DELAY_MS,
        sleep=sleep,
    )

    logger.info(
        "Services built",
        store=type(store).__name__,
        llm=type(llm_client).__name__,
        model=model,
        sources=settings.SOURCES,
    )
    return PipelineService(
        collector=collector,
        classifier=classifier,
        orchestrator=orchestrator,
        health_reporter=HealthReporter(lifecycle),
        lifecycle=lifecycle,
        closeables=closeables,
    )
