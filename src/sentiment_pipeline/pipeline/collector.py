"""
Ingestion collector.

Fetches candidate posts from every configured source in sequence, each
through the backoff executor, normalizes them and stores the survivors as
pending records. A failing source is recorded and skipped; the run only
fails when every source failed.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Optional

import structlog

from sentiment_pipeline.models.records import NewRecord
from sentiment_pipeline.models.results import CollectionResult
from sentiment_pipeline.monitoring.metrics import posts_ingested_total, source_fetch_failures_total
from sentiment_pipeline.persistence.lifecycle import LifecycleStore
from sentiment_pipeline.retry.backoff import BackoffPolicy, SleepFunc, retry_with_backoff
from sentiment_pipeline.sources.base import BaseSourceFetcher

logger = structlog.get_logger(__name__)


@dataclass
class SourceOutcome:
    """What one source contributed to a collection run."""

    source_name: str
    candidates: list[NewRecord] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class IngestionCollector:
    """Collect posts from all sources into the record store."""

    def __init__(
        self,
        fetcher: BaseSourceFetcher,
        lifecycle: LifecycleStore,
        sources: list[str],
        fetch_limit: int = 10,
        min_content_length: int = 10,
        politeness_delay_ms: int = 1000,
        policy: BackoffPolicy = BackoffPolicy(),
        sleep: SleepFunc = asyncio.sleep,
    ):
        self.fetcher = fetcher
        self.lifecycle = lifecycle
        self.sources = list(sources)
        self.fetch_limit = fetch_limit
        self.min_content_length = min_content_length
        self.politeness_delay_ms = politeness_delay_ms
        self.policy = policy
        self._sleep = sleep

    def normalize(self, posts, source_name: str) -> list[NewRecord]:
        """Turn fetched posts into candidates, dropping short content."""
        candidates = []
        for post in posts:
            content = post.normalized_content()
            if len(content) <= self.min_content_length:
                continue
            candidates.append(NewRecord(source=post.source or f"r/{source_name}", content=content))
        return candidates

    async def _collect_source(self, source_name: str) -> SourceOutcome:
        try:
            posts = await retry_with_backoff(
                lambda: self.fetcher.fetch(source_name, self.fetch_limit),
                max_attempts=self.policy.max_attempts,
                initial_delay_ms=self.policy.initial_delay_ms,
                max_delay_ms=self.policy.max_delay_ms,
                on_retry=lambda attempt, error: logger.info(
                    "Retrying source", source=source_name, attempt=attempt, error=str(error)
                ),
                operation_name="source_fetch",
                sleep=self._sleep,
            )
        except Exception as e:
            source_fetch_failures_total.labels(source=source_name).inc()
            message = f"Failed to fetch r/{source_name} after {self.policy.max_attempts} retries: {e}"
            logger.error("Source failed", source=source_name, error=str(e))
            return SourceOutcome(source_name=source_name, error=message)

        candidates = self.normalize(posts, source_name)
        logger.info(
            "Source fetched",
            source=source_name,
            fetched=len(posts),
            kept=len(candidates),
        )
        await self._sleep(self.politeness_delay_ms / 1000)
        return SourceOutcome(source_name=source_name, candidates=candidates)

    async def collect(self) -> CollectionResult:
        """
        Run one collection across all configured sources.

        Returns:
            CollectionResult with inserted ids and per-source errors

        Raises:
            StoreError: Pending records could not be written
        """
        outcomes = []
        for source_name in self.sources:
            outcomes.append(await self._collect_source(source_name))

        errors = [outcome.error for outcome in outcomes if outcome.failed]
        if outcomes and len(errors) == len(outcomes):
            logger.error("All sources failed", sources=self.sources)
            return CollectionResult(
                success=False,
                errors=errors,
                error="All sources failed to scrape",
            )

        candidates = [c for outcome in outcomes for c in outcome.candidates]
        if not candidates:
            logger.info("No posts found", failed_sources=len(errors))
            return CollectionResult(
                success=True,
                errors=errors,
                warning=self._warning(errors, 0),
                message="No posts found",
            )

        inserted = await self.lifecycle.create_pending(candidates)
        for outcome in outcomes:
            if outcome.candidates:
                posts_ingested_total.labels(source=outcome.source_name).inc(len(outcome.candidates))

        logger.info("Collection complete", scraped=len(inserted), failed_sources=len(errors))
        return CollectionResult(
            success=True,
            scraped_count=len(inserted),
            inserted_ids=[record.id for record in inserted],
            errors=errors,
            warning=self._warning(errors, len(inserted)),
        )

    @staticmethod
    def _warning(errors: list[str], scraped: int) -> Optional[str]:
        if not errors:
            return None
        return f"{len(errors)} source(s) failed but {scraped} posts scraped"
