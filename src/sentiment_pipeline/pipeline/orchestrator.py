"""
Pipeline orchestrator: collect, wait for the store to settle, classify.
"""

import asyncio

import structlog

from sentiment_pipeline.models.results import (
    AnalyzeStep,
    PipelineReport,
    PipelineSteps,
    ScrapeStep,
)
from sentiment_pipeline.persistence.exceptions import StoreError
from sentiment_pipeline.pipeline.classifier import BatchClassifier
from sentiment_pipeline.pipeline.collector import IngestionCollector
from sentiment_pipeline.retry.backoff import SleepFunc

logger = structlog.get_logger(__name__)


class PipelineOrchestrator:
    """Run ingestion then classification and merge both outcomes."""

    def __init__(
        self,
        collector: IngestionCollector,
        classifier: BatchClassifier,
        settle_delay_ms: int = 2000,
        sleep: SleepFunc = asyncio.sleep,
    ):
        self.collector = collector
        self.classifier = classifier
        self.settle_delay_ms = settle_delay_ms
        self._sleep = sleep

    async def run(self) -> PipelineReport:
        logger.info("Pipeline started")

        try:
            collection = await self.collector.collect()
        except StoreError as e:
            logger.error("Pipeline failed at scrape step", error=str(e), exc_info=True)
            return PipelineReport(
                success=False,
                pipeline="failed",
                failed_step="scrape",
                steps=PipelineSteps(scrape=ScrapeStep(success=False, errors=[str(e)])),
                summary="Scraped 0 posts, analyzed 0 successfully",
                error="Scrape failed",
            )

        scrape_step = ScrapeStep(
            success=collection.success,
            count=collection.scraped_count,
            warning=collection.warning,
            errors=collection.errors,
        )
        warnings = [collection.warning] if collection.warning else []

        if not collection.success:
            logger.error("Pipeline failed at scrape step", error=collection.error)
            return PipelineReport(
                success=False,
                pipeline="failed",
                failed_step="scrape",
                steps=PipelineSteps(scrape=scrape_step),
                summary="Scraped 0 posts, analyzed 0 successfully",
                warnings=warnings,
                error=collection.error,
            )

        await self._sleep(self.settle_delay_ms / 1000)

        try:
            classification = await self.classifier.classify(retry=False)
        except StoreError as e:
            logger.error("Pipeline failed at analyze step", error=str(e), exc_info=True)
            return PipelineReport(
                success=False,
                pipeline="failed",
                failed_step="analyze",
                steps=PipelineSteps(
                    scrape=scrape_step, analyze=AnalyzeStep(success=False, error=str(e))
                ),
                summary=f"Scraped {collection.scraped_count} posts, analyzed 0 successfully",
                warnings=warnings,
                error="Analyze failed",
            )

        analyze_step = AnalyzeStep(
            success=classification.success,
            analyzed=classification.analyzed_count,
            failed=classification.failed_count,
            error=classification.details or classification.error,
        )
        summary = (
            f"Scraped {collection.scraped_count} posts, "
            f"analyzed {classification.analyzed_count} successfully"
        )
        steps = PipelineSteps(scrape=scrape_step, analyze=analyze_step)

        if not classification.success:
            logger.error("Pipeline failed at analyze step", error=classification.details)
            return PipelineReport(
                success=False,
                pipeline="failed",
                failed_step="analyze",
                steps=steps,
                summary=summary,
                warnings=warnings,
                error=classification.error,
            )

        logger.info("Pipeline completed", summary=summary)
        return PipelineReport(
            success=True,
            pipeline="completed",
            steps=steps,
            summary=summary,
            warnings=warnings,
        )
