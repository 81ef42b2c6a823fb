"""
Batch classifier.

One run selects up to ``batch_size`` records, claims them, sends a single
combined prompt to the LLM through the backoff executor and reconciles the
reply back onto the records by position.

Reconciliation rules:
- Entry ``i`` of the reply belongs to record ``i`` of the batch
- Missing or invalid entries fall back to {neutral, "Analysis unavailable"}
- A malformed reply is treated as zero valid entries
- Per-record writes run concurrently; a failed write only fails that record
- If every LLM attempt fails, the whole batch is marked failed
"""

import asyncio
from typing import Optional

import structlog

from sentiment_pipeline.llm.base_client import BaseLLMClient
from sentiment_pipeline.llm.prompt_builder import PromptBuilder
from sentiment_pipeline.models.enums import RecordStatus
from sentiment_pipeline.models.records import FALLBACK_ANALYSIS, ItemRecord, PostAnalysis
from sentiment_pipeline.models.results import ClassificationResult
from sentiment_pipeline.monitoring.metrics import classification_batches_total, records_classified_total
from sentiment_pipeline.persistence.exceptions import StoreError
from sentiment_pipeline.persistence.lifecycle import LifecycleStore
from sentiment_pipeline.retry.backoff import BackoffPolicy, SleepFunc, retry_with_backoff
from sentiment_pipeline.validation.exceptions import ResponseParseError
from sentiment_pipeline.validation.response_parser import extract_analyses

logger = structlog.get_logger(__name__)

OUTCOME_COMPLETED = "completed"
OUTCOME_FALLBACK = "fallback"
OUTCOME_FAILED = "failed"


class BatchClassifier:
    """Classify stored records in batches with one LLM call per batch."""

    def __init__(
        self,
        llm_client: BaseLLMClient,
        prompt_builder: PromptBuilder,
        lifecycle: LifecycleStore,
        batch_size: int = 40,
        policy: BackoffPolicy = BackoffPolicy(initial_delay_ms=2000),
        sleep: SleepFunc = asyncio.sleep,
    ):
        self.llm_client = llm_client
        self.prompt_builder = prompt_builder
        self.lifecycle = lifecycle
        self.batch_size = batch_size
        self.policy = policy
        self._sleep = sleep

    async def classify(self, retry: bool = False) -> ClassificationResult:
        """
        Classify one batch.

        Args:
            retry: Target failed records instead of pending ones

        Returns:
            ClassificationResult with per-record tallies

        Raises:
            StoreError: Selecting, claiming or bulk-failing the batch failed
        """
        target_status = RecordStatus.FAILED if retry else RecordStatus.PENDING
        mode = "retry" if retry else "normal"
        log = logger.bind(mode=mode, target_status=target_status.value)

        records = await self.lifecycle.select_for(target_status, self.batch_size)
        if not records:
            log.info("Nothing to classify")
            classification_batches_total.labels(mode=mode, outcome="empty").inc()
            return ClassificationResult(
                success=True,
                target_status=target_status,
                message=f"No {target_status.value} records to analyze",
            )

        ids = [record.id for record in records]
        await self.lifecycle.claim(ids)
        log.info("Claimed batch", batch_size=len(ids))

        request = self.prompt_builder.build_request([record.content for record in records])
        try:
            response = await retry_with_backoff(
                lambda: self.llm_client.generate(request),
                max_attempts=self.policy.max_attempts,
                initial_delay_ms=self.policy.initial_delay_ms,
                max_delay_ms=self.policy.max_delay_ms,
                operation_name="batch_classification",
                sleep=self._sleep,
            )
        except Exception as e:
            message = f"Batch failed after {self.policy.max_attempts} retries: {e}"
            await self.lifecycle.mark_batch_failed(ids, message)
            classification_batches_total.labels(mode=mode, outcome="failed").inc()
            records_classified_total.labels(outcome=OUTCOME_FAILED).inc(len(ids))
            log.error("Batch classification failed", batch_size=len(ids), error=str(e))
            return ClassificationResult(
                success=False,
                target_status=target_status,
                failed_count=len(ids),
                total=len(ids),
                error="Batch analysis failed",
                details=str(e),
            )

        analyses = self._parse_reply(response.content, expected=len(records))
        outcomes = await asyncio.gather(
            *(
                self._reconcile(record, analyses[position] if position < len(analyses) else None)
                for position, record in enumerate(records)
            )
        )

        failed = outcomes.count(OUTCOME_FAILED)
        analyzed = len(outcomes) - failed
        classification_batches_total.labels(mode=mode, outcome="completed").inc()
        log.info(
            "Batch classified",
            analyzed=analyzed,
            failed=failed,
            fallbacks=outcomes.count(OUTCOME_FALLBACK),
            model=response.model_version,
        )
        return ClassificationResult(
            success=True,
            target_status=target_status,
            analyzed_count=analyzed,
            failed_count=failed,
            total=len(records),
            message=f"Analyzed {analyzed} of {len(records)} records",
        )

    def _parse_reply(self, content: str, expected: int) -> list[Optional[PostAnalysis]]:
        try:
            analyses = extract_analyses(content)
        except ResponseParseError as e:
            logger.warning("Unusable LLM reply, applying fallback to whole batch", error=str(e))
            return []

        if len(analyses) != expected:
            logger.warning("Analysis count mismatch", expected=expected, received=len(analyses))
        return analyses

    async def _reconcile(self, record: ItemRecord, analysis: Optional[PostAnalysis]) -> str:
        outcome = OUTCOME_COMPLETED if analysis is not None else OUTCOME_FALLBACK
        try:
            await self.lifecycle.mark_completed(record.id, analysis or FALLBACK_ANALYSIS)
        except Exception as e:
            logger.error("Failed to store analysis", record_id=record.id, error=str(e))
            try:
                await self.lifecycle.mark_failed(record.id, str(e) or type(e).__name__)
            except StoreError as store_error:
                logger.error(
                    "Failed to mark record failed",
                    record_id=record.id,
                    error=str(store_error),
                )
            outcome = OUTCOME_FAILED

        records_classified_total.labels(outcome=outcome).inc()
        return outcome
