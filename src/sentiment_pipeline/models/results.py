"""
Result models returned by the administrative operations.

Each operation (collect, classify, pipeline run, health, clear) returns one
of these structured results carrying a success flag, per-stage counts and
an optional warning/error list. The HTTP layer serializes them as-is.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from sentiment_pipeline.models.enums import HealthVerdict, RecordStatus
from sentiment_pipeline.models.records import utc_now


class CollectionResult(BaseModel):
    """Outcome of one ingestion run across all configured sources."""

    success: bool
    scraped_count: int = Field(default=0, ge=0)
    inserted_ids: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list, description="Per-source failure messages")
    warning: Optional[str] = None
    error: Optional[str] = None
    message: Optional[str] = None


class ClassificationResult(BaseModel):
    """Outcome of one batch classification run."""

    success: bool
    target_status: RecordStatus
    analyzed_count: int = Field(default=0, ge=0)
    failed_count: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)
    error: Optional[str] = None
    details: Optional[str] = None
    message: Optional[str] = None


class ScrapeStep(BaseModel):
    success: bool
    count: int = 0
    warning: Optional[str] = None
    errors: list[str] = Field(default_factory=list)


class AnalyzeStep(BaseModel):
    success: bool
    analyzed: int = 0
    failed: int = 0
    error: Optional[str] = None


class PipelineSteps(BaseModel):
    scrape: ScrapeStep
    analyze: Optional[AnalyzeStep] = None


class PipelineReport(BaseModel):
    """Aggregated outcome of an ingestion + classification run."""

    success: bool
    pipeline: str = Field(description="completed | failed")
    failed_step: Optional[str] = Field(default=None, description="scrape | analyze")
    steps: PipelineSteps
    summary: str
    warnings: list[str] = Field(default_factory=list)
    error: Optional[str] = None


class StatusCounts(BaseModel):
    pending: int = 0
    processing: int = 0
    completed: int = 0
    failed: int = 0


class HealthMetrics(BaseModel):
    total: int = 0
    by_status: StatusCounts = Field(default_factory=StatusCounts)
    last_analyzed_at: Optional[datetime] = None


class HealthSummary(BaseModel):
    success_rate: str = "N/A"
    failure_rate: str = "N/A"


class HealthSnapshot(BaseModel):
    """Read-only aggregate view over the record store."""

    status: HealthVerdict
    timestamp: datetime = Field(default_factory=utc_now)
    metrics: HealthMetrics
    summary: HealthSummary


class ClearResult(BaseModel):
    success: bool
    deleted: int = 0
    message: str
