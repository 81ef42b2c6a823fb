"""
Pydantic data models for the Post Sentiment Pipeline.

Includes:
- Enums (RecordStatus, Sentiment, HealthVerdict)
- Record models (ItemRecord, NewRecord, RecordPatch, PostAnalysis)
- Source models (SourcePost)
- Result models returned by the administrative operations
- LLM models (LLMGenerationRequest, LLMGenerationResponse)
"""

from sentiment_pipeline.models.enums import HealthVerdict, RecordStatus, Sentiment
from sentiment_pipeline.models.llm_models import LLMGenerationRequest, LLMGenerationResponse
from sentiment_pipeline.models.records import (
    FALLBACK_ANALYSIS,
    ItemRecord,
    NewRecord,
    PostAnalysis,
    RecordPatch,
)
from sentiment_pipeline.models.results import (
    AnalyzeStep,
    ClassificationResult,
    ClearResult,
    CollectionResult,
    HealthMetrics,
    HealthSnapshot,
    HealthSummary,
    PipelineReport,
    PipelineSteps,
    ScrapeStep,
    StatusCounts,
)
from sentiment_pipeline.models.source_models import SourcePost

__all__ = [
    # Enums
    "HealthVerdict",
    "RecordStatus",
    "Sentiment",
    # Records
    "FALLBACK_ANALYSIS",
    "ItemRecord",
    "NewRecord",
    "PostAnalysis",
    "RecordPatch",
    # Sources
    "SourcePost",
    # Results
    "AnalyzeStep",
    "ClassificationResult",
    "ClearResult",
    "CollectionResult",
    "HealthMetrics",
    "HealthSnapshot",
    "HealthSummary",
    "PipelineReport",
    "PipelineSteps",
    "ScrapeStep",
    "StatusCounts",
    # LLM models
    "LLMGenerationRequest",
    "LLMGenerationResponse",
]
