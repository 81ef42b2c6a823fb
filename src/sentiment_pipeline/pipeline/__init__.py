"""
Pipeline stages and the administrative service.

- collector.py: Ingestion from all sources into pending records
- classifier.py: Batch LLM classification and reconciliation
- orchestrator.py: Collect + settle + classify
- health.py: Status counts and verdict
- service.py: PipelineService and build_services()
"""

from sentiment_pipeline.pipeline.classifier import BatchClassifier
from sentiment_pipeline.pipeline.collector import IngestionCollector, SourceOutcome
from sentiment_pipeline.pipeline.health import HealthReporter, derive_verdict
from sentiment_pipeline.pipeline.orchestrator import PipelineOrchestrator
from sentiment_pipeline.pipeline.service import PipelineService, build_services

__all__ = [
    "BatchClassifier",
    "HealthReporter",
    "IngestionCollector",
    "PipelineOrchestrator",
    "PipelineService",
    "SourceOutcome",
    "build_services",
    "derive_verdict",
]
