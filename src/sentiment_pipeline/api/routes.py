"""
Administrative API routes.

Each route delegates to PipelineService and returns its result model.
Routes whose operation reports ``success=False`` answer with HTTP 500 and
the full result body so callers can still read the per-stage details.
"""

import structlog
from fastapi import APIRouter, Depends, Query, Response, status

from sentiment_pipeline.api.dependencies import get_pipeline_service
from sentiment_pipeline.models.results import (
    ClassificationResult,
    ClearResult,
    CollectionResult,
    HealthSnapshot,
    PipelineReport,
)
from sentiment_pipeline.pipeline.service import PipelineService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api")

FAILURE_RESPONSES = {
    500: {"description": "Operation failed (body carries the result with success=false)"},
    503: {"description": "Record store unavailable"},
}


@router.post(
    "/pipeline",
    response_model=PipelineReport,
    summary="Run scrape and analyze",
    responses=FAILURE_RESPONSES,
)
async def run_pipeline(
    response: Response,
    service: PipelineService = Depends(get_pipeline_service),
) -> PipelineReport:
    """Collect from every source, wait for the store to settle, classify one batch."""
    report = await service.run_pipeline()
    if not report.success:
        response.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return report


@router.post(
    "/scrape",
    response_model=CollectionResult,
    summary="Collect posts from all sources",
    responses=FAILURE_RESPONSES,
)
async def scrape(
    response: Response,
    service: PipelineService = Depends(get_pipeline_service),
) -> CollectionResult:
    result = await service.scrape()
    if not result.success:
        response.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return result


@router.post(
    "/analyze",
    response_model=ClassificationResult,
    summary="Classify one batch of records",
    responses=FAILURE_RESPONSES,
)
async def analyze(
    response: Response,
    retry: bool = Query(False, description="Re-classify failed records instead of pending ones"),
    service: PipelineService = Depends(get_pipeline_service),
) -> ClassificationResult:
    result = await service.analyze(retry=retry)
    if not result.success:
        response.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return result


@router.delete("/clear", response_model=ClearResult, summary="Delete every record")
async def clear(service: PipelineService = Depends(get_pipeline_service)) -> ClearResult:
    return await service.clear()


@router.get("/health", response_model=HealthSnapshot, summary="Record counts and verdict")
async def health(service: PipelineService = Depends(get_pipeline_service)) -> HealthSnapshot:
    return await service.health()
