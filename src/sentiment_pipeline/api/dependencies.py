"""
FastAPI dependency injection.

Services are built once at startup and stored on ``app.state``; these
helpers hand them to route functions.
"""

from fastapi import Request

from sentiment_pipeline.config import Settings
from sentiment_pipeline.pipeline.service import PipelineService


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_pipeline_service(request: Request) -> PipelineService:
    """
    Get the application's PipelineService.

    Raises:
        RuntimeError: Services were not initialized (startup did not run)
    """
    service = getattr(request.app.state, "service", None)
    if service is None:
        raise RuntimeError("Pipeline services are not initialized")
    return service
