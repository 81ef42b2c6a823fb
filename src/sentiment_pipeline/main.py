"""
FastAPI application entry point for the Post Sentiment Pipeline.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import Depends, FastAPI
from prometheus_fastapi_instrumentator import Instrumentator

from sentiment_pipeline.api.dependencies import get_app_settings
from sentiment_pipeline.api.error_handlers import EXCEPTION_HANDLERS
from sentiment_pipeline.api.middleware import RequestTracingMiddleware
from sentiment_pipeline.api.models import RootResponse
from sentiment_pipeline.api.routes import router
from sentiment_pipeline.config import Settings, get_settings
from sentiment_pipeline.logging_config import configure_logging
from sentiment_pipeline.pipeline.service import PipelineService, build_services

logger = structlog.get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    service: Optional[PipelineService] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Application settings (defaults to environment)
        service: Prebuilt PipelineService; built from settings at startup when omitted
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Application startup",
            version=settings.APP_VERSION,
            environment=settings.ENVIRONMENT,
            llm_provider=settings.LLM_PROVIDER,
            store_backend=settings.STORE_BACKEND,
        )
        if app.state.service is None:
            app.state.service = build_services(settings)
        logger.info("Application startup complete")

        yield

        logger.info("Application shutdown")
        await app.state.service.close()
        logger.info("Application shutdown complete")

    app = FastAPI(
        title=settings.APP_NAME,
        description="Collects social media posts and classifies their sentiment in batches",
        version=settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.service = service

    # Request tracing middleware (must be first for request_id in all logs)
    app.add_middleware(RequestTracingMiddleware)

    for exc_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exc_class, handler)

    app.include_router(router, tags=["pipeline"])

    if settings.PROMETHEUS_ENABLED:
        Instrumentator().instrument(app).expose(app)

    @app.get("/", response_model=RootResponse)
    async def root(app_settings: Settings = Depends(get_app_settings)) -> RootResponse:
        """Root endpoint with links to the API."""
        return RootResponse(
            service=app_settings.APP_NAME,
            version=app_settings.APP_VERSION,
            endpoints=[
                "POST /api/pipeline",
                "POST /api/scrape",
                "POST /api/analyze?retry=false",
                "DELETE /api/clear",
                "GET /api/health",
            ],
            metrics="/metrics" if app_settings.PROMETHEUS_ENABLED else None,
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "sentiment_pipeline.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Only for development
    )
