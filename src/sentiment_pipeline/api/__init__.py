"""HTTP layer: routes, dependencies, middleware and exception handlers."""

from sentiment_pipeline.api.routes import router

__all__ = ["router"]
