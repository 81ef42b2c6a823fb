"""FastAPI middleware for request tracing and logging."""

import time
import uuid
from typing import Awaitable, Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger(__name__)

# Scraped every few seconds; tracing them only adds noise
UNTRACED_PATHS = frozenset({"/metrics"})


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """Bind a request_id to the structlog context for the request's lifetime.

    An incoming X-Request-ID header is reused, otherwise one is generated.
    Responses carry X-Request-ID and X-Response-Time-Ms.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if request.url.path in UNTRACED_PATHS:
            return await call_next(request)

        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        if request.query_params:
            logger.info("Request received", query_params=dict(request.query_params))
        else:
            logger.info("Request received")

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Request raised", elapsed_ms=self._elapsed_ms(started))
            raise
        else:
            elapsed_ms = self._elapsed_ms(started)
            log = logger.warning if response.status_code >= 500 else logger.info
            log("Request finished", status_code=response.status_code, elapsed_ms=elapsed_ms)
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time-Ms"] = str(elapsed_ms)
            return response
        finally:
            structlog.contextvars.clear_contextvars()

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return round((time.perf_counter() - started) * 1000, 2)
