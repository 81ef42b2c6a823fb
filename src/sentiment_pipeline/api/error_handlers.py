"""
FastAPI exception handlers for structured error responses.

Maps domain exceptions to HTTP status codes. Every body has the shape
``{"error", "message", "timestamp"}``.
"""

import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from sentiment_pipeline.llm.exceptions import LLMClientError
from sentiment_pipeline.models.records import utc_now
from sentiment_pipeline.persistence.exceptions import StoreError

logger = structlog.get_logger(__name__)


def _error_body(error: str, message: str, **extra) -> dict:
    return {"error": error, "message": message, "timestamp": utc_now().isoformat(), **extra}


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    """
    Handle record store failures.

    Maps to 503 Service Unavailable (store unreachable or write conflict).
    """
    logger.error("Store error", error=exc.message, details=exc.details)

    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=_error_body("store_unavailable", exc.message),
    )


async def llm_error_handler(request: Request, exc: LLMClientError) -> JSONResponse:
    """
    Handle LLM errors that escape the classifier.

    Maps to 502 Bad Gateway (upstream model unavailable).
    """
    logger.error("LLM error", error=exc.message, status_code=exc.status_code)

    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content=_error_body("llm_unavailable", exc.message),
    )


async def pydantic_validation_error_handler(
    request: Request, exc: PydanticValidationError
) -> JSONResponse:
    """Maps to 400 Bad Request."""
    logger.warning("Invalid request format", errors=exc.errors())

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(
            "invalid_request",
            "Request validation failed",
            details=exc.errors(include_url=False, include_context=False),
        ),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Maps anything else to 500 Internal Server Error."""
    logger.exception("Unexpected error", error_type=type(exc).__name__)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("internal_error", str(exc) or "An unexpected error occurred"),
    )


# Exception handler mapping for FastAPI app.add_exception_handler()
EXCEPTION_HANDLERS = {
    StoreError: store_error_handler,
    LLMClientError: llm_error_handler,
    PydanticValidationError: pydantic_validation_error_handler,
    Exception: generic_error_handler,
}
