"""
Abstract base client for LLM inference.

Defines the interface that all LLM client implementations (OpenAI, Ollama)
must adhere to. This abstraction allows swapping inference backends without
changing the batch classifier.
"""

import time
from abc import ABC, abstractmethod
from typing import Optional

import httpx
import structlog

from sentiment_pipeline.llm.exceptions import (
    LLMConnectionError,
    LLMGenerationError,
    LLMModelNotAvailableError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from sentiment_pipeline.models.llm_models import LLMGenerationRequest, LLMGenerationResponse
from sentiment_pipeline.monitoring.metrics import llm_latency_seconds, llm_tokens_total

logger = structlog.get_logger(__name__)


class BaseLLMClient(ABC):
    """
    Abstract base class for LLM inference clients.

    Responsibilities:
    - Send generation requests to the inference server
    - Parse responses into LLMGenerationResponse
    - Translate transport failures into LLMClientError subclasses

    Does NOT handle:
    - Prompt construction (that's PromptBuilder's job)
    - Response parsing into analyses (that's the validation layer's job)
    - Retries (that's the backoff executor's job)
    """

    def __init__(
        self,
        base_url: str,
        timeout: int = 120,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize base client.

        Args:
            base_url: Base URL of the inference server
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        logger.info(
            "Initialized LLM client",
            client_class=self.__class__.__name__,
            base_url=self.base_url,
            timeout=timeout,
        )

    def _default_headers(self) -> dict[str, str]:
        return {}

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the pooled async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                limits=httpx.Limits(
                    max_keepalive_connections=5,
                    max_connections=10,
                    keepalive_expiry=30.0,
                ),
                headers=self._default_headers(),
                transport=self._transport,
                follow_redirects=True,
            )
            logger.debug("Created new httpx AsyncClient", client_class=self.__class__.__name__)
        return self._client

    async def _post_json(self, path: str, payload: dict, model: str) -> dict:
        """
        POST a JSON payload and return the decoded JSON body.

        Maps transport and HTTP failures onto the LLMClientError hierarchy so
        the backoff executor can tell transient errors from permanent ones.
        """
        client = await self._get_client()
        try:
            response = await client.post(path, json=payload)
            response.raise_for_status()
            return response.json()

        except httpx.TimeoutException as e:
            logger.warning("LLM request timeout", path=path, timeout=self.timeout, error=str(e))
            raise LLMTimeoutError(
                f"Request timeout after {self.timeout}s",
                details={"timeout": self.timeout},
            ) from e

        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            error_text = e.response.text[:500]
            logger.error("LLM HTTP error", path=path, status_code=status_code, error_text=error_text)

            if status_code == 404:
                raise LLMModelNotAvailableError(
                    f"Model not found: {model}",
                    details={"model": model},
                    status_code=status_code,
                ) from e
            if status_code == 429:
                raise LLMRateLimitError(
                    "Rate limit exceeded",
                    details={"error": error_text},
                    status_code=status_code,
                ) from e
            raise LLMGenerationError(
                f"LLM server returned {status_code}",
                details={"error": error_text},
                status_code=status_code,
            ) from e

        except httpx.TransportError as e:
            logger.warning("LLM network error", path=path, error=str(e))
            raise LLMConnectionError(
                f"Network error: {e}",
                details={"error_type": type(e).__name__},
            ) from e

        except ValueError as e:
            logger.error("Failed to decode LLM response body", path=path, error=str(e))
            raise LLMGenerationError(
                "Invalid JSON response from LLM server",
                details={"parse_error": str(e)},
            ) from e

    async def _timed_post(self, path: str, payload: dict, model: str) -> tuple[dict, int]:
        """POST and return (body, latency_ms); failed calls are still timed."""
        started = time.perf_counter()
        try:
            body = await self._post_json(path, payload, model)
        except Exception:
            llm_latency_seconds.labels(model=model, success="false").observe(
                time.perf_counter() - started
            )
            raise
        return body, int((time.perf_counter() - started) * 1000)

    @staticmethod
    def _record_usage(
        model: str,
        latency_ms: int,
        prompt_tokens: Optional[int],
        completion_tokens: Optional[int],
    ) -> None:
        llm_latency_seconds.labels(model=model, success="true").observe(latency_ms / 1000.0)
        if prompt_tokens:
            llm_tokens_total.labels(model=model, token_type="prompt").inc(prompt_tokens)
        if completion_tokens:
            llm_tokens_total.labels(model=model, token_type="completion").inc(completion_tokens)

    @abstractmethod
    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """
        Generate a completion from the LLM.

        Implementations make exactly one HTTP call per invocation; retrying
        is left to the caller.

        Raises:
            LLMConnectionError: Network errors
            LLMTimeoutError: Request exceeded timeout
            LLMRateLimitError: Provider returned 429
            LLMGenerationError: Server-side generation errors
            LLMModelNotAvailableError: Model not found
        """

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the inference server is reachable.

        Returns:
            True if server is healthy, False otherwise (never raises)
        """

    async def close(self) -> None:
        """Close the HTTP client connection."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed LLM client connection", client_class=self.__class__.__name__)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"base_url={self.base_url}, "
            f"timeout={self.timeout}s)"
        )
