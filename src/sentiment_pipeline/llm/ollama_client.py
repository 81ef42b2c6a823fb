"""
Ollama client for self-hosted models.

Uses the non-streaming /api/generate endpoint. When the request carries a
JSON Schema it is passed as ``format`` so the model is constrained to the
batch analysis shape; otherwise plain JSON mode is requested.
"""

from typing import Optional

import httpx
import structlog

from sentiment_pipeline.llm.base_client import BaseLLMClient
from sentiment_pipeline.llm.exceptions import LLMGenerationError
from sentiment_pipeline.models.llm_models import LLMGenerationRequest, LLMGenerationResponse

logger = structlog.get_logger(__name__)


class OllamaClient(BaseLLMClient):
    """Client for an Ollama server (generate + tags endpoints)."""

    def __init__(
        self,
        base_url: str = "http://ollama:11434",
        timeout: int = 120,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(base_url, timeout, transport)

    @staticmethod
    def build_payload(request: LLMGenerationRequest) -> dict:
        return {
            "model": request.model,
            "system": request.system_prompt,
            "prompt": request.prompt,
            "stream": False,
            "format": request.format_schema or "json",
            "options": {
                "temperature": request.temperature,
                "num_predict": request.max_tokens,
            },
        }

    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        logger.info(
            "Requesting batch classification from Ollama",
            model=request.model,
            prompt_chars=len(request.prompt),
            constrained=bool(request.format_schema),
        )

        body, latency_ms = await self._timed_post("/api/generate", self.build_payload(request), request.model)

        text = body.get("response") or ""
        if not text.strip():
            raise LLMGenerationError("Ollama returned an empty completion", details={"done": body.get("done")})

        model_version = body.get("model") or request.model
        self._record_usage(model_version, latency_ms, body.get("prompt_eval_count"), body.get("eval_count"))
        logger.info("Ollama completion received", model=model_version, latency_ms=latency_ms)

        return LLMGenerationResponse(
            content=text,
            model_version=model_version,
            finish_reason="stop" if body.get("done") else "incomplete",
            prompt_tokens=body.get("prompt_eval_count"),
            completion_tokens=body.get("eval_count"),
            latency_ms=latency_ms,
        )

    async def health_check(self) -> bool:
        """True when GET /api/tags answers 2xx."""
        client = await self._get_client()
        try:
            response = await client.get("/api/tags", timeout=5.0)
        except httpx.HTTPError as e:
            logger.warning("Ollama unreachable", error=str(e))
            return False
        return response.is_success
