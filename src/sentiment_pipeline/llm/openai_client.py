"""
OpenAI chat-completions client.

Talks to /v1/chat/completions over httpx with JSON-object response mode,
so the batch reply is always a single JSON document.
"""

from typing import Optional

import httpx
import structlog

from sentiment_pipeline.llm.base_client import BaseLLMClient
from sentiment_pipeline.llm.exceptions import LLMGenerationError
from sentiment_pipeline.models.llm_models import LLMGenerationRequest, LLMGenerationResponse

logger = structlog.get_logger(__name__)


class OpenAIClient(BaseLLMClient):
    """
    Client for OpenAI-compatible chat-completions APIs.

    API Endpoints:
    - POST /chat/completions: system + user messages, json_object response
    - GET /models: health check
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.openai.com/v1",
        timeout: int = 120,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_key = api_key
        super().__init__(base_url, timeout, transport)
        if not api_key:
            logger.warning("OpenAI client created without an API key", base_url=self.base_url)

    def _default_headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """
        Generate completion using the chat-completions API.

        POST /chat/completions with payload:
        {
            "model": "gpt-4o-mini",
            "messages": [{"role": "system", ...}, {"role": "user", ...}],
            "response_format": {"type": "json_object"},
            "temperature": 0.7,
            "max_tokens": 4096
        }

        The JSON Schema on the request is not sent; json_object mode plus the
        system prompt define the shape.
        """
        payload = {
            "model": request.model,
            "messages": [
                {"role": "system", "content": request.system_prompt},
                {"role": "user", "content": request.prompt},
            ],
            "response_format": {"type": "json_object"},
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        }

        logger.info("Sending chat completion request", model=request.model, prompt_chars=len(request.prompt))

        body, latency_ms = await self._timed_post("/chat/completions", payload, request.model)

        choices = body.get("choices") or []
        if not choices:
            raise LLMGenerationError(
                "Chat completion returned no choices",
                details={"response_keys": list(body.keys())},
            )

        choice = choices[0]
        model_version = body.get("model") or request.model
        usage = body.get("usage") or {}
        self._record_usage(
            model_version, latency_ms, usage.get("prompt_tokens"), usage.get("completion_tokens")
        )

        logger.info(
            "Chat completion successful",
            model=model_version,
            latency_ms=latency_ms,
            finish_reason=choice.get("finish_reason"),
            total_tokens=usage.get("total_tokens"),
        )

        return LLMGenerationResponse(
            content=(choice.get("message") or {}).get("content") or "{}",
            model_version=model_version,
            finish_reason=choice.get("finish_reason") or "stop",
            prompt_tokens=usage.get("prompt_tokens"),
            completion_tokens=usage.get("completion_tokens"),
            latency_ms=latency_ms,
        )

    async def health_check(self) -> bool:
        """Check API reachability via GET /models."""
        client = await self._get_client()
        try:
            response = await client.get("/models", timeout=5.0)
        except httpx.HTTPError as e:
            logger.warning("OpenAI health check failed", error=str(e))
            return False
        return response.is_success
