"""
LLM-specific data models for request/response cycle.

These models are internal to the LLM layer and handle the raw communication
with inference servers (OpenAI, Ollama). They are separate from the business
models (PostAnalysis) so the client implementation can change freely.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class LLMGenerationRequest(BaseModel):
    """
    Internal request model for LLM generation.

    This is the standardized format sent to any LLM client implementation.
    """
    model_config = ConfigDict(frozen=True)

    system_prompt: str = Field(..., description="Instructions for the classifier")
    prompt: str = Field(..., description="User prompt carrying the batch of posts")
    model: str = Field(..., description="Model name/identifier (e.g., 'gpt-4o-mini')")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: int = Field(default=4096, ge=1, le=32768, description="Maximum tokens to generate")
    format_schema: Optional[Dict[str, Any]] = Field(
        default=None,
        description="JSON Schema for structured output constraint"
    )


class LLMGenerationResponse(BaseModel):
    """
    Internal response model from LLM generation.

    Contains the raw generated text plus metadata for logging. Parsing of the
    content into analyses happens in the validation layer.
    """
    model_config = ConfigDict(frozen=True)

    content: str = Field(..., description="Generated text (JSON string)")
    model_version: str = Field(..., description="Actual model version used")
    finish_reason: str = Field(..., description="Why generation stopped: 'stop', 'length', ...")
    prompt_tokens: Optional[int] = Field(default=None, description="Tokens in prompt")
    completion_tokens: Optional[int] = Field(default=None, description="Tokens in completion")
    latency_ms: int = Field(..., ge=0, description="Generation latency in milliseconds")
