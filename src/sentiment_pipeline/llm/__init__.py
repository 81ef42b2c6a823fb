"""
LLM client abstraction and implementations.

Components:
- BaseLLMClient: Abstract base class for LLM clients
- OpenAIClient: Chat-completions implementation (default provider)
- OllamaClient: Implementation for a self-hosted Ollama server
- PromptBuilder: Builds one combined prompt for a batch of posts
- exceptions: LLM-specific exceptions
"""

from sentiment_pipeline.llm.base_client import BaseLLMClient
from sentiment_pipeline.llm.exceptions import (
    LLMClientError,
    LLMConnectionError,
    LLMGenerationError,
    LLMModelNotAvailableError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from sentiment_pipeline.llm.ollama_client import OllamaClient
from sentiment_pipeline.llm.openai_client import OpenAIClient
from sentiment_pipeline.llm.prompt_builder import PromptBuilder

__all__ = [
    "BaseLLMClient",
    "OllamaClient",
    "OpenAIClient",
    "PromptBuilder",
    "LLMClientError",
    "LLMConnectionError",
    "LLMGenerationError",
    "LLMRateLimitError",
    "LLMTimeoutError",
    "LLMModelNotAvailableError",
]
