"""
Custom exceptions for the LLM client layer.

These exceptions let the backoff executor and the batch classifier tell
transient failures (connection, timeout, rate limit, 5xx) from permanent
ones (unknown model, bad request).
"""


class LLMClientError(Exception):
    """
    Base exception for all LLM client errors.

    All LLM-specific exceptions inherit from this to allow catching
    any LLM-related error with a single except clause.
    """

    retryable = False

    def __init__(self, message: str, details: dict | None = None, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.status_code = status_code


class LLMConnectionError(LLMClientError):
    """
    Raised when unable to connect to the LLM inference server.

    Includes network errors, DNS failures, connection resets.
    """

    retryable = True


class LLMTimeoutError(LLMConnectionError):
    """Raised when the LLM generation exceeds the transport timeout."""

    pass


class LLMRateLimitError(LLMClientError):
    """
    Raised when the provider rate-limits the request (HTTP 429).
    """

    retryable = True


class LLMGenerationError(LLMClientError):
    """
    Raised when the LLM server returns an error during generation.

    Server-side (5xx) errors are retryable, client-side (4xx) errors are not.
    """

    @property
    def retryable(self) -> bool:  # type: ignore[override]
        return self.status_code is not None and self.status_code >= 500


class LLMModelNotAvailableError(LLMGenerationError):
    """Raised when the requested model is not available on the server."""

    pass
