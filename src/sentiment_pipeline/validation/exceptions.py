"""
Exceptions raised while parsing a batch classification response.

The batch classifier catches these and falls back to the neutral
"Analysis unavailable" payload instead of failing the batch.
"""

from typing import Any


class ResponseParseError(Exception):
    """Base exception for malformed classifier responses."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class JSONParseError(ResponseParseError):
    """
    Response content is not valid JSON.
    """

    def __init__(self, message: str, raw_content: str | None = None, parse_error: str | None = None):
        """
        Args:
            message: Error description
            raw_content: Malformed content (first 500 chars kept for debugging)
            parse_error: Original json.JSONDecodeError message
        """
        details = {}
        if raw_content:
            details["content_snippet"] = raw_content[:500]
        if parse_error:
            details["parse_error"] = parse_error

        super().__init__(message, details)


class SchemaValidationError(ResponseParseError):
    """
    Parsed JSON does not carry an array of analyses.
    """

    def __init__(self, message: str, found_type: str | None = None):
        details = {}
        if found_type:
            details["found_type"] = found_type

        super().__init__(message, details)
