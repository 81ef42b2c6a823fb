"""
Exceptions raised by source fetchers.

Every fetch failure is a SourceError so the ingestion collector can record
it against the failing source and continue with the rest.
"""


class SourceError(Exception):
    """Base exception for source fetch failures."""

    retryable = False

    def __init__(self, message: str, source: str | None = None, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.source = source
        self.details = details or {}


class SourceHTTPError(SourceError):
    """The source answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int, source: str | None = None):
        super().__init__(message, source=source, details={"status": status_code})
        self.status_code = status_code

    @property
    def retryable(self) -> bool:  # type: ignore[override]
        return self.status_code == 429 or self.status_code >= 500


class SourceConnectionError(SourceError):
    """Network-level failure (DNS, connection reset, TLS)."""

    retryable = True


class SourceTimeoutError(SourceConnectionError):
    """The source did not answer within the transport timeout."""

    pass


class SourcePayloadError(SourceError):
    """The source answered 2xx with a body that is not a listing."""

    pass
