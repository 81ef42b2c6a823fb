"""Exceptions raised by record stores."""


class StoreError(Exception):
    """A record store read or write failed."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
