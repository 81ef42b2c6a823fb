"""
Abstract source fetcher.

A source fetcher returns up to ``limit`` candidate posts for one named source
and makes exactly one upstream call per invocation; retrying is the
collector's job.
"""

from abc import ABC, abstractmethod

from sentiment_pipeline.models.source_models import SourcePost


class BaseSourceFetcher(ABC):
    """Interface for anything that can supply candidate posts."""

    @abstractmethod
    async def fetch(self, source_name: str, limit: int) -> list[SourcePost]:
        """
        Fetch candidate posts from one source.

        Args:
            source_name: Configured source name (e.g. "aviation")
            limit: Maximum number of posts to return

        Raises:
            SourceError: Any fetch failure
        """

    async def close(self) -> None:
        """Release network resources. Default implementation does nothing."""
