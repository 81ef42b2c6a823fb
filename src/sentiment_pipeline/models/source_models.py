"""
Models for candidate posts fetched from external sources.
"""

from pydantic import BaseModel, ConfigDict, Field


class SourcePost(BaseModel):
    """
    A candidate post as returned by a source fetcher.

    Only title and body feed the normalized record content; the remaining
    fields are kept for logging and future ranking.
    """

    model_config = ConfigDict(frozen=True)

    source: str = Field(..., description="Origin label, e.g. r/aviation")
    title: str = ""
    body: str = ""
    url: str = ""
    author: str = "unknown"
    score: int = 0
    num_comments: int = 0

    def normalized_content(self) -> str:
        """Title followed by the optional body, trimmed."""
        content = self.title + (f"\n\n{self.body}" if self.body else "")
        return content.strip()
