"""
External post sources.

- base.py: BaseSourceFetcher interface
- reddit.py: Public subreddit JSON listings over httpx
- exceptions.py: SourceError hierarchy
"""

from sentiment_pipeline.sources.base import BaseSourceFetcher
from sentiment_pipeline.sources.exceptions import (
    SourceConnectionError,
    SourceError,
    SourceHTTPError,
    SourcePayloadError,
    SourceTimeoutError,
)
from sentiment_pipeline.sources.reddit import RedditSourceFetcher

__all__ = [
    "BaseSourceFetcher",
    "RedditSourceFetcher",
    "SourceError",
    "SourceConnectionError",
    "SourceHTTPError",
    "SourcePayloadError",
    "SourceTimeoutError",
]
