"""
Reddit source fetcher.

Uses Reddit's public JSON listings (no authentication):

    GET {base_url}/r/{subreddit}/hot.json?limit={limit}

The listing shape is ``{"data": {"children": [{"data": {...post...}}]}}``.
"""

from typing import Optional

import httpx
import structlog

from sentiment_pipeline.models.source_models import SourcePost
from sentiment_pipeline.sources.base import BaseSourceFetcher
from sentiment_pipeline.sources.exceptions import (
    SourceConnectionError,
    SourceHTTPError,
    SourcePayloadError,
    SourceTimeoutError,
)

logger = structlog.get_logger(__name__)


class RedditSourceFetcher(BaseSourceFetcher):
    """Fetch hot posts from subreddits over httpx."""

    def __init__(
        self,
        base_url: str = "https://old.reddit.com",
        user_agent: str = "Mozilla/5.0",
        timeout: int = 15,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: Reddit host serving the JSON listings
            user_agent: User-Agent header (Reddit rejects default library agents)
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                headers={"User-Agent": self.user_agent, "Accept": "application/json"},
                transport=self._transport,
                follow_redirects=True,
            )
        return self._client

    async def fetch(self, source_name: str, limit: int) -> list[SourcePost]:
        client = await self._get_client()
        try:
            response = await client.get(f"/r/{source_name}/hot.json", params={"limit": limit})
        except httpx.TimeoutException as e:
            raise SourceTimeoutError(
                f"Request to r/{source_name} timed out", source=source_name
            ) from e
        except httpx.TransportError as e:
            raise SourceConnectionError(
                f"Network error fetching r/{source_name}: {e}", source=source_name
            ) from e

        if not response.is_success:
            raise SourceHTTPError(
                f"Reddit API returned {response.status_code}",
                status_code=response.status_code,
                source=source_name,
            )

        try:
            children = response.json()["data"]["children"]
        except (ValueError, KeyError, TypeError) as e:
            raise SourcePayloadError(
                f"Unexpected listing payload from r/{source_name}", source=source_name
            ) from e

        posts = [
            self._to_post(child.get("data") or {}, source_name)
            for child in children[:limit]
            if isinstance(child, dict)
        ]
        logger.debug("Fetched listing", source=source_name, count=len(posts))
        return posts

    @staticmethod
    def _to_post(data: dict, source_name: str) -> SourcePost:
        return SourcePost(
            source=data.get("subreddit_name_prefixed") or f"r/{source_name}",
            title=data.get("title") or "",
            body=data.get("selftext") or "",
            url=data.get("url") or "",
            author=data.get("author") or "unknown",
            score=data.get("score") or 0,
            num_comments=data.get("num_comments") or 0,
        )

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
