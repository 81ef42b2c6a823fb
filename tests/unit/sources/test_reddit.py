"""
Unit tests for RedditSourceFetcher.

Listings are served by httpx.MockTransport.
"""

import httpx
import pytest

from sentiment_pipeline.sources.exceptions import (
    SourceConnectionError,
    SourceHTTPError,
    SourcePayloadError,
    SourceTimeoutError,
)
from sentiment_pipeline.sources.reddit import RedditSourceFetcher


def listing(*posts: dict) -> dict:
    return {"kind": "Listing", "data": {"children": [{"kind": "t3", "data": p} for p in posts]}}


def fetcher_for(handler) -> RedditSourceFetcher:
    return RedditSourceFetcher(
        base_url="https://old.reddit.test",
        user_agent="TestAgent/1.0",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_fetch_requests_hot_listing_and_maps_posts():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["path"] = request.url.path
        captured["limit"] = request.url.params.get("limit")
        captured["user_agent"] = request.headers.get("User-Agent")
        return httpx.Response(
            200,
            json=listing(
                {
                    "subreddit_name_prefixed": "r/aviation",
                    "title": "SR-71 flyover",
                    "selftext": "Caught it on camera",
                    "url": "https://example.test/sr71",
                    "author": "pilot",
                    "score": 120,
                    "num_comments": 14,
                }
            ),
        )

    fetcher = fetcher_for(handler)
    posts = await fetcher.fetch("aviation", 10)
    await fetcher.close()

    assert captured == {"path": "/r/aviation/hot.json", "limit": "10", "user_agent": "TestAgent/1.0"}
    assert len(posts) == 1
    assert posts[0].source == "r/aviation"
    assert posts[0].normalized_content() == "SR-71 flyover\n\nCaught it on camera"
    assert posts[0].score == 120


@pytest.mark.asyncio
async def test_missing_fields_get_defaults():
    fetcher = fetcher_for(lambda request: httpx.Response(200, json=listing({"title": "Only a title", "selftext": None})))

    posts = await fetcher.fetch("hoggit", 10)

    assert posts[0].source == "r/hoggit"
    assert posts[0].body == ""
    assert posts[0].author == "unknown"


@pytest.mark.asyncio
async def test_limit_caps_returned_posts():
    posts_data = [{"title": f"Post {i}"} for i in range(5)]
    fetcher = fetcher_for(lambda request: httpx.Response(200, json=listing(*posts_data)))

    assert len(await fetcher.fetch("aviation", 3)) == 3


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code, retryable", [(403, False), (429, True), (503, True)])
async def test_non_success_status_raises_http_error(status_code, retryable):
    fetcher = fetcher_for(lambda request: httpx.Response(status_code))

    with pytest.raises(SourceHTTPError) as exc_info:
        await fetcher.fetch("aviation", 10)

    assert exc_info.value.status_code == status_code
    assert exc_info.value.retryable is retryable
    assert str(exc_info.value) == f"Reddit API returned {status_code}"


@pytest.mark.asyncio
async def test_unexpected_payload_raises():
    fetcher = fetcher_for(lambda request: httpx.Response(200, json={"error": "nope"}))

    with pytest.raises(SourcePayloadError):
        await fetcher.fetch("aviation", 10)


@pytest.mark.asyncio
async def test_html_body_raises_payload_error():
    fetcher = fetcher_for(lambda request: httpx.Response(200, text="<html>blocked</html>"))

    with pytest.raises(SourcePayloadError):
        await fetcher.fetch("aviation", 10)


@pytest.mark.asyncio
async def test_timeout_and_connection_errors():
    def timeout_handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    def refused_handler(request):
        raise httpx.ConnectError("connection reset", request=request)

    with pytest.raises(SourceTimeoutError):
        await fetcher_for(timeout_handler).fetch("aviation", 10)

    with pytest.raises(SourceConnectionError) as exc_info:
        await fetcher_for(refused_handler).fetch("aviation", 10)
    assert exc_info.value.retryable is True
