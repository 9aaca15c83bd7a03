"""
Pytest configuration and shared fixtures for TubeVault tests.

Provides a controllable clock, an in-memory cache store and a fake YouTube
Data API served through a mocked ``requests.Session``.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import Mock

import pytest

# Set environment variables BEFORE any imports (for CI without .env)
os.environ.setdefault("YOUTUBE_API_KEY", "test_youtube_key_for_ci")  # pragma: allowlist secret
os.environ.setdefault("OPENAI_API_KEY", "test_openai_key_for_ci")  # pragma: allowlist secret

from tubevault.config.models.api_settings import YouTubeSettings  # noqa: E402
from tubevault.config.models.cache_settings import CacheSettings  # noqa: E402
from tubevault.core.statistics import StatisticsCollector  # noqa: E402
from tubevault.services.catalog_cache import CatalogCacheService  # noqa: E402
from tubevault.services.sqlite_cache_db import SQLiteCacheDB  # noqa: E402
from tubevault.services.youtube.youtube_client import YouTubeClient  # noqa: E402

START_MS = 1_700_000_000_000


class FakeClock:
    """Clock returning a settable epoch-millisecond time."""

    def __init__(self, now: int = START_MS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


Handler = Callable[[dict[str, str]], "tuple[int, Any]"]


class FakeYouTubeAPI:
    """Routes ``session.get`` calls to per-endpoint handlers.

    A handler receives the request params and returns ``(status, body)``.
    Every call is recorded as ``(endpoint, params)``.
    """

    def __init__(self) -> None:
        self.handlers: dict[str, Handler] = {}
        self.calls: list[tuple[str, dict[str, str]]] = []
        self.session = Mock()
        self.session.get.side_effect = self._get

    def on(self, endpoint: str, handler: Handler) -> None:
        self.handlers[endpoint] = handler

    def calls_to(self, endpoint: str) -> list[dict[str, str]]:
        return [params for name, params in self.calls if name == endpoint]

    def _get(self, url: str, params: dict[str, str] | None = None, timeout: float | None = None) -> Mock:
        endpoint = url.rsplit("/", 1)[-1]
        params = dict(params or {})
        self.calls.append((endpoint, params))

        handler = self.handlers.get(endpoint)
        if handler is None:
            status, body = 404, {"error": {"message": f"no handler for {endpoint}"}}
        else:
            status, body = handler(params)

        response = Mock()
        response.status_code = status
        response.json.return_value = body
        return response


def quota_error_body() -> dict[str, Any]:
    return {
        "error": {
            "code": 403,
            "message": "The request cannot be completed because you have exceeded your quota.",
            "errors": [{"reason": "quotaExceeded", "domain": "youtube.quota"}],
        }
    }


def video_stub(video_id: str, title: str | None = None, channel_id: str = "UCdino") -> dict[str, Any]:
    return {
        "id": {"kind": "youtube#video", "videoId": video_id},
        "snippet": {
            "title": title or f"Video {video_id}",
            "description": f"About {video_id}",
            "channelId": channel_id,
            "channelTitle": "Dino Channel",
            "publishedAt": "2024-01-01T00:00:00Z",
            "thumbnails": {"default": {"url": f"https://i.ytimg.com/{video_id}/default.jpg"}},
        },
    }


def video_detail(
    video_id: str,
    duration: str = "PT5M30S",
    embeddable: bool | None = True,
    rating: str | None = None,
    made_for_kids: bool = True,
    view_count: str | None = "1000",
) -> dict[str, Any]:
    status: dict[str, Any] = {"madeForKids": made_for_kids}
    if embeddable is not None:
        status["embeddable"] = embeddable
    content_details: dict[str, Any] = {"duration": duration}
    if rating is not None:
        content_details["contentRating"] = {"ytRating": rating}
    statistics = {"viewCount": view_count} if view_count is not None else {}
    return {
        "id": video_id,
        "snippet": {"thumbnails": {"high": {"url": f"https://i.ytimg.com/{video_id}/hq.jpg"}}},
        "contentDetails": content_details,
        "status": status,
        "statistics": statistics,
    }


def channel_stub(channel_id: str, title: str | None = None) -> dict[str, Any]:
    return {
        "id": {"kind": "youtube#channel", "channelId": channel_id},
        "snippet": {
            "title": title or f"Channel {channel_id}",
            "description": f"About {channel_id}",
            "thumbnails": {"medium": {"url": f"https://yt3.ggpht.com/{channel_id}/medium.jpg"}},
        },
    }


def channel_detail(channel_id: str, subscribers: str = "12000", videos: str = "340") -> dict[str, Any]:
    return {
        "id": channel_id,
        "snippet": {},
        "statistics": {"subscriberCount": subscribers, "videoCount": videos},
        "contentDetails": {"relatedPlaylists": {"uploads": f"UU{channel_id[2:]}"}},
    }


def playlist_item(video_id: str) -> dict[str, Any]:
    return {
        "id": f"PLI-{video_id}",
        "snippet": {
            "title": f"Upload {video_id}",
            "channelId": "UCdino",
            "channelTitle": "Dino Channel",
            "publishedAt": "2024-02-01T00:00:00Z",
            "resourceId": {"kind": "youtube#video", "videoId": video_id},
        },
    }


def videos_handler(overrides: dict[str, dict[str, Any]] | None = None) -> Handler:
    """Detail handler answering every requested id unless overridden."""
    overrides = overrides or {}

    def handle(params: dict[str, str]) -> tuple[int, Any]:
        ids = params["id"].split(",")
        return 200, {"items": [overrides.get(vid, video_detail(vid)) for vid in ids]}

    return handle


def playlist_handler(total: int) -> Handler:
    """playlistItems handler serving ``total`` uploads in token-linked pages."""

    def handle(params: dict[str, str]) -> tuple[int, Any]:
        start = int(params.get("pageToken", "0"))
        size = min(int(params["maxResults"]), total - start)
        items = [playlist_item(f"v{i}") for i in range(start, start + size)]
        body: dict[str, Any] = {"items": items, "pageInfo": {"totalResults": total}}
        if start + size < total:
            body["nextPageToken"] = str(start + size)
        return 200, body

    return handle


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> Generator[SQLiteCacheDB, None, None]:
    cache = SQLiteCacheDB(":memory:", clock=clock)
    yield cache
    cache.close()


@pytest.fixture
def youtube_api() -> FakeYouTubeAPI:
    return FakeYouTubeAPI()


@pytest.fixture
def statistics() -> StatisticsCollector:
    return StatisticsCollector()


@pytest.fixture
def youtube_client(youtube_api: FakeYouTubeAPI, statistics: StatisticsCollector) -> YouTubeClient:
    return YouTubeClient(
        settings=YouTubeSettings(api_key="test-key"),  # pragma: allowlist secret
        session=youtube_api.session,
        statistics=statistics,
    )


@pytest.fixture
def catalog(store: SQLiteCacheDB, youtube_client: YouTubeClient) -> CatalogCacheService:
    return CatalogCacheService(store, youtube_client, settings=CacheSettings())
