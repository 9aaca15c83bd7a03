"""Tests for the YouTube Data API client."""

from __future__ import annotations

from typing import Any
from unittest.mock import Mock

import pytest
import requests
from conftest import (
    FakeYouTubeAPI,
    channel_detail,
    playlist_handler,
    playlist_item,
    quota_error_body,
    video_stub,
    videos_handler,
)

from tubevault.config.models.api_settings import YouTubeSettings
from tubevault.core.statistics import StatisticsCollector
from tubevault.services.youtube.results import CatalogSuccess, QuotaExceeded, UpstreamError
from tubevault.services.youtube.youtube_client import YouTubeClient, classify_error_body
from tubevault.shared.constants import YouTubeMessages
from tubevault.shared.errors import ErrorCode, SecurityError


class TestClientInitialization:
    """Test YouTubeClient construction."""

    def test_missing_api_key_raises(self) -> None:
        with pytest.raises(SecurityError) as exc_info:
            YouTubeClient(settings=YouTubeSettings(api_key=""))

        assert exc_info.value.code == ErrorCode.MISSING_CONFIG
        assert "YOUTUBE_API_KEY" in exc_info.value.message

    def test_batch_size_capped_at_fifty(self) -> None:
        client = YouTubeClient(settings=YouTubeSettings(api_key="k"), session=Mock(), batch_size=500)

        assert client.batch_size == 50


class TestClassifyErrorBody:
    """Test classify_error_body()."""

    def test_quota_exceeded(self) -> None:
        result = classify_error_body(quota_error_body()["error"], 403)

        assert isinstance(result, QuotaExceeded)
        assert result.message == YouTubeMessages.QUOTA_EXCEEDED

    def test_other_reason_is_upstream_error(self) -> None:
        error = {"message": "Bad Request", "errors": [{"reason": "badRequest"}]}

        result = classify_error_body(error, 400)

        assert isinstance(result, UpstreamError)
        assert result.message == "YouTube API error: Bad Request"
        assert result.status_code == 400

    def test_quota_only_counts_as_first_reason(self) -> None:
        error = {"message": "x", "errors": [{"reason": "other"}, {"reason": "quotaExceeded"}]}

        assert isinstance(classify_error_body(error), UpstreamError)

    def test_error_without_message(self) -> None:
        result = classify_error_body({})

        assert isinstance(result, UpstreamError)
        assert YouTubeMessages.UNKNOWN_ERROR in result.message


class TestSearch:
    """Test YouTubeClient.search()."""

    @pytest.mark.asyncio
    async def test_video_search_sends_quality_params(
        self, youtube_client: YouTubeClient, youtube_api: FakeYouTubeAPI
    ) -> None:
        # Given
        youtube_api.on("search", lambda params: (200, {"items": [video_stub("v1")]}))

        # When
        result = await youtube_client.search("Dinosaurs", "video", 20, duration="short", channel_id="UCx")

        # Then
        assert isinstance(result, CatalogSuccess)
        assert len(result.value) == 1
        params = youtube_api.calls_to("search")[0]
        assert params["q"] == "Dinosaurs"
        assert params["type"] == "video"
        assert params["maxResults"] == "20"
        assert params["safeSearch"] == "strict"
        assert params["order"] == "relevance"
        assert params["videoEmbeddable"] == "true"
        assert params["regionCode"] == "US"
        assert params["relevanceLanguage"] == "en"
        assert params["videoDuration"] == "short"
        assert params["channelId"] == "UCx"
        assert params["key"] == "test-key"

    @pytest.mark.asyncio
    async def test_unknown_duration_not_sent(
        self, youtube_client: YouTubeClient, youtube_api: FakeYouTubeAPI
    ) -> None:
        youtube_api.on("search", lambda params: (200, {"items": []}))

        await youtube_client.search("cats", "video", 5, duration="epic")

        assert "videoDuration" not in youtube_api.calls_to("search")[0]

    @pytest.mark.asyncio
    async def test_channel_search_has_no_video_params(
        self, youtube_client: YouTubeClient, youtube_api: FakeYouTubeAPI
    ) -> None:
        youtube_api.on("search", lambda params: (200, {"items": []}))

        await youtube_client.search("cats", "channel", 5)

        params = youtube_api.calls_to("search")[0]
        assert params["type"] == "channel"
        assert "safeSearch" not in params

    @pytest.mark.asyncio
    async def test_unsupported_kind(self, youtube_client: YouTubeClient) -> None:
        with pytest.raises(ValueError, match="Unsupported search kind"):
            await youtube_client.search("cats", "playlist", 5)

    @pytest.mark.asyncio
    async def test_quota_exceeded_is_soft(
        self,
        youtube_client: YouTubeClient,
        youtube_api: FakeYouTubeAPI,
        statistics: StatisticsCollector,
    ) -> None:
        youtube_api.on("search", lambda params: (403, quota_error_body()))

        result = await youtube_client.search("cats", "video", 5)

        assert isinstance(result, QuotaExceeded)
        assert statistics.metrics.quota_errors == 1
        assert statistics.metrics.api_errors == 1

    @pytest.mark.asyncio
    async def test_transport_failure_is_upstream_error(self, statistics: StatisticsCollector) -> None:
        session = Mock()
        session.get.side_effect = requests.ConnectionError("connection refused")
        client = YouTubeClient(settings=YouTubeSettings(api_key="k"), session=session, statistics=statistics)

        result = await client.search("cats", "video", 5)

        assert isinstance(result, UpstreamError)
        assert "connection refused" in result.message
        assert statistics.metrics.upstream_errors == 1

    @pytest.mark.asyncio
    async def test_non_json_body_is_upstream_error(self) -> None:
        response = Mock(status_code=502)
        response.json.side_effect = ValueError("not json")
        session = Mock()
        session.get.return_value = response
        client = YouTubeClient(settings=YouTubeSettings(api_key="k"), session=session)

        result = await client.search("cats", "video", 5)

        assert isinstance(result, UpstreamError)
        assert result.status_code == 502


class TestDetails:
    """Test batch detail helpers."""

    @pytest.mark.asyncio
    async def test_ids_are_batched_by_fifty(
        self, youtube_client: YouTubeClient, youtube_api: FakeYouTubeAPI
    ) -> None:
        # Given
        youtube_api.on("videos", videos_handler())
        ids = [f"v{i}" for i in range(120)]

        # When
        details = await youtube_client.get_video_details(ids)

        # Then
        batches = youtube_api.calls_to("videos")
        assert [len(call["id"].split(",")) for call in batches] == [50, 50, 20]
        assert batches[0]["part"] == "snippet,contentDetails,status,statistics"
        assert len(details) == 120

    @pytest.mark.asyncio
    async def test_failed_batch_is_swallowed(
        self, youtube_client: YouTubeClient, youtube_api: FakeYouTubeAPI
    ) -> None:
        # Given: the second batch fails
        calls = {"n": 0}
        ok = videos_handler()

        def handle(params: dict[str, str]) -> tuple[int, Any]:
            calls["n"] += 1
            if calls["n"] == 2:
                return 500, {"error": {"message": "backend error"}}
            return ok(params)

        youtube_api.on("videos", handle)

        # When
        details = await youtube_client.get_video_details([f"v{i}" for i in range(60)])

        # Then
        assert len(details) == 50

    @pytest.mark.asyncio
    async def test_no_ids_no_calls(self, youtube_client: YouTubeClient, youtube_api: FakeYouTubeAPI) -> None:
        assert await youtube_client.get_channel_details([]) == []
        assert youtube_api.calls == []

    @pytest.mark.asyncio
    async def test_uploads_collection_id(
        self, youtube_client: YouTubeClient, youtube_api: FakeYouTubeAPI
    ) -> None:
        youtube_api.on("channels", lambda params: (200, {"items": [channel_detail("UCdino")]}))

        result = await youtube_client.get_uploads_collection_id("UCdino")

        assert result == CatalogSuccess("UUdino")
        assert youtube_api.calls_to("channels")[0]["part"] == "contentDetails"

    @pytest.mark.asyncio
    async def test_unknown_channel_has_no_uploads(
        self, youtube_client: YouTubeClient, youtube_api: FakeYouTubeAPI
    ) -> None:
        youtube_api.on("channels", lambda params: (200, {"items": []}))

        assert await youtube_client.get_uploads_collection_id("UCnone") == CatalogSuccess(None)

    @pytest.mark.asyncio
    async def test_uploads_lookup_surfaces_quota(
        self, youtube_client: YouTubeClient, youtube_api: FakeYouTubeAPI
    ) -> None:
        youtube_api.on("channels", lambda params: (403, quota_error_body()))

        assert isinstance(await youtube_client.get_uploads_collection_id("UCdino"), QuotaExceeded)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "items",
        [
            ["not-a-record"],
            [{"id": "UCdino", "contentDetails": "none"}],
            [{"id": "UCdino", "contentDetails": {"relatedPlaylists": ["UUdino"]}}],
            "not-a-list",
        ],
    )
    async def test_malformed_channel_record_has_no_uploads(
        self, youtube_client: YouTubeClient, youtube_api: FakeYouTubeAPI, items: Any
    ) -> None:
        youtube_api.on("channels", lambda params: (200, {"items": items}))

        assert await youtube_client.get_uploads_collection_id("UCdino") == CatalogSuccess(None)


class TestEnumerateCollection:
    """Test playlist pagination."""

    @pytest.mark.asyncio
    async def test_three_pages(self, youtube_client: YouTubeClient, youtube_api: FakeYouTubeAPI) -> None:
        # Given: 120 uploads served 50 per page
        youtube_api.on("playlistItems", playlist_handler(120))

        # When
        result = await youtube_client.enumerate_collection("UUdino", max_items=500)

        # Then
        assert isinstance(result, CatalogSuccess)
        assert len(result.value.items) == 120
        assert result.value.total_count == 120
        assert result.value.pages == 3
        calls = youtube_api.calls_to("playlistItems")
        assert [c.get("pageToken") for c in calls] == [None, "50", "100"]
        assert all(c["maxResults"] == "50" for c in calls)

    @pytest.mark.asyncio
    async def test_stops_at_max_items(self, youtube_client: YouTubeClient, youtube_api: FakeYouTubeAPI) -> None:
        youtube_api.on("playlistItems", playlist_handler(300))

        result = await youtube_client.enumerate_collection("UUdino", max_items=120)

        assert isinstance(result, CatalogSuccess)
        assert len(result.value.items) == 120
        assert result.value.total_count == 300
        assert [c["maxResults"] for c in youtube_api.calls_to("playlistItems")] == ["50", "50", "20"]

    @pytest.mark.asyncio
    async def test_page_failure_aborts(self, youtube_client: YouTubeClient, youtube_api: FakeYouTubeAPI) -> None:
        pages = playlist_handler(120)

        def handle(params: dict[str, str]) -> tuple[int, Any]:
            if params.get("pageToken") == "100":
                return 403, quota_error_body()
            return pages(params)

        youtube_api.on("playlistItems", handle)

        result = await youtube_client.enumerate_collection("UUdino", max_items=500)

        assert isinstance(result, QuotaExceeded)

    @pytest.mark.asyncio
    async def test_total_falls_back_to_item_count(
        self, youtube_client: YouTubeClient, youtube_api: FakeYouTubeAPI
    ) -> None:
        youtube_api.on("playlistItems", lambda params: (200, {"items": [playlist_item("a")]}))

        result = await youtube_client.enumerate_collection("UUdino", max_items=10)

        assert isinstance(result, CatalogSuccess)
        assert result.value.total_count == 1

    @pytest.mark.asyncio
    async def test_malformed_page_parts_are_ignored(
        self, youtube_client: YouTubeClient, youtube_api: FakeYouTubeAPI
    ) -> None:
        body = {"items": ["junk", playlist_item("a")], "pageInfo": ["oops"]}
        youtube_api.on("playlistItems", lambda params: (200, body))

        result = await youtube_client.enumerate_collection("UUdino", max_items=10)

        assert isinstance(result, CatalogSuccess)
        assert result.value.items == [playlist_item("a")]
        assert result.value.total_count == 1
