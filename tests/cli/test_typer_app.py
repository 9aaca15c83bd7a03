"""Tests for the tubevault command line interface."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from typing import Any

import pytest
from conftest import (
    FakeYouTubeAPI,
    channel_stub,
    quota_error_body,
    video_stub,
    videos_handler,
)
from dependency_injector import providers
from pytest_mock import MockerFixture
from typer.testing import CliRunner, Result

from tubevault import __version__
from tubevault.cli.common.context import clear_cli_context
from tubevault.cli.typer_app import app, container
from tubevault.config.models.app_settings import AppSettings, LoggingSettings
from tubevault.config.models.settings import Settings
from tubevault.core.statistics import StatisticsCollector
from tubevault.services.catalog_cache import CatalogCacheService
from tubevault.services.review.review_client import ReviewClient
from tubevault.services.review.review_service import ChannelReviewService
from tubevault.services.sqlite_cache_db import SQLiteCacheDB
from tubevault.shared.constants import CLIExitCodes, YouTubeMessages

REVIEW_JSON = json.dumps(
    {
        "summary": "Friendly dinosaur songs.",
        "contentCategories": ["Music", "Educational"],
        "concerns": [],
        "recommendation": "Recommended",
        "ageRecommendation": "3+",
    }
)


@pytest.fixture
def review_client(mocker: MockerFixture) -> Any:
    client = mocker.Mock(spec=ReviewClient)
    client.complete = mocker.AsyncMock(return_value=REVIEW_JSON)
    client.close = mocker.AsyncMock()
    return client


@pytest.fixture
def runner(
    store: SQLiteCacheDB,
    catalog: CatalogCacheService,
    statistics: StatisticsCollector,
    review_client: Any,
) -> Generator[CliRunner, None, None]:
    """CliRunner against a container wired to in-memory fakes."""
    container.config.override(providers.Object(Settings()))
    container.statistics.override(providers.Object(statistics))
    container.cache_db.override(providers.Object(store))
    container.catalog_service.override(providers.Object(catalog))
    container.review_service.override(
        providers.Object(ChannelReviewService(store, review_client, statistics=statistics))
    )

    yield CliRunner()

    container.reset_override()
    clear_cli_context()
    package_logger = logging.getLogger("tubevault")
    package_logger.handlers.clear()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


def invoke_json(runner: CliRunner, *args: str) -> tuple[Result, dict[str, Any]]:
    """Invoke with the JSON envelope and only error-level logging."""
    result = runner.invoke(app, ["--json", "--log-level", "ERROR", *args])
    return result, json.loads(result.stdout)


class TestGlobalOptions:
    """Test options handled by the main callback."""

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == CLIExitCodes.SUCCESS
        assert f"TubeVault CLI v{__version__}" in result.stdout

    def test_log_level_from_configuration(self, runner: CliRunner) -> None:
        container.config.override(providers.Object(Settings(logging=LoggingSettings(level="info"))))

        result = runner.invoke(app, ["cache", "purge"])

        assert result.exit_code == CLIExitCodes.SUCCESS
        assert logging.getLogger("tubevault").level == logging.INFO

    def test_command_line_level_wins(self, runner: CliRunner) -> None:
        container.config.override(providers.Object(Settings(app=AppSettings(debug=False))))

        runner.invoke(app, ["--log-level", "error", "cache", "purge"])

        assert logging.getLogger("tubevault").level == logging.ERROR

    def test_debug_forces_debug_level(self, runner: CliRunner) -> None:
        container.config.override(providers.Object(Settings(app=AppSettings(debug=True))))

        runner.invoke(app, ["--log-level", "error", "cache", "purge"])

        assert logging.getLogger("tubevault").level == logging.DEBUG


class TestSearchCommands:
    """Test ``tubevault search``."""

    def test_videos_json_miss_then_hit(self, runner: CliRunner, youtube_api: FakeYouTubeAPI) -> None:
        # Given
        youtube_api.on("search", lambda params: (200, {"items": [video_stub("v1"), video_stub("v2")]}))
        youtube_api.on("videos", videos_handler())

        # When
        first, first_body = invoke_json(runner, "search", "videos", "dinosaurs", "-n", "20")
        second, second_body = invoke_json(runner, "search", "videos", "dinosaurs", "-n", "20")

        # Then
        assert first.exit_code == CLIExitCodes.SUCCESS
        assert first_body["success"] is True
        assert first_body["command"] == "search videos"
        assert [v["video_id"] for v in first_body["data"]["results"]] == ["v1", "v2"]
        assert first_body["data"]["from_cache"] is False
        assert second_body["data"]["from_cache"] is True
        assert second_body["data"]["times_reused"] == 1
        assert len(youtube_api.calls_to("search")) == 1

    def test_videos_table_output(self, runner: CliRunner, youtube_api: FakeYouTubeAPI) -> None:
        youtube_api.on("search", lambda params: (200, {"items": [video_stub("v1")]}))
        youtube_api.on("videos", videos_handler())

        result = runner.invoke(app, ["search", "videos", "dinosaurs", "--duration", "short"])

        assert result.exit_code == CLIExitCodes.SUCCESS
        assert "fetched from YouTube" in result.stdout
        assert youtube_api.calls_to("search")[0]["videoDuration"] == "short"

    def test_channels_json(self, runner: CliRunner, youtube_api: FakeYouTubeAPI) -> None:
        youtube_api.on("search", lambda params: (200, {"items": [channel_stub("UCa", "Dino Facts")]}))
        youtube_api.on("channels", lambda params: (200, {"items": []}))

        result, body = invoke_json(runner, "search", "channels", "dinosaurs")

        assert result.exit_code == CLIExitCodes.SUCCESS
        assert body["data"]["results"][0]["channel_title"] == "Dino Facts"
        assert body["data"]["results"][0]["subscriber_count"] is None

    def test_quota_exceeded_exit_code(self, runner: CliRunner, youtube_api: FakeYouTubeAPI) -> None:
        youtube_api.on("search", lambda params: (403, quota_error_body()))

        result, body = invoke_json(runner, "search", "videos", "dinosaurs")

        assert result.exit_code == CLIExitCodes.QUOTA_EXCEEDED
        assert body["success"] is False
        assert body["errors"] == [YouTubeMessages.QUOTA_EXCEEDED]
        assert body["data"]["results"] == []

    def test_upstream_error_exit_code(self, runner: CliRunner, youtube_api: FakeYouTubeAPI) -> None:
        youtube_api.on("search", lambda params: (500, {"error": {"message": "Backend Error"}}))

        result, _ = invoke_json(runner, "search", "videos", "dinosaurs")

        assert result.exit_code == CLIExitCodes.ERROR

    def test_max_results_must_be_positive(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["search", "videos", "dinosaurs", "-n", "0"])

        assert result.exit_code == 2

    def test_missing_api_key(self, runner: CliRunner) -> None:
        # Given: the real service provider with a keyless configuration
        container.catalog_service.reset_override()

        # When
        result, body = invoke_json(runner, "search", "videos", "dinosaurs")

        # Then
        assert result.exit_code == CLIExitCodes.ERROR
        assert body["data"]["error_code"] == "MISSING_CONFIG"
        assert "YOUTUBE_API_KEY" in body["errors"][0]


class TestCacheCommands:
    """Test ``tubevault cache``."""

    @pytest.fixture
    def seeded(self, runner: CliRunner, youtube_api: FakeYouTubeAPI) -> CliRunner:
        youtube_api.on("search", lambda params: (200, {"items": []}))
        runner.invoke(app, ["search", "videos", "dinosaurs", "-n", "20"])
        runner.invoke(app, ["search", "channels", "dinosaurs"])
        return runner

    def test_stats(self, seeded: CliRunner) -> None:
        result, body = invoke_json(seeded, "cache", "stats")

        assert result.exit_code == CLIExitCodes.SUCCESS
        assert body["data"]["total_entries"] == 2
        assert body["data"]["by_type"]["videos"] == 1

    def test_stats_without_api_keys(self, seeded: CliRunner) -> None:
        container.catalog_service.reset_override()

        result = seeded.invoke(app, ["cache", "stats"])

        assert result.exit_code == CLIExitCodes.SUCCESS
        assert "Catalog Cache Statistics" in result.stdout

    def test_clear_one_key(self, seeded: CliRunner) -> None:
        result, body = invoke_json(seeded, "cache", "clear", "--type", "videos", "--query", "Dinosaurs", "-n", "20")

        assert result.exit_code == CLIExitCodes.SUCCESS
        assert body["data"] == {"deleted": 1, "search_type": "videos"}

    def test_clear_type(self, seeded: CliRunner) -> None:
        _, body = invoke_json(seeded, "cache", "clear", "--type", "channels", "--all")

        assert body["data"]["deleted"] == 1

    def test_clear_all_asks_for_confirmation(self, seeded: CliRunner, store: SQLiteCacheDB) -> None:
        declined = seeded.invoke(app, ["cache", "clear", "--all"], input="n\n")
        assert declined.exit_code == 1
        assert store.get_stats()["total_entries"] == 2

        confirmed = seeded.invoke(app, ["cache", "clear", "--all", "--yes"])
        assert confirmed.exit_code == CLIExitCodes.SUCCESS
        assert store.get_stats()["total_entries"] == 0

    def test_clear_requires_type(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["cache", "clear", "--query", "dinosaurs"])

        assert result.exit_code == 2

    def test_clear_channel_videos_requires_channel(self, runner: CliRunner) -> None:
        result, body = invoke_json(runner, "cache", "clear", "--type", "channelVideos")

        assert result.exit_code == CLIExitCodes.ERROR
        assert body["data"]["error_code"] == "VALIDATION_ERROR"

    def test_purge(self, seeded: CliRunner) -> None:
        result, body = invoke_json(seeded, "cache", "purge")

        assert result.exit_code == CLIExitCodes.SUCCESS
        assert body["data"]["deleted"] == 0


class TestReviewCommands:
    """Test ``tubevault review``."""

    def test_review_then_cached(self, runner: CliRunner, review_client: Any) -> None:
        args = ("review", "channel", "UCdino", "--title", "Dino Songs", "--recent-title", "T-rex song")

        first, first_body = invoke_json(runner, *args)
        second, second_body = invoke_json(runner, *args)

        assert first.exit_code == CLIExitCodes.SUCCESS
        assert first_body["data"]["review"]["recommendation"] == "Recommended"
        assert first_body["data"]["review"]["contentCategories"] == ["Music", "Educational"]
        assert first_body["data"]["from_cache"] is False
        assert second_body["data"]["from_cache"] is True
        assert second_body["data"]["cache_hit_count"] == 1
        assert review_client.complete.await_count == 1
        assert review_client.close.await_count == 2

    def test_review_panel_output(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["review", "channel", "UCdino", "--title", "Dino Songs"])

        assert result.exit_code == CLIExitCodes.SUCCESS
        assert "Recommendation: Recommended" in result.stdout
        assert "Age recommendation: 3+" in result.stdout

    def test_unparseable_review(self, runner: CliRunner, review_client: Any) -> None:
        review_client.complete.return_value = "not json at all"

        result, body = invoke_json(runner, "review", "channel", "UCdino", "--title", "Dino Songs")

        assert result.exit_code == CLIExitCodes.ERROR
        assert body["data"]["error_code"] == "PARSING_ERROR"
        review_client.close.assert_awaited_once()

    def test_stats_and_clear(self, runner: CliRunner) -> None:
        invoke_json(runner, "review", "channel", "UCa", "--title", "A")
        invoke_json(runner, "review", "channel", "UCa", "--title", "A")

        _, stats = invoke_json(runner, "review", "stats")
        _, cleared = invoke_json(runner, "review", "clear", "UCa")

        assert stats["data"]["total_cache_entries"] == 1
        assert stats["data"]["total_cache_hits"] == 1
        assert stats["data"]["cache_hit_rate"] == 50.0
        assert cleared["data"] == {"deleted": 1, "channel_id": "UCa"}

    def test_clear_needs_target(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["review", "clear"])

        assert result.exit_code == 2
