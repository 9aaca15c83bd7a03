"""Tests for detail enrichment of search stubs."""

from __future__ import annotations

from conftest import channel_detail, channel_stub, playlist_item, video_detail, video_stub

from tubevault.services.enricher import (
    build_detail_map,
    enrich_channels,
    enrich_videos,
    pick_thumbnail,
    stub_channel_id,
    stub_video_id,
)
from tubevault.shared.constants import YouTubeMessages


class TestStubIds:
    """Test id extraction from search and playlist stubs."""

    def test_search_stub_video_id(self) -> None:
        assert stub_video_id(video_stub("vid1")) == "vid1"

    def test_playlist_item_uses_resource_id(self) -> None:
        assert stub_video_id(playlist_item("vid2")) == "vid2"

    def test_stub_without_id(self) -> None:
        assert stub_video_id({"snippet": {}}) is None

    def test_channel_stub_id(self) -> None:
        assert stub_channel_id(channel_stub("UC1")) == "UC1"
        assert stub_channel_id({"id": "UC2"}) == "UC2"
        assert stub_channel_id({}) is None


class TestPickThumbnail:
    """Thumbnail preference is high, then medium, then default."""

    def test_prefers_high(self) -> None:
        snippet = {
            "thumbnails": {
                "default": {"url": "d"},
                "medium": {"url": "m"},
                "high": {"url": "h"},
            }
        }
        assert pick_thumbnail(snippet) == "h"

    def test_falls_back_to_default(self) -> None:
        assert pick_thumbnail({"thumbnails": {"default": {"url": "d"}}}) == "d"

    def test_no_thumbnails(self) -> None:
        assert pick_thumbnail({}) is None


class TestEnrichChannels:
    """Test enrich_channels()."""

    def test_counts_come_from_detail(self) -> None:
        # Given
        stubs = [channel_stub("UC1", "Dino Channel")]
        details = build_detail_map([channel_detail("UC1", subscribers="1500", videos="42")])

        # When
        results = enrich_channels(stubs, details)

        # Then
        assert len(results) == 1
        channel = results[0]
        assert channel.channel_id == "UC1"
        assert channel.channel_title == "Dino Channel"
        assert channel.subscriber_count == 1500
        assert channel.video_count == 42
        assert channel.thumbnail_url == "https://yt3.ggpht.com/UC1/medium.jpg"

    def test_missing_detail_leaves_counts_unknown(self) -> None:
        results = enrich_channels([channel_stub("UC1")], {})

        assert results[0].subscriber_count is None
        assert results[0].video_count is None

    def test_hidden_subscriber_count(self) -> None:
        detail = channel_detail("UC1")
        del detail["statistics"]["subscriberCount"]

        results = enrich_channels([channel_stub("UC1")], build_detail_map([detail]))

        assert results[0].subscriber_count is None
        assert results[0].video_count == 340


class TestEnrichVideos:
    """Test enrich_videos()."""

    def test_video_with_detail(self) -> None:
        # Given
        stubs = [video_stub("vid1", "T-Rex Facts")]
        details = build_detail_map([video_detail("vid1", duration="PT1H2M3S", view_count="777")])

        # When
        video = enrich_videos(stubs, details)[0]

        # Then
        assert video.video_id == "vid1"
        assert video.title == "T-Rex Facts"
        assert video.channel_id == "UCdino"
        assert video.duration == "PT1H2M3S"
        assert video.duration_seconds == 3723
        assert video.view_count == 777
        assert video.made_for_kids is True
        assert video.playable is True
        assert video.unplayable_reason is None
        # Detail thumbnail outranks the stub's
        assert video.thumbnail_url == "https://i.ytimg.com/vid1/hq.jpg"

    def test_video_without_detail_is_not_found(self) -> None:
        video = enrich_videos([video_stub("gone")], {})[0]

        assert video.duration == "PT0S"
        assert video.duration_seconds == 0
        assert video.embeddable is False
        assert video.unplayable_reason == YouTubeMessages.VIDEO_NOT_FOUND
        assert video.view_count is None
        assert video.thumbnail_url == "https://i.ytimg.com/gone/default.jpg"

    def test_every_video_is_classified(self) -> None:
        stubs = [video_stub("a"), video_stub("b"), video_stub("c")]
        details = build_detail_map(
            [
                video_detail("a"),
                video_detail("b", embeddable=False),
                video_detail("c", rating="ytAgeRestricted"),
            ]
        )

        videos = enrich_videos(stubs, details)

        assert [v.playable for v in videos] == [True, False, False]
        assert videos[1].unplayable_reason == YouTubeMessages.NOT_EMBEDDABLE
        assert videos[2].age_restricted is True
        assert videos[2].unplayable_reason == YouTubeMessages.AGE_RESTRICTED

    def test_playlist_items_are_enriched(self) -> None:
        videos = enrich_videos([playlist_item("p1")], build_detail_map([video_detail("p1")]))

        assert videos[0].video_id == "p1"
        assert videos[0].title == "Upload p1"

    def test_stub_order_is_kept(self) -> None:
        stubs = [video_stub(vid) for vid in ("z", "a", "m")]
        details = build_detail_map([video_detail(vid) for vid in ("a", "m", "z")])

        assert [v.video_id for v in enrich_videos(stubs, details)] == ["z", "a", "m"]


class TestMalformedDetail:
    """Wrongly shaped detail parts fall back to defaults."""

    def test_non_dict_video_parts(self) -> None:
        details = build_detail_map(
            [
                {"id": "a", "statistics": ["x"], "status": "public"},
                {"id": "b", "contentDetails": 5, "snippet": "oops"},
            ]
        )

        videos = enrich_videos([video_stub("a"), video_stub("b")], details)

        assert videos[0].view_count is None
        assert videos[0].embeddable is True
        assert videos[0].made_for_kids is False
        assert videos[1].duration == "PT0S"
        assert videos[1].duration_seconds == 0
        assert videos[1].thumbnail_url == "https://i.ytimg.com/b/default.jpg"

    def test_non_string_duration(self) -> None:
        details = build_detail_map([{"id": "a", "contentDetails": {"duration": 90}}])

        video = enrich_videos([video_stub("a")], details)[0]

        assert video.duration == "PT0S"
        assert video.duration_seconds == 0

    def test_non_dict_channel_statistics(self) -> None:
        details = build_detail_map([{"id": "UC1", "statistics": "hidden"}])

        channel = enrich_channels([channel_stub("UC1")], details)[0]

        assert channel.subscriber_count is None
        assert channel.video_count is None

    def test_non_dict_stubs_are_skipped(self) -> None:
        stubs = ["junk", video_stub("a")]

        videos = enrich_videos(stubs, {})  # type: ignore[arg-type]

        assert [v.video_id for v in videos] == ["a"]
