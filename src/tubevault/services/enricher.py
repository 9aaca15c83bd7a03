"""Detail enrichment of YouTube search stubs.

Joins lightweight search or playlist stubs with the detail records fetched
by the client's batch calls and produces the result models stored in the
cache. Missing detail never fails a batch: the affected fields fall back to
their defaults (or None for counts).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from tubevault.services.playability import classify_playability, parse_duration
from tubevault.services.youtube.youtube_models import ChannelResult, VideoResult, as_mapping
from tubevault.shared.constants import YouTubeFields, YouTubeMessages

logger = logging.getLogger(__name__)

DetailMap = Mapping[str, dict[str, Any]]


def _to_int(value: Any) -> int | None:
    """Parse the string counts YouTube returns; None when absent or invalid."""
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _snippet(record: Mapping[str, Any] | None) -> dict[str, Any]:
    if not record:
        return {}
    return as_mapping(record.get(YouTubeFields.SNIPPET))


def pick_thumbnail(snippet: Mapping[str, Any]) -> str | None:
    """First available thumbnail URL in high -> medium -> default order."""
    thumbnails = as_mapping(snippet.get("thumbnails"))
    for size in YouTubeFields.THUMBNAIL_SIZES:
        url = as_mapping(thumbnails.get(size)).get("url")
        if url and isinstance(url, str):
            return url
    return None


def resolve_thumbnail(detail: Mapping[str, Any] | None, stub: Mapping[str, Any]) -> str:
    """Prefer the detail record's thumbnail chain, then the stub's."""
    return pick_thumbnail(_snippet(detail)) or pick_thumbnail(_snippet(stub)) or ""


def stub_video_id(item: Mapping[str, Any]) -> str | None:
    """Video id of a search result (``id.videoId``) or playlist item
    (``snippet.resourceId.videoId``)."""
    if not isinstance(item, Mapping):
        return None
    resource = as_mapping(_snippet(item).get("resourceId"))
    if _text(resource.get("videoId")):
        return resource["videoId"]
    item_id = item.get(YouTubeFields.ID)
    if isinstance(item_id, dict):
        return _text(item_id.get("videoId")) or None
    return None


def stub_channel_id(item: Mapping[str, Any]) -> str | None:
    """Channel id of a channel search result."""
    if not isinstance(item, Mapping):
        return None
    item_id = item.get(YouTubeFields.ID)
    if isinstance(item_id, dict):
        return _text(item_id.get("channelId")) or None
    if isinstance(item_id, str) and item_id:
        return item_id
    return None


def build_detail_map(details: Iterable[Mapping[str, Any]]) -> dict[str, dict[str, Any]]:
    """Index detail records by their ``id``."""
    return {
        detail[YouTubeFields.ID]: dict(detail)
        for detail in details
        if isinstance(detail.get(YouTubeFields.ID), str)
    }


def enrich_channels(
    stubs: Iterable[Mapping[str, Any]],
    details: DetailMap,
) -> list[ChannelResult]:
    """Build channel results from search stubs and channel detail records."""
    results: list[ChannelResult] = []

    for stub in stubs:
        channel_id = stub_channel_id(stub)
        if not channel_id:
            logger.debug("Skipping channel stub without id")
            continue

        detail = details.get(channel_id)
        snippet = _snippet(stub)
        statistics = as_mapping((detail or {}).get(YouTubeFields.STATISTICS))

        results.append(
            ChannelResult(
                channel_id=channel_id,
                channel_title=_text(snippet.get("title")),
                thumbnail_url=resolve_thumbnail(detail, stub),
                description=_text(snippet.get("description")),
                subscriber_count=_to_int(statistics.get("subscriberCount")),
                video_count=_to_int(statistics.get("videoCount")),
            )
        )

    return results


def enrich_videos(
    stubs: Iterable[Mapping[str, Any]],
    details: DetailMap,
) -> list[VideoResult]:
    """Build classified video results from stubs and video detail records.

    Every record carries the raw and parsed duration plus the playability
    verdict of its detail record; a video without detail is classified as
    not found.
    """
    results: list[VideoResult] = []

    for stub in stubs:
        video_id = stub_video_id(stub)
        if not video_id:
            logger.debug("Skipping video stub without id")
            continue

        detail = details.get(video_id)
        snippet = _snippet(stub)
        content_details = as_mapping((detail or {}).get(YouTubeFields.CONTENT_DETAILS))
        status = as_mapping((detail or {}).get(YouTubeFields.STATUS))
        statistics = as_mapping((detail or {}).get(YouTubeFields.STATISTICS))

        duration = _text(content_details.get("duration")) or YouTubeMessages.DEFAULT_DURATION
        playability = classify_playability(detail)

        results.append(
            VideoResult(
                video_id=video_id,
                title=_text(snippet.get("title")),
                thumbnail_url=resolve_thumbnail(detail, stub),
                channel_id=_text(snippet.get("channelId")),
                channel_title=_text(snippet.get("channelTitle")),
                description=_text(snippet.get("description")),
                duration=duration,
                duration_seconds=parse_duration(duration),
                made_for_kids=status.get("madeForKids") is True,
                published_at=_text(snippet.get("publishedAt")),
                view_count=_to_int(statistics.get("viewCount")),
                embeddable=playability.embeddable,
                age_restricted=playability.age_restricted,
                unplayable_reason=playability.reason,
            )
        )

    return results


__all__ = [
    "build_detail_map",
    "enrich_channels",
    "enrich_videos",
    "pick_thumbnail",
    "resolve_thumbnail",
    "stub_channel_id",
    "stub_video_id",
]
