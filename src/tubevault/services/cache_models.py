"""Cache entry dataclass models.

Rows of the two cache tables and the tagged payload codec for the catalog
cache. A catalog row's payload shape is determined by its ``search_type``:

* ``channels`` -> ``list[ChannelResult]``
* ``videos`` -> ``list[VideoResult]``
* ``channelVideos`` -> ``ChannelVideosPayload``
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from pydantic import TypeAdapter

from tubevault.services.review.review_models import ChannelReview
from tubevault.services.youtube.youtube_models import (
    ChannelResult,
    ChannelVideosPayload,
    VideoResult,
)
from tubevault.shared.constants import SearchType

CachePayload = Union[list[ChannelResult], list[VideoResult], ChannelVideosPayload]

_PAYLOAD_ADAPTERS: dict[SearchType, TypeAdapter[Any]] = {
    SearchType.CHANNELS: TypeAdapter(list[ChannelResult]),
    SearchType.VIDEOS: TypeAdapter(list[VideoResult]),
    SearchType.CHANNEL_VIDEOS: TypeAdapter(ChannelVideosPayload),
}


def encode_payload(search_type: SearchType, payload: CachePayload) -> str:
    """Serialize a payload to JSON using the adapter for its search type."""
    adapter = _PAYLOAD_ADAPTERS[SearchType(search_type)]
    return adapter.dump_json(payload).decode("utf-8")


def decode_payload(search_type: SearchType, raw: str | bytes) -> CachePayload:
    """Decode stored JSON into the concrete payload model for its search type.

    Raises:
        pydantic.ValidationError: If the JSON is malformed or does not match
            the payload shape
    """
    adapter = _PAYLOAD_ADAPTERS[SearchType(search_type)]
    return adapter.validate_json(raw)  # type: ignore[no-any-return]


@dataclass(frozen=True)
class CacheEntry:
    """Catalog cache row.

    For ``channels`` and ``videos`` the key is ``(search_type, query,
    max_results)``; for ``channelVideos`` it is ``(search_type, channel_id)``.
    Timestamps are epoch milliseconds.

    Attributes:
        search_type: Kind of lookup the row caches
        results: Decoded payload
        query: Normalized search key (None for channelVideos)
        max_results: Requested result count (None for channelVideos)
        channel_id: Channel id (channelVideos only)
        id: Row id, None until inserted
        cached_at: Insert time
        expires_at: ``cached_at + ttl``
        times_reused: Number of cache hits served by this row
        last_accessed_at: Time of the last hit (insert time before any hit)
    """

    search_type: SearchType
    results: CachePayload
    query: str | None = None
    max_results: int | None = None
    channel_id: str | None = None
    id: int | None = None
    cached_at: int = 0
    expires_at: int = 0
    times_reused: int = 0
    last_accessed_at: int = 0

    def __post_init__(self) -> None:
        """Validate that the entry carries the key fields of its search type.

        Raises:
            ValueError: If a required key field is missing
        """
        object.__setattr__(self, "search_type", SearchType(self.search_type))

        if self.search_type is SearchType.CHANNEL_VIDEOS:
            if not self.channel_id:
                msg = "channelVideos entries require channel_id"
                raise ValueError(msg)
        elif self.query is None or self.max_results is None:
            msg = f"{self.search_type.value} entries require query and max_results"
            raise ValueError(msg)

    def is_valid(self, now_ms: int) -> bool:
        """An entry is valid strictly before its expiry instant."""
        return now_ms < self.expires_at


@dataclass(frozen=True)
class ReviewCacheEntry:
    """Channel review cache row. Reviews never expire."""

    channel_id: str
    channel_title: str
    review: ChannelReview
    description: str | None = None
    subscriber_count: int | None = None
    id: int | None = None
    reviewed_at: int = 0
    times_reused: int = 0
    last_accessed_at: int = 0


__all__ = [
    "CacheEntry",
    "CachePayload",
    "ReviewCacheEntry",
    "decode_payload",
    "encode_payload",
]
