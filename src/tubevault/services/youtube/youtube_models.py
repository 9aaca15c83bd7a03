"""Result models produced by the detail enricher and stored in the cache.

These are the concrete payload shapes of the cache's tagged union: a channel
search stores ``list[ChannelResult]``, a video search ``list[VideoResult]``
and a channel listing a ``ChannelVideosPayload``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def as_mapping(value: Any) -> dict[str, Any]:
    """Nested resource part as a dict; anything else (missing or malformed) is empty."""
    return value if isinstance(value, dict) else {}


class ChannelResult(BaseModel):
    """Enriched channel search record."""

    model_config = ConfigDict(frozen=True)

    channel_id: str
    channel_title: str = ""
    thumbnail_url: str = ""
    description: str = ""
    subscriber_count: int | None = None
    video_count: int | None = None


class VideoResult(BaseModel):
    """Enriched and classified video record."""

    model_config = ConfigDict(frozen=True)

    video_id: str
    title: str = ""
    thumbnail_url: str = ""
    channel_id: str = ""
    channel_title: str = ""
    description: str = ""
    duration: str = "PT0S"
    duration_seconds: int = Field(default=0, ge=0)
    made_for_kids: bool = False
    published_at: str = ""
    view_count: int | None = None
    embeddable: bool = True
    age_restricted: bool = False
    unplayable_reason: str | None = None

    @property
    def playable(self) -> bool:
        return self.unplayable_reason is None


class ChannelVideosPayload(BaseModel):
    """A channel's collected uploads plus the upstream's total count."""

    model_config = ConfigDict(frozen=True)

    items: list[VideoResult] = Field(default_factory=list)
    total_count: int = Field(default=0, ge=0)


__all__ = ["ChannelResult", "ChannelVideosPayload", "VideoResult", "as_mapping"]
