"""Duration parsing and playback classification for YouTube videos.

Pure functions over raw ``videos`` detail records.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from tubevault.services.youtube.youtube_models import as_mapping
from tubevault.shared.constants import YouTubeFields, YouTubeMessages

_DURATION_PATTERN = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")


@dataclass(frozen=True)
class Playability:
    """Whether a video can be played inside the app.

    ``reason`` is None unless one of the flags is unfavorable.
    """

    embeddable: bool
    age_restricted: bool
    reason: str | None = None


def parse_duration(iso_duration: str | None) -> int:
    """Convert an ISO 8601 ``PT#H#M#S`` duration to seconds.

    Each component is optional. Input that does not match yields 0.

    Example:
        >>> parse_duration("PT1H2M3S")
        3723
        >>> parse_duration("")
        0
    """
    if not iso_duration or not isinstance(iso_duration, str):
        return 0

    match = _DURATION_PATTERN.match(iso_duration)
    if not match:
        return 0

    hours, minutes, seconds = (int(part) if part else 0 for part in match.groups())
    return hours * 3600 + minutes * 60 + seconds


def classify_playability(detail: dict[str, Any] | None) -> Playability:
    """Classify a video detail record for embedded playback.

    A missing ``status.embeddable`` field counts as embeddable. A video is
    age-restricted only when ``contentRating.ytRating`` is ``ytAgeRestricted``.
    When both flags are unfavorable the non-embeddable reason wins.

    Args:
        detail: Raw ``videos`` resource, or None if the video was not returned

    Returns:
        Playability verdict
    """
    if not isinstance(detail, dict):
        return Playability(
            embeddable=False,
            age_restricted=False,
            reason=YouTubeMessages.VIDEO_NOT_FOUND,
        )

    status = as_mapping(detail.get(YouTubeFields.STATUS))
    embeddable = status.get("embeddable") is not False

    content_details = as_mapping(detail.get(YouTubeFields.CONTENT_DETAILS))
    rating = as_mapping(content_details.get("contentRating")).get("ytRating")
    age_restricted = rating == YouTubeFields.AGE_RESTRICTED_RATING

    reason = None
    if not embeddable:
        reason = YouTubeMessages.NOT_EMBEDDABLE
    elif age_restricted:
        reason = YouTubeMessages.AGE_RESTRICTED

    return Playability(embeddable=embeddable, age_restricted=age_restricted, reason=reason)


__all__ = ["Playability", "classify_playability", "parse_duration"]
