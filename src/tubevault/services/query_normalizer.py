"""Cache key normalization for catalog searches."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from tubevault.shared.constants import SearchFilter

logger = logging.getLogger(__name__)


def normalize_query(query: str) -> str:
    """Trim and lower-case a free-text query.

    Empty input passes through as an empty string; validating queries is
    the caller's concern.

    Args:
        query: Raw search text

    Returns:
        Normalized query string
    """
    return query.strip().lower()


def build_search_key(
    query: str,
    filters: Mapping[str, str | None] | None = None,
) -> str:
    """Build the deterministic cache key for a search request.

    Each active filter is appended as a ``|name:value`` suffix. Suffixes are
    always emitted in ``SearchFilter.ORDER`` (duration before channel), so the
    order of ``filters`` never affects the key. Filters whose value is empty
    or None are inactive.

    Args:
        query: Raw search text
        filters: Mapping of filter name to value

    Returns:
        Normalized cache key

    Raises:
        ValueError: If an unknown filter name is supplied

    Example:
        >>> build_search_key(" Dinosaurs ", {"channel": "UCx", "duration": "short"})
        'dinosaurs|duration:short|channel:ucx'
    """
    filters = filters or {}

    unknown = set(filters) - set(SearchFilter.ORDER)
    if unknown:
        msg = f"Unknown search filter(s): {', '.join(sorted(unknown))}"
        raise ValueError(msg)

    key = normalize_query(query)
    for name in SearchFilter.ORDER:
        value = filters.get(name)
        if value:
            key += f"|{name}:{value}"

    return normalize_query(key)


def build_channel_videos_key(channel_id: str) -> str:
    """Channel listings are keyed by the raw, already-stable channel id."""
    return channel_id


__all__ = ["build_channel_videos_key", "build_search_key", "normalize_query"]
