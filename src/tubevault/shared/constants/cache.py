"""
Cache Configuration Constants

TTLs, search types and column/statistics keys shared by the SQLite cache,
the orchestrator and the admin CLI.
"""

from __future__ import annotations

from enum import Enum

from .system import BASE_HOUR_MS


class SearchType(str, Enum):
    """Kinds of cached catalog lookups.

    The value is what is persisted in the ``search_type`` column.
    """

    CHANNELS = "channels"
    VIDEOS = "videos"
    CHANNEL_VIDEOS = "channelVideos"


class CacheTTL:
    """Time-to-live per search type, in milliseconds."""

    SEARCH = 6 * BASE_HOUR_MS
    CHANNEL_VIDEOS = BASE_HOUR_MS


class CacheDefaults:
    """Default request sizes used by the orchestrator."""

    CHANNEL_SEARCH_RESULTS = 20
    VIDEO_SEARCH_RESULTS = 50
    MAX_CHANNEL_VIDEOS = 500
    DETAIL_BATCH_SIZE = 50
    PAGE_SIZE = 50
    DB_FILENAME = "tubevault_cache.db"


class SearchFilter:
    """Filter names accepted by the query normalizer, in emission order."""

    DURATION = "duration"
    CHANNEL = "channel"
    ORDER: tuple[str, ...] = (DURATION, CHANNEL)
    VALID_DURATIONS: frozenset[str] = frozenset({"short", "medium", "long"})


class StatsKeys:
    """Keys of the dictionaries returned by the cache statistics methods."""

    TOTAL_ENTRIES = "total_entries"
    VALID_ENTRIES = "valid_entries"
    EXPIRED_ENTRIES = "expired_entries"
    TOTAL_REUSES = "total_reuses"
    BY_TYPE = "by_type"
    SESSION = "session"


class ReviewStatsKeys:
    """Keys of the review cache statistics dictionary."""

    TOTAL_CACHE_ENTRIES = "total_cache_entries"
    TOTAL_CACHE_HITS = "total_cache_hits"
    TOTAL_API_CALLS = "total_api_calls"
    TOTAL_REQUESTS = "total_requests"
    CACHE_HIT_RATE = "cache_hit_rate"
    COST_SAVED = "estimated_cost_saved"
    COST_SPENT = "estimated_cost_spent"
