"""Cache configuration model.

Operational parameters of the catalog cache: TTLs per search type, default
request sizes, upstream batch/page limits and single-flight coalescing.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from tubevault.shared.constants import CacheDefaults, CacheTTL, YouTubeConfig


class CacheSettings(BaseModel):
    """Catalog cache configuration.

    Passed to ``CatalogCacheService`` at construction. All durations are in
    milliseconds to match the epoch-ms timestamps stored in the cache.
    """

    db_path: str = Field(
        default=CacheDefaults.DB_FILENAME,
        description="SQLite database file for the catalog and review caches",
    )
    channel_search_ttl_ms: int = Field(
        default=CacheTTL.SEARCH,
        gt=0,
        description="Time-to-live of channel search entries",
    )
    video_search_ttl_ms: int = Field(
        default=CacheTTL.SEARCH,
        gt=0,
        description="Time-to-live of video search entries",
    )
    channel_videos_ttl_ms: int = Field(
        default=CacheTTL.CHANNEL_VIDEOS,
        gt=0,
        description="Time-to-live of channel upload listings",
    )
    default_channel_results: int = Field(
        default=CacheDefaults.CHANNEL_SEARCH_RESULTS,
        gt=0,
        description="Default max_results for channel searches",
    )
    default_video_results: int = Field(
        default=CacheDefaults.VIDEO_SEARCH_RESULTS,
        gt=0,
        description="Default max_results for video searches",
    )
    max_channel_videos: int = Field(
        default=CacheDefaults.MAX_CHANNEL_VIDEOS,
        gt=0,
        description="Upper bound on videos collected from a channel's uploads",
    )
    detail_batch_size: int = Field(
        default=CacheDefaults.DETAIL_BATCH_SIZE,
        gt=0,
        le=YouTubeConfig.MAX_BATCH_IDS,
        description="Ids per batch detail request",
    )
    page_size: int = Field(
        default=CacheDefaults.PAGE_SIZE,
        gt=0,
        le=YouTubeConfig.MAX_PAGE_SIZE,
        description="Items per playlist page request",
    )
    single_flight: bool = Field(
        default=True,
        description="Coalesce concurrent misses for the same key into one upstream call",
    )


__all__ = ["CacheSettings"]
