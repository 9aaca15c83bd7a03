"""Catalog cache orchestrator.

The three public catalog operations share one state machine::

    START -> (force_refresh? -> MISS) -> LOOKUP
        -> HIT  -> RECORD_STATS -> RETURN(from_cache=True)
        -> MISS -> CALL_UPSTREAM -> ENRICH -> CLASSIFY -> PERSIST
                -> RETURN(from_cache=False)

Upstream quota and API failures come back as soft outcomes (empty results
plus an error message) and are never persisted. Store failures raise
``InfrastructureError``.
"""

from __future__ import annotations

import dataclasses
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from tubevault.config.models.cache_settings import CacheSettings
from tubevault.core.statistics import StatisticsCollector
from tubevault.services.cache_models import CacheEntry
from tubevault.services.enricher import (
    build_detail_map,
    enrich_channels,
    enrich_videos,
    stub_channel_id,
    stub_video_id,
)
from tubevault.services.query_normalizer import (
    build_channel_videos_key,
    build_search_key,
    normalize_query,
)
from tubevault.services.single_flight import SingleFlight
from tubevault.services.sqlite_cache_db import SQLiteCacheDB
from tubevault.services.youtube.results import CatalogSuccess
from tubevault.services.youtube.youtube_client import YouTubeClient
from tubevault.services.youtube.youtube_models import (
    ChannelResult,
    ChannelVideosPayload,
    VideoResult,
)
from tubevault.shared.constants import SearchFilter, SearchType, StatsKeys, YouTubeKind
from tubevault.shared.errors import create_validation_error
from tubevault.shared.logging import log_operation_start, log_operation_success

logger = logging.getLogger(__name__)

R = TypeVar("R", ChannelResult, VideoResult)


@dataclass(frozen=True)
class SearchOutcome(Generic[R]):
    """Outcome of a channel or video search.

    ``times_reused`` is the entry's reuse count including this hit, 0 on a
    fresh fetch. ``error`` is set only for soft failures.
    """

    results: list[R] = field(default_factory=list)
    from_cache: bool = False
    error: str | None = None
    times_reused: int = 0


@dataclass(frozen=True)
class ChannelVideosOutcome:
    """Outcome of a channel upload listing."""

    videos: list[VideoResult] = field(default_factory=list)
    total_results: int = 0
    from_cache: bool = False
    error: str | None = None
    times_reused: int = 0


def _require_positive(value: int, name: str, operation: str) -> None:
    if value <= 0:
        raise create_validation_error(
            f"{name} must be positive, got {value}",
            field=name,
            operation=operation,
        )


class CatalogCacheAdmin:
    """Maintenance surface of the catalog cache.

    Needs no upstream client, so statistics and clearing work without a
    YouTube API key.

    Args:
        cache: SQLite store for catalog entries
        settings: Default sizes used to resolve keys
        statistics: Session telemetry collector
    """

    def __init__(
        self,
        cache: SQLiteCacheDB,
        settings: CacheSettings | None = None,
        statistics: StatisticsCollector | None = None,
    ) -> None:
        self.cache = cache
        self.settings = settings or CacheSettings()
        self.statistics = statistics or StatisticsCollector()

    def get_cache_stats(self) -> dict[str, Any]:
        """Store statistics plus this session's telemetry under ``"session"``."""
        stats = self.cache.get_stats()
        stats[StatsKeys.SESSION] = self.statistics.get_summary()
        return stats

    def clear_entry(
        self,
        search_type: SearchType | str,
        query: str | None = None,
        max_results: int | None = None,
        channel_id: str | None = None,
    ) -> int:
        """Delete every stored generation of one key.

        For channels/videos ``query`` is the cache key as produced by the
        normalizer (filter suffixes included, e.g. ``"cats|duration:short"``);
        ``max_results`` defaults to the operation's default. For
        channelVideos ``channel_id`` is required.

        Returns:
            Number of deleted rows
        """
        search_type = SearchType(search_type)

        if search_type is SearchType.CHANNEL_VIDEOS:
            if not channel_id:
                raise create_validation_error(
                    "channel_id is required to clear a channelVideos entry",
                    field="channel_id",
                    operation="clear_entry",
                )
            return self.cache.clear_one(search_type, channel_id=channel_id)

        if query is None:
            raise create_validation_error(
                f"query is required to clear a {search_type.value} entry",
                field="query",
                operation="clear_entry",
            )
        if max_results is None:
            max_results = (
                self.settings.default_channel_results
                if search_type is SearchType.CHANNELS
                else self.settings.default_video_results
            )
        return self.cache.clear_one(search_type, normalize_query(query), max_results)

    def clear_search_type(self, search_type: SearchType | str) -> int:
        """Delete every entry of one search type (e.g. after a ranking change)."""
        return self.cache.clear_all(SearchType(search_type))

    def clear_all(self) -> int:
        """Delete every catalog entry."""
        return self.cache.clear_all()

    def purge_expired(self) -> int:
        """Delete expired catalog entries."""
        return self.cache.purge_expired()


class CatalogCacheService(CatalogCacheAdmin):
    """Cache-first access to YouTube channel search, video search and
    channel upload listings.

    Args:
        cache: SQLite store for catalog entries
        client: YouTube client used on misses
        settings: TTLs, default sizes and batch limits
        statistics: Session telemetry collector
    """

    def __init__(
        self,
        cache: SQLiteCacheDB,
        client: YouTubeClient,
        settings: CacheSettings | None = None,
        statistics: StatisticsCollector | None = None,
    ) -> None:
        super().__init__(cache, settings, statistics or client.statistics)
        self.client = client
        self.flight = SingleFlight(
            enabled=self.settings.single_flight,
            statistics=self.statistics,
        )

    # Lookup helpers

    def _lookup(
        self,
        search_type: SearchType,
        query: str | None,
        max_results: int | None = None,
        channel_id: str | None = None,
    ) -> CacheEntry | None:
        """LOOKUP and, on a hit, RECORD_STATS."""
        entry = self.cache.lookup(search_type, query, max_results, channel_id)
        label = channel_id or query

        if entry is None or entry.id is None:
            self.statistics.record_cache_miss(search_type.value)
            logger.debug("Cache MISS for %s: %s", search_type.value, label)
            return None

        accessed_at = self.cache.record_hit(entry.id)
        self.statistics.record_cache_hit(search_type.value)
        logger.debug("Cache HIT for %s: %s", search_type.value, label)

        return dataclasses.replace(
            entry,
            times_reused=entry.times_reused + 1,
            last_accessed_at=accessed_at,
        )

    def _persist(self, entry: CacheEntry, ttl_ms: int, count: int) -> None:
        stored = self.cache.insert(entry, ttl_ms)
        logger.info(
            "Cache SAVED %s: %s (%d results)",
            stored.search_type.value,
            stored.channel_id or stored.query,
            count,
        )

    @staticmethod
    def _flight_key(search_type: SearchType, key: str, max_results: int | None = None) -> str:
        return f"{search_type.value}|{key}|{max_results if max_results is not None else ''}"

    # Channel search

    async def search_channels(
        self,
        query: str,
        max_results: int | None = None,
        force_refresh: bool = False,
    ) -> SearchOutcome[ChannelResult]:
        """Search channels, cache-first (6 hour TTL by default).

        Args:
            query: Free-text query
            max_results: Number of channels (default 20); part of the key
            force_refresh: Skip the lookup and append a fresh entry

        Returns:
            SearchOutcome with enriched ChannelResult records
        """
        if max_results is None:
            max_results = self.settings.default_channel_results
        _require_positive(max_results, "max_results", "search_channels")
        key = build_search_key(query)

        if not force_refresh:
            entry = self._lookup(SearchType.CHANNELS, key, max_results)
            if entry is not None:
                return SearchOutcome(
                    results=list(entry.results),  # type: ignore[arg-type]
                    from_cache=True,
                    times_reused=entry.times_reused,
                )
        else:
            self.statistics.record_cache_miss(SearchType.CHANNELS.value)

        return await self.flight.do(
            self._flight_key(SearchType.CHANNELS, key, max_results),
            lambda: self._fetch_channels(query, key, max_results),
        )

    async def _fetch_channels(
        self,
        query: str,
        key: str,
        max_results: int,
    ) -> SearchOutcome[ChannelResult]:
        started = time.perf_counter()
        log_operation_start(logger, "search_channels", {"query": key, "max_results": max_results})

        result = await self.client.search(query, YouTubeKind.CHANNEL, max_results)
        if not isinstance(result, CatalogSuccess):
            return SearchOutcome(results=[], from_cache=False, error=result.message)

        stubs = result.value
        channel_ids = [cid for cid in (stub_channel_id(stub) for stub in stubs) if cid]
        details = build_detail_map(await self.client.get_channel_details(channel_ids))
        results = enrich_channels(stubs, details)

        self._persist(
            CacheEntry(
                search_type=SearchType.CHANNELS,
                query=key,
                max_results=max_results,
                results=results,
            ),
            self.settings.channel_search_ttl_ms,
            len(results),
        )

        log_operation_success(
            logger=logger,
            operation="search_channels",
            duration_ms=(time.perf_counter() - started) * 1000,
            result_info={"results": len(results)},
            context={"query": key, "max_results": max_results},
        )
        return SearchOutcome(results=results, from_cache=False)

    # Video search

    async def search_videos(
        self,
        query: str,
        max_results: int | None = None,
        force_refresh: bool = False,
        duration: str | None = None,
        channel_id: str | None = None,
    ) -> SearchOutcome[VideoResult]:
        """Search videos, cache-first (6 hour TTL by default).

        The duration and channel filters become part of the cache key. An
        unknown duration class is ignored.

        Args:
            query: Free-text query
            max_results: Number of videos (default 50); part of the key
            force_refresh: Skip the lookup and append a fresh entry
            duration: Optional duration class (short, medium, long)
            channel_id: Optional channel restriction

        Returns:
            SearchOutcome with enriched, classified VideoResult records
        """
        if max_results is None:
            max_results = self.settings.default_video_results
        _require_positive(max_results, "max_results", "search_videos")

        if duration and duration not in SearchFilter.VALID_DURATIONS:
            logger.info("Ignoring unknown video duration filter: %s", duration)
            duration = None

        key = build_search_key(
            query,
            {SearchFilter.DURATION: duration, SearchFilter.CHANNEL: channel_id},
        )

        if not force_refresh:
            entry = self._lookup(SearchType.VIDEOS, key, max_results)
            if entry is not None:
                return SearchOutcome(
                    results=list(entry.results),  # type: ignore[arg-type]
                    from_cache=True,
                    times_reused=entry.times_reused,
                )
        else:
            self.statistics.record_cache_miss(SearchType.VIDEOS.value)

        return await self.flight.do(
            self._flight_key(SearchType.VIDEOS, key, max_results),
            lambda: self._fetch_videos(query, key, max_results, duration, channel_id),
        )

    async def _fetch_videos(
        self,
        query: str,
        key: str,
        max_results: int,
        duration: str | None,
        channel_id: str | None,
    ) -> SearchOutcome[VideoResult]:
        started = time.perf_counter()
        log_operation_start(logger, "search_videos", {"query": key, "max_results": max_results})

        result = await self.client.search(
            query,
            YouTubeKind.VIDEO,
            max_results,
            duration=duration,
            channel_id=channel_id,
        )
        if not isinstance(result, CatalogSuccess):
            return SearchOutcome(results=[], from_cache=False, error=result.message)

        stubs = result.value
        video_ids = [vid for vid in (stub_video_id(stub) for stub in stubs) if vid]
        details = build_detail_map(await self.client.get_video_details(video_ids))
        results = enrich_videos(stubs, details)

        self._persist(
            CacheEntry(
                search_type=SearchType.VIDEOS,
                query=key,
                max_results=max_results,
                results=results,
            ),
            self.settings.video_search_ttl_ms,
            len(results),
        )

        log_operation_success(
            logger=logger,
            operation="search_videos",
            duration_ms=(time.perf_counter() - started) * 1000,
            result_info={"results": len(results)},
            context={"query": key, "max_results": max_results},
        )
        return SearchOutcome(results=results, from_cache=False)

    # Channel uploads

    async def get_channel_videos(
        self,
        channel_id: str,
        max_videos: int | None = None,
        force_refresh: bool = False,
    ) -> ChannelVideosOutcome:
        """List a channel's uploads, cache-first (1 hour TTL by default).

        The listing is keyed by channel id only. A quota or API error on any
        page aborts the whole listing. Empty listings are not cached.

        Args:
            channel_id: YouTube channel id
            max_videos: Upper bound on collected videos (default 500)
            force_refresh: Skip the lookup and append a fresh entry

        Returns:
            ChannelVideosOutcome with classified videos and the upstream total
        """
        if max_videos is None:
            max_videos = self.settings.max_channel_videos
        _require_positive(max_videos, "max_videos", "get_channel_videos")
        key = build_channel_videos_key(channel_id)

        if not force_refresh:
            entry = self._lookup(SearchType.CHANNEL_VIDEOS, None, channel_id=key)
            if entry is not None:
                payload: ChannelVideosPayload = entry.results  # type: ignore[assignment]
                return ChannelVideosOutcome(
                    videos=list(payload.items),
                    total_results=payload.total_count,
                    from_cache=True,
                    times_reused=entry.times_reused,
                )
        else:
            self.statistics.record_cache_miss(SearchType.CHANNEL_VIDEOS.value)

        return await self.flight.do(
            self._flight_key(SearchType.CHANNEL_VIDEOS, key),
            lambda: self._fetch_channel_videos(key, max_videos),
        )

    async def _fetch_channel_videos(self, channel_id: str, max_videos: int) -> ChannelVideosOutcome:
        started = time.perf_counter()
        log_operation_start(logger, "get_channel_videos", {"channel_id": channel_id, "max_videos": max_videos})

        uploads = await self.client.get_uploads_collection_id(channel_id)
        if not isinstance(uploads, CatalogSuccess):
            return ChannelVideosOutcome(error=uploads.message)
        if uploads.value is None:
            logger.info("Channel %s has no uploads playlist", channel_id)
            return ChannelVideosOutcome()

        listing = await self.client.enumerate_collection(
            uploads.value,
            max_videos,
            page_size=self.settings.page_size,
        )
        if not isinstance(listing, CatalogSuccess):
            return ChannelVideosOutcome(error=listing.message)

        items = listing.value.items
        if not items:
            logger.info("Channel %s has no uploads", channel_id)
            return ChannelVideosOutcome()

        videos: list[VideoResult] = []
        batch_size = self.settings.detail_batch_size
        for start in range(0, len(items), batch_size):
            batch = items[start : start + batch_size]
            video_ids = [vid for vid in (stub_video_id(item) for item in batch) if vid]
            details = build_detail_map(await self.client.get_video_details(video_ids))
            videos.extend(enrich_videos(batch, details))

        payload = ChannelVideosPayload(items=videos, total_count=listing.value.total_count)
        self._persist(
            CacheEntry(
                search_type=SearchType.CHANNEL_VIDEOS,
                query=channel_id,
                channel_id=channel_id,
                results=payload,
            ),
            self.settings.channel_videos_ttl_ms,
            len(videos),
        )

        log_operation_success(
            logger=logger,
            operation="get_channel_videos",
            duration_ms=(time.perf_counter() - started) * 1000,
            result_info={"videos": len(videos), "pages": listing.value.pages},
            context={"channel_id": channel_id},
        )
        return ChannelVideosOutcome(
            videos=videos,
            total_results=payload.total_count,
            from_cache=False,
        )


__all__ = [
    "CatalogCacheAdmin",
    "CatalogCacheService",
    "ChannelVideosOutcome",
    "SearchOutcome",
]
