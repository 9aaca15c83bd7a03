"""Query operations for SQLite cache.

Lookups return the freshest row for a key (``cached_at`` descending, then
row id descending) and apply the validity check at read time.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from tubevault.services.cache_models import CacheEntry, ReviewCacheEntry, decode_payload
from tubevault.services.review.review_models import ChannelReview
from tubevault.services.sqlite_cache.operations.base import BaseOperation
from tubevault.shared.constants import CacheDefaults, SearchType, StatsKeys

logger = logging.getLogger(__name__)

_CATALOG_COLUMNS = """
    id, search_type, query, max_results, channel_id, results,
    cached_at, expires_at, times_reused, last_accessed_at
"""

_REVIEW_COLUMNS = """
    id, channel_id, channel_title, description, subscriber_count,
    review, reviewed_at, times_reused, last_accessed_at
"""


def _build_cache_entry_from_row(row: tuple[Any, ...]) -> CacheEntry | None:
    """Build a CacheEntry from a database row.

    Returns:
        CacheEntry instance or None if the payload cannot be decoded
    """
    (
        entry_id,
        search_type,
        query,
        max_results,
        channel_id,
        results_json,
        cached_at,
        expires_at,
        times_reused,
        last_accessed_at,
    ) = row

    try:
        results = decode_payload(SearchType(search_type), results_json)
    except (ValidationError, ValueError) as e:
        logger.warning(
            "Failed to decode cached payload for row %s (%s): %s",
            entry_id,
            search_type,
            str(e),
        )
        return None

    return CacheEntry(
        id=entry_id,
        search_type=SearchType(search_type),
        query=query,
        max_results=max_results,
        channel_id=channel_id,
        results=results,
        cached_at=cached_at,
        expires_at=expires_at,
        times_reused=times_reused or 0,
        last_accessed_at=last_accessed_at or cached_at,
    )


def _build_review_entry_from_row(row: tuple[Any, ...]) -> ReviewCacheEntry | None:
    (
        entry_id,
        channel_id,
        channel_title,
        description,
        subscriber_count,
        review_json,
        reviewed_at,
        times_reused,
        last_accessed_at,
    ) = row

    try:
        review = ChannelReview.model_validate_json(review_json)
    except ValidationError as e:
        logger.warning("Failed to decode cached review for channel %s: %s", channel_id, str(e))
        return None

    return ReviewCacheEntry(
        id=entry_id,
        channel_id=channel_id,
        channel_title=channel_title,
        description=description,
        subscriber_count=subscriber_count,
        review=review,
        reviewed_at=reviewed_at,
        times_reused=times_reused or 0,
        last_accessed_at=last_accessed_at or reviewed_at,
    )


class QueryOperations(BaseOperation):
    """Query operations for cache retrieval."""

    def lookup(
        self,
        search_type: SearchType,
        query: str | None,
        max_results: int | None = None,
        channel_id: str | None = None,
    ) -> CacheEntry | None:
        """Find the freshest valid catalog entry for a key.

        Args:
            search_type: Kind of lookup
            query: Normalized search key (ignored for channelVideos)
            max_results: Result count, part of the key for channels/videos
                (defaults to 20 when omitted)
            channel_id: Channel id, the key for channelVideos

        Returns:
            The freshest matching entry, or None if there is no match, the
            freshest match has expired or its payload is corrupt
        """
        self._validate_connection()
        search_type = SearchType(search_type)

        if search_type is SearchType.CHANNEL_VIDEOS:
            sql = f"""
            SELECT {_CATALOG_COLUMNS}
            FROM catalog_cache
            WHERE search_type = ? AND channel_id = ?
            ORDER BY cached_at DESC, id DESC
            LIMIT 1
            """
            params: tuple[Any, ...] = (search_type.value, channel_id)
        else:
            if max_results is None:
                max_results = CacheDefaults.CHANNEL_SEARCH_RESULTS
            sql = f"""
            SELECT {_CATALOG_COLUMNS}
            FROM catalog_cache
            WHERE search_type = ? AND query = ? AND max_results = ?
            ORDER BY cached_at DESC, id DESC
            LIMIT 1
            """
            params = (search_type.value, query, max_results)

        row = self.conn.execute(sql, params).fetchone()
        if row is None:
            return None

        entry = _build_cache_entry_from_row(row)
        if entry is None:
            return None

        now = self.clock()
        if not entry.is_valid(now):
            logger.debug(
                "Cache entry expired: type=%s, id=%s, expired %dms ago",
                search_type.value,
                entry.id,
                now - entry.expires_at,
            )
            return None

        return entry

    def lookup_review(self, channel_id: str) -> ReviewCacheEntry | None:
        """Find the freshest cached review for a channel. Reviews never expire."""
        self._validate_connection()

        sql = f"""
        SELECT {_REVIEW_COLUMNS}
        FROM review_cache
        WHERE channel_id = ?
        ORDER BY reviewed_at DESC, id DESC
        LIMIT 1
        """
        row = self.conn.execute(sql, (channel_id,)).fetchone()
        if row is None:
            return None

        return _build_review_entry_from_row(row)

    def get_stats(self, now_ms: int | None = None) -> dict[str, Any]:
        """Aggregate catalog cache statistics.

        Args:
            now_ms: Reference time for validity (defaults to the clock)

        Returns:
            Dictionary with total/valid/expired entry counts, total reuses
            and entry counts by search type
        """
        self._validate_connection()
        now = self.clock() if now_ms is None else now_ms

        totals_sql = """
        SELECT
            COUNT(*),
            COALESCE(SUM(CASE WHEN expires_at > ? THEN 1 ELSE 0 END), 0),
            COALESCE(SUM(times_reused), 0)
        FROM catalog_cache
        """
        total, valid, reuses = self.conn.execute(totals_sql, (now,)).fetchone()

        by_type = {search_type.value: 0 for search_type in SearchType}
        cursor = self.conn.execute(
            "SELECT search_type, COUNT(*) FROM catalog_cache GROUP BY search_type"
        )
        for search_type, count in cursor.fetchall():
            by_type[search_type] = count

        return {
            StatsKeys.TOTAL_ENTRIES: total,
            StatsKeys.VALID_ENTRIES: valid,
            StatsKeys.EXPIRED_ENTRIES: total - valid,
            StatsKeys.TOTAL_REUSES: reuses,
            StatsKeys.BY_TYPE: by_type,
        }

    def get_review_stats(self) -> tuple[int, int]:
        """Return ``(total_entries, total_hits)`` for the review cache."""
        self._validate_connection()

        row = self.conn.execute(
            "SELECT COUNT(*), COALESCE(SUM(times_reused), 0) FROM review_cache"
        ).fetchone()
        return row[0], row[1]
