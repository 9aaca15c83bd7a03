"""Insert operations for SQLite cache.

Rows are only ever appended; an insert never replaces an existing row for
the same key.
"""

from __future__ import annotations

import dataclasses
import logging

from tubevault.services.cache_models import CacheEntry, ReviewCacheEntry, encode_payload
from tubevault.services.sqlite_cache.operations.base import BaseOperation

logger = logging.getLogger(__name__)


class InsertOperations(BaseOperation):
    """Insert operations for cache storage."""

    def insert(self, entry: CacheEntry, ttl_ms: int) -> CacheEntry:
        """Append a catalog cache row.

        ``cached_at`` and ``last_accessed_at`` are set to now, ``expires_at``
        to ``now + ttl_ms`` and ``times_reused`` to 0, whatever the passed
        entry carries.

        Args:
            entry: Entry holding the key fields and payload
            ttl_ms: Time-to-live in milliseconds

        Returns:
            The stored entry with its row id and timestamps
        """
        self._validate_connection()

        if ttl_ms <= 0:
            msg = f"ttl_ms must be positive, got {ttl_ms}"
            raise ValueError(msg)

        now = self.clock()
        expires_at = now + ttl_ms
        results_json = encode_payload(entry.search_type, entry.results)

        insert_sql = """
        INSERT INTO catalog_cache (
            search_type, query, max_results, channel_id, results,
            cached_at, expires_at, times_reused, last_accessed_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, 0, ?)
        """

        cursor = self.conn.execute(
            insert_sql,
            (
                entry.search_type.value,
                entry.query,
                entry.max_results,
                entry.channel_id,
                results_json,
                now,
                expires_at,
                now,
            ),
        )

        logger.debug(
            "Cache inserted: type=%s, query=%s, channel=%s, size=%d bytes, ttl=%dms",
            entry.search_type.value,
            entry.query,
            entry.channel_id,
            len(results_json),
            ttl_ms,
        )

        return dataclasses.replace(
            entry,
            id=cursor.lastrowid,
            cached_at=now,
            expires_at=expires_at,
            times_reused=0,
            last_accessed_at=now,
        )

    def insert_review(self, entry: ReviewCacheEntry) -> ReviewCacheEntry:
        """Append a review cache row.

        Returns:
            The stored entry with its row id and timestamps
        """
        self._validate_connection()

        now = self.clock()
        review_json = entry.review.model_dump_json(by_alias=True)

        insert_sql = """
        INSERT INTO review_cache (
            channel_id, channel_title, description, subscriber_count,
            review, reviewed_at, times_reused, last_accessed_at
        ) VALUES (?, ?, ?, ?, ?, ?, 0, ?)
        """

        cursor = self.conn.execute(
            insert_sql,
            (
                entry.channel_id,
                entry.channel_title,
                entry.description,
                entry.subscriber_count,
                review_json,
                now,
                now,
            ),
        )

        logger.debug("Review cached for channel: %s", entry.channel_id)

        return dataclasses.replace(
            entry,
            id=cursor.lastrowid,
            reviewed_at=now,
            times_reused=0,
            last_accessed_at=now,
        )
