"""Update operations for SQLite cache.

Hit-statistics updates and administrative deletes. Payloads are never
modified in place.
"""

from __future__ import annotations

import logging

from tubevault.services.sqlite_cache.operations.base import BaseOperation
from tubevault.shared.constants import CacheDefaults, SearchType

logger = logging.getLogger(__name__)


class UpdateOperations(BaseOperation):
    """Update/delete operations for cache management."""

    def record_hit(self, entry_id: int) -> int:
        """Bump ``times_reused`` and set ``last_accessed_at`` to now.

        Returns:
            The access time written
        """
        self._validate_connection()

        now = self.clock()
        self.conn.execute(
            """
            UPDATE catalog_cache
            SET times_reused = times_reused + 1, last_accessed_at = ?
            WHERE id = ?
            """,
            (now, entry_id),
        )
        return now

    def record_review_hit(self, entry_id: int) -> int:
        """Review-table counterpart of ``record_hit``."""
        self._validate_connection()

        now = self.clock()
        self.conn.execute(
            """
            UPDATE review_cache
            SET times_reused = times_reused + 1, last_accessed_at = ?
            WHERE id = ?
            """,
            (now, entry_id),
        )
        return now

    def clear_one(
        self,
        search_type: SearchType,
        query: str | None = None,
        max_results: int | None = None,
        channel_id: str | None = None,
    ) -> int:
        """Delete every generation of one conceptual key.

        Returns:
            Number of deleted rows
        """
        self._validate_connection()
        search_type = SearchType(search_type)

        if search_type is SearchType.CHANNEL_VIDEOS:
            cursor = self.conn.execute(
                "DELETE FROM catalog_cache WHERE search_type = ? AND channel_id = ?",
                (search_type.value, channel_id),
            )
        else:
            if max_results is None:
                max_results = CacheDefaults.CHANNEL_SEARCH_RESULTS
            cursor = self.conn.execute(
                """
                DELETE FROM catalog_cache
                WHERE search_type = ? AND query = ? AND max_results = ?
                """,
                (search_type.value, query, max_results),
            )

        deleted = cursor.rowcount
        logger.info(
            "Cleared %d cache row(s): type=%s, query=%s, channel=%s",
            deleted,
            search_type.value,
            query,
            channel_id,
        )
        return deleted

    def clear_all(self, search_type: SearchType | None = None) -> int:
        """Delete all catalog rows, or all rows of one search type.

        Returns:
            Number of deleted rows
        """
        self._validate_connection()

        if search_type is not None:
            search_type = SearchType(search_type)
            cursor = self.conn.execute(
                "DELETE FROM catalog_cache WHERE search_type = ?",
                (search_type.value,),
            )
            logger.info("Cleared %d cache entries for type: %s", cursor.rowcount, search_type.value)
        else:
            cursor = self.conn.execute("DELETE FROM catalog_cache")
            logger.info("Cleared all %d cache entries", cursor.rowcount)

        return cursor.rowcount

    def purge_expired(self) -> int:
        """Delete catalog rows whose expiry instant has passed.

        Returns:
            Number of purged entries
        """
        self._validate_connection()

        now = self.clock()
        cursor = self.conn.execute(
            "DELETE FROM catalog_cache WHERE expires_at <= ?",
            (now,),
        )

        purged_count = cursor.rowcount
        if purged_count > 0:
            logger.info("Purged %d expired cache entries", purged_count)

        return purged_count

    def clear_review(self, channel_id: str) -> int:
        """Delete every cached review of a channel."""
        self._validate_connection()

        cursor = self.conn.execute(
            "DELETE FROM review_cache WHERE channel_id = ?",
            (channel_id,),
        )
        logger.info("Cleared %d cached review(s) for channel: %s", cursor.rowcount, channel_id)
        return cursor.rowcount

    def clear_all_reviews(self) -> int:
        """Delete every cached review."""
        self._validate_connection()

        cursor = self.conn.execute("DELETE FROM review_cache")
        logger.info("Cleared all %d cached reviews", cursor.rowcount)
        return cursor.rowcount
