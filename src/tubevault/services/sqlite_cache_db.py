"""SQLite cache database facade.

One database holds two append-only tables: ``catalog_cache`` for YouTube
search results and channel listings, and ``review_cache`` for LLM channel
reviews. Rows are never updated except for hit statistics and are deleted
only by the explicit admin operations below.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from tubevault.services.cache_models import CacheEntry, ReviewCacheEntry
from tubevault.services.sqlite_cache.migration.manager import MigrationManager
from tubevault.services.sqlite_cache.operations.base import Clock, epoch_ms
from tubevault.services.sqlite_cache.operations.insert import InsertOperations
from tubevault.services.sqlite_cache.operations.query import QueryOperations
from tubevault.services.sqlite_cache.operations.update import UpdateOperations
from tubevault.shared.constants import SearchType
from tubevault.shared.errors import (
    ErrorCode,
    ErrorContext,
    InfrastructureError,
)
from tubevault.shared.logging import log_operation_error, log_operation_success

logger = logging.getLogger(__name__)


class SQLiteCacheDB:
    """SQLite-backed store for the catalog and review caches.

    Uses WAL mode and auto-commit; every mutation is a single statement.
    Validity is checked at read time against the injected clock.

    Attributes:
        db_path: Path to SQLite database file (":memory:" is accepted)
        clock: Returns the current time in epoch milliseconds
        conn: SQLite database connection

    Example:
        >>> cache = SQLiteCacheDB(Path("cache.db"))
        >>> entry = cache.lookup(SearchType.VIDEOS, "dinosaurs", 20)
        >>> cache.close()
    """

    def __init__(
        self,
        db_path: Path | str,
        clock: Clock | None = None,
    ) -> None:
        """Initialize SQLite cache database.

        Args:
            db_path: Path to SQLite database file
            clock: Optional clock returning epoch milliseconds

        Raises:
            InfrastructureError: If database initialization fails
        """
        self.db_path = Path(db_path) if str(db_path) != ":memory:" else None
        self._db_target = str(db_path)
        self.clock: Clock = clock or epoch_ms
        self.conn: sqlite3.Connection | None = None
        self._initialize_db()

    def _initialize_db(self) -> None:
        """Initialize database with WAL mode and schema.

        Raises:
            InfrastructureError: If database connection or schema creation fails
        """
        context = ErrorContext(
            operation="initialize_db",
            additional_data={"db_path": self._db_target},
        )

        try:
            if self.db_path is not None:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)

            self.conn = sqlite3.connect(
                self._db_target,
                check_same_thread=False,
                isolation_level=None,  # Auto-commit mode
            )

            self.conn.execute("PRAGMA journal_mode=WAL")
            self.conn.execute("PRAGMA synchronous=NORMAL")

            MigrationManager(self.conn).create_tables()

            self._query_ops = QueryOperations(self.conn, self.clock)
            self._insert_ops = InsertOperations(self.conn, self.clock)
            self._update_ops = UpdateOperations(self.conn, self.clock)

            log_operation_success(
                logger=logger,
                operation="initialize_db",
                duration_ms=0,
                context=context.additional_data,
            )

        except (sqlite3.Error, OSError) as e:
            error = InfrastructureError(
                code=ErrorCode.CACHE_INIT_FAILED,
                message=f"Failed to initialize SQLite cache: {e!s}",
                context=context,
                original_error=e,
            )
            log_operation_error(
                logger=logger,
                error=error,
                operation="initialize_db",
            )
            raise error from e

    @contextmanager
    def _store_errors(
        self,
        operation: str,
        code: ErrorCode,
        **additional_data: str | int,
    ) -> Iterator[None]:
        """Translate sqlite3 errors into InfrastructureError."""
        try:
            yield
        except sqlite3.Error as e:
            error = InfrastructureError(
                code=code,
                message=f"Cache {operation} failed: {e!s}",
                context=ErrorContext(
                    operation=operation,
                    additional_data={k: v for k, v in additional_data.items() if v is not None},
                ),
                original_error=e,
            )
            log_operation_error(logger=logger, error=error, operation=operation)
            raise error from e

    # Catalog cache

    def lookup(
        self,
        search_type: SearchType,
        query: str | None,
        max_results: int | None = None,
        channel_id: str | None = None,
    ) -> CacheEntry | None:
        """Find the freshest valid entry for a key.

        Args:
            search_type: Kind of lookup
            query: Normalized search key (unused for channelVideos)
            max_results: Result count for channels/videos
            channel_id: Channel id for channelVideos

        Returns:
            Entry if the freshest match exists and ``now < expires_at``,
            None otherwise

        Raises:
            InfrastructureError: If the database read fails
        """
        with self._store_errors(
            "lookup", ErrorCode.CACHE_READ_FAILED, search_type=SearchType(search_type).value
        ):
            return self._query_ops.lookup(search_type, query, max_results, channel_id)

    def record_hit(self, entry_id: int) -> int:
        """Increment ``times_reused`` and stamp ``last_accessed_at``.

        Returns:
            The access time written (epoch ms)

        Raises:
            InfrastructureError: If the database write fails
        """
        with self._store_errors("record_hit", ErrorCode.CACHE_WRITE_FAILED, entry_id=entry_id):
            return self._update_ops.record_hit(entry_id)

    def insert(self, entry: CacheEntry, ttl_ms: int) -> CacheEntry:
        """Append a new row for ``entry`` expiring ``ttl_ms`` from now.

        Never overwrites an existing row for the same key.

        Raises:
            InfrastructureError: If the database write fails
        """
        with self._store_errors(
            "insert", ErrorCode.CACHE_WRITE_FAILED, search_type=entry.search_type.value
        ):
            return self._insert_ops.insert(entry, ttl_ms)

    def clear_one(
        self,
        search_type: SearchType,
        query: str | None = None,
        max_results: int | None = None,
        channel_id: str | None = None,
    ) -> int:
        """Delete every row stored under one key.

        Returns:
            Number of deleted rows
        """
        with self._store_errors(
            "clear_one", ErrorCode.CACHE_WRITE_FAILED, search_type=SearchType(search_type).value
        ):
            return self._update_ops.clear_one(search_type, query, max_results, channel_id)

    def clear_all(self, search_type: SearchType | None = None) -> int:
        """Delete all rows, or all rows of one search type.

        Returns:
            Number of deleted rows
        """
        with self._store_errors("clear_all", ErrorCode.CACHE_WRITE_FAILED):
            return self._update_ops.clear_all(search_type)

    def purge_expired(self) -> int:
        """Delete expired rows. Only ever run on explicit request.

        Returns:
            Number of purged rows
        """
        with self._store_errors("purge_expired", ErrorCode.CACHE_WRITE_FAILED):
            return self._update_ops.purge_expired()

    def get_stats(self, now_ms: int | None = None) -> dict[str, Any]:
        """Aggregate statistics of the catalog cache.

        Returns:
            Dictionary with total_entries, valid_entries, expired_entries,
            total_reuses and by_type
        """
        with self._store_errors("get_stats", ErrorCode.CACHE_READ_FAILED):
            return self._query_ops.get_stats(now_ms)

    # Review cache

    def lookup_review(self, channel_id: str) -> ReviewCacheEntry | None:
        """Find the freshest cached review of a channel."""
        with self._store_errors("lookup_review", ErrorCode.CACHE_READ_FAILED, channel_id=channel_id):
            return self._query_ops.lookup_review(channel_id)

    def insert_review(self, entry: ReviewCacheEntry) -> ReviewCacheEntry:
        """Append a review row."""
        with self._store_errors(
            "insert_review", ErrorCode.CACHE_WRITE_FAILED, channel_id=entry.channel_id
        ):
            return self._insert_ops.insert_review(entry)

    def record_review_hit(self, entry_id: int) -> int:
        """Increment a review row's hit statistics."""
        with self._store_errors(
            "record_review_hit", ErrorCode.CACHE_WRITE_FAILED, entry_id=entry_id
        ):
            return self._update_ops.record_review_hit(entry_id)

    def clear_review(self, channel_id: str) -> int:
        """Delete the cached reviews of one channel."""
        with self._store_errors("clear_review", ErrorCode.CACHE_WRITE_FAILED, channel_id=channel_id):
            return self._update_ops.clear_review(channel_id)

    def clear_all_reviews(self) -> int:
        """Delete every cached review."""
        with self._store_errors("clear_all_reviews", ErrorCode.CACHE_WRITE_FAILED):
            return self._update_ops.clear_all_reviews()

    def get_review_stats(self) -> tuple[int, int]:
        """Return ``(total_entries, total_hits)`` of the review cache."""
        with self._store_errors("get_review_stats", ErrorCode.CACHE_READ_FAILED):
            return self._query_ops.get_review_stats()

    def close(self) -> None:
        """Close database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None
            logger.debug("SQLite cache connection closed")

    def __enter__(self) -> SQLiteCacheDB:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()


__all__ = ["SQLiteCacheDB"]
