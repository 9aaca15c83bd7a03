"""Migration manager for SQLite cache.

This module provides database schema creation and version tracking.
"""

from __future__ import annotations

import logging
import sqlite3

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class MigrationManager:
    """Database schema migration manager."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialize migration manager.

        Args:
            conn: SQLite database connection
        """
        self.conn = conn
        self._current_version = self._get_current_version()

    def get_current_version(self) -> int:
        """Get current schema version."""
        return self._current_version

    def _get_current_version(self) -> int:
        """Get current schema version from database (0 if not set)."""
        cursor = self.conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='schema_version'"
        )
        if cursor.fetchone() is None:
            return 0

        cursor = self.conn.execute("SELECT MAX(version) FROM schema_version")
        row = cursor.fetchone()
        return row[0] if row and row[0] is not None else 0

    def create_tables(self) -> None:
        """Create database schema (v1).

        Both tables are append-only: a cache miss inserts a new row and the
        lookup indexes end in the insert timestamp so the freshest generation
        of a key is found first.
        """
        if self._current_version >= SCHEMA_VERSION:
            logger.debug("Schema already at version %d", self._current_version)
            return

        schema_sql = """
        CREATE TABLE IF NOT EXISTS catalog_cache (
            id INTEGER PRIMARY KEY AUTOINCREMENT,

            -- Key: (search_type, query, max_results) or (search_type, channel_id)
            search_type TEXT NOT NULL,
            query TEXT,
            max_results INTEGER,
            channel_id TEXT,

            -- Tagged payload (JSON, shape determined by search_type)
            results TEXT NOT NULL,

            -- Epoch milliseconds
            cached_at INTEGER NOT NULL,
            expires_at INTEGER NOT NULL,

            -- Hit statistics
            times_reused INTEGER NOT NULL DEFAULT 0,
            last_accessed_at INTEGER NOT NULL,

            CHECK (search_type IN ('channels', 'videos', 'channelVideos'))
        );

        CREATE INDEX IF NOT EXISTS idx_catalog_query
            ON catalog_cache(search_type, query, max_results, cached_at);
        CREATE INDEX IF NOT EXISTS idx_catalog_channel
            ON catalog_cache(search_type, channel_id, cached_at);
        CREATE INDEX IF NOT EXISTS idx_catalog_expires_at
            ON catalog_cache(expires_at);

        CREATE TABLE IF NOT EXISTS review_cache (
            id INTEGER PRIMARY KEY AUTOINCREMENT,

            channel_id TEXT NOT NULL,
            channel_title TEXT NOT NULL,
            description TEXT,
            subscriber_count INTEGER,

            -- Structured review (JSON)
            review TEXT NOT NULL,

            reviewed_at INTEGER NOT NULL,
            times_reused INTEGER NOT NULL DEFAULT 0,
            last_accessed_at INTEGER NOT NULL
        );

        CREATE INDEX IF NOT EXISTS idx_review_channel
            ON review_cache(channel_id, reviewed_at);

        CREATE TABLE IF NOT EXISTS schema_version (
            version INTEGER PRIMARY KEY,
            applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP NOT NULL
        );
        """

        self.conn.executescript(schema_sql)

        self.conn.execute(
            "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
            (SCHEMA_VERSION,),
        )
        self._current_version = SCHEMA_VERSION

        logger.info("Created database schema (v%d)", SCHEMA_VERSION)


__all__ = ["SCHEMA_VERSION", "MigrationManager"]
