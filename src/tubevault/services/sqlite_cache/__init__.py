"""SQLite cache module with modular operations.

Query, insert and update operations plus schema migration for the catalog
and review caches. ``tubevault.services.sqlite_cache_db.SQLiteCacheDB`` is
the facade over these pieces.
"""
