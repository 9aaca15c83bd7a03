"""Schema migration for the SQLite cache."""

from .manager import MigrationManager

__all__ = ["MigrationManager"]
