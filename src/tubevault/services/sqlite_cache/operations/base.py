"""Base operation class for SQLite cache operations."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    import sqlite3

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def epoch_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class BaseOperation:
    """Base class for cache operations with shared functionality."""

    def __init__(
        self,
        conn: sqlite3.Connection,
        clock: Clock,
    ) -> None:
        """Initialize base operation.

        Args:
            conn: SQLite database connection
            clock: Returns the current time in epoch milliseconds
        """
        self.conn = conn
        self.clock = clock

    def _validate_connection(self) -> None:
        """Validate database connection is available.

        Raises:
            RuntimeError: If connection is not initialized
        """
        if self.conn is None:
            raise RuntimeError("Database connection not initialized")
