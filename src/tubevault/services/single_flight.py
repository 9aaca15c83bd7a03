"""Process-local coalescing of concurrent cache misses.

Concurrent callers that miss the cache for the same key share one in-flight
task instead of each calling upstream. The shared task is shielded, so a
caller that is cancelled (e.g. a disconnected client) stops waiting without
aborting the upstream call or the cache write the other callers rely on.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from functools import partial
from typing import Any, TypeVar

from tubevault.core.statistics import StatisticsCollector

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SingleFlight:
    """Map of in-flight keys to shared asyncio tasks.

    Scoped to the owning service instance. When disabled, every call runs
    its own task; that task is still shielded from the caller.

    Example:
        >>> flight = SingleFlight()
        >>> result = await flight.do("videos:dinosaurs:20", lambda: fetch())
    """

    def __init__(
        self,
        enabled: bool = True,
        statistics: StatisticsCollector | None = None,
    ) -> None:
        self.enabled = enabled
        self.statistics = statistics
        self._in_flight: dict[str, asyncio.Task[Any]] = {}
        self._detached: set[asyncio.Task[Any]] = set()

    def __len__(self) -> int:
        return len(self._in_flight)

    def is_in_flight(self, key: str) -> bool:
        return key in self._in_flight

    async def do(self, key: str, fn: Callable[[], Awaitable[T]]) -> T:
        """Run ``fn`` once per key among concurrent callers.

        Args:
            key: Flight key identifying the logical request
            fn: Zero-argument coroutine factory performing the miss handling

        Returns:
            The shared result; exceptions raised by ``fn`` propagate to
            every waiting caller
        """
        if not self.enabled:
            own = asyncio.ensure_future(fn())
            self._detached.add(own)
            own.add_done_callback(self._release)
            return await asyncio.shield(own)  # type: ignore[no-any-return]

        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(fn())
            self._in_flight[key] = task
            task.add_done_callback(partial(self._forget, key))
        else:
            logger.debug("Joining in-flight request: %s", key)
            if self.statistics is not None:
                self.statistics.record_coalesced_request(key)

        return await asyncio.shield(task)  # type: ignore[no-any-return]

    def _forget(self, key: str, task: asyncio.Task[Any]) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        self._retrieve(task)

    def _release(self, task: asyncio.Task[Any]) -> None:
        self._detached.discard(task)
        self._retrieve(task)

    @staticmethod
    def _retrieve(task: asyncio.Task[Any]) -> None:
        # Mark the outcome as retrieved even if every waiter was cancelled
        if not task.cancelled() and task.exception() is not None:
            logger.debug("Request task failed: %s", task.exception())


__all__ = ["SingleFlight"]
