"""Tests for in-flight request coalescing."""

from __future__ import annotations

import asyncio

import pytest

from tubevault.core.statistics import StatisticsCollector
from tubevault.services.single_flight import SingleFlight


class TestSingleFlight:
    """Test SingleFlight.do()."""

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_call(self) -> None:
        # Given
        statistics = StatisticsCollector()
        flight = SingleFlight(statistics=statistics)
        calls = 0
        release = asyncio.Event()

        async def fetch() -> str:
            nonlocal calls
            calls += 1
            await release.wait()
            return "payload"

        # When
        waiters = [asyncio.ensure_future(flight.do("videos|cats|20", fetch)) for _ in range(3)]
        await asyncio.sleep(0)
        assert flight.is_in_flight("videos|cats|20")
        release.set()
        results = await asyncio.gather(*waiters)

        # Then
        assert results == ["payload"] * 3
        assert calls == 1
        assert statistics.metrics.coalesced_requests == 2
        assert len(flight) == 0

    @pytest.mark.asyncio
    async def test_distinct_keys_do_not_share(self) -> None:
        flight = SingleFlight()
        calls: list[str] = []

        async def fetch(key: str) -> str:
            calls.append(key)
            await asyncio.sleep(0)
            return key

        results = await asyncio.gather(
            flight.do("a", lambda: fetch("a")),
            flight.do("b", lambda: fetch("b")),
        )

        assert results == ["a", "b"]
        assert sorted(calls) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_error_reaches_every_waiter(self) -> None:
        flight = SingleFlight()

        async def fail() -> None:
            await asyncio.sleep(0)
            raise RuntimeError("upstream broke")

        results = await asyncio.gather(
            flight.do("k", fail),
            flight.do("k", fail),
            return_exceptions=True,
        )

        assert all(isinstance(r, RuntimeError) for r in results)
        assert len(flight) == 0

    @pytest.mark.asyncio
    async def test_cancelled_waiter_does_not_abort_call(self) -> None:
        # Given
        flight = SingleFlight()
        release = asyncio.Event()
        finished = asyncio.Event()

        async def fetch() -> str:
            await release.wait()
            finished.set()
            return "done"

        first = asyncio.ensure_future(flight.do("k", fetch))
        second = asyncio.ensure_future(flight.do("k", fetch))
        await asyncio.sleep(0)

        # When: the first caller goes away
        first.cancel()
        await asyncio.sleep(0)
        release.set()

        # Then
        assert await second == "done"
        assert finished.is_set()
        assert first.cancelled()

    @pytest.mark.asyncio
    async def test_key_is_released_after_completion(self) -> None:
        flight = SingleFlight()
        calls = 0

        async def fetch() -> int:
            nonlocal calls
            calls += 1
            return calls

        assert await flight.do("k", fetch) == 1
        assert await flight.do("k", fetch) == 2

    @pytest.mark.asyncio
    async def test_disabled_runs_every_call(self) -> None:
        flight = SingleFlight(enabled=False)
        calls = 0

        async def fetch() -> None:
            nonlocal calls
            calls += 1
            await asyncio.sleep(0)

        await asyncio.gather(flight.do("k", fetch), flight.do("k", fetch))

        assert calls == 2
        assert len(flight) == 0

    @pytest.mark.asyncio
    async def test_disabled_cancelled_caller_does_not_abort_call(self) -> None:
        # Given
        flight = SingleFlight(enabled=False)
        release = asyncio.Event()
        finished = asyncio.Event()

        async def fetch() -> str:
            await release.wait()
            finished.set()
            return "done"

        caller = asyncio.ensure_future(flight.do("k", fetch))
        await asyncio.sleep(0)

        # When
        caller.cancel()
        await asyncio.sleep(0)
        release.set()

        # Then
        await asyncio.wait_for(finished.wait(), timeout=1)
        assert caller.cancelled()
        assert len(flight) == 0
