"""
Statistics Collection Module

Session telemetry for the catalog cache and the review cache: hits, misses,
upstream calls, soft failures and coalesced requests.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class CacheMetrics:
    """Container for cache and upstream metrics."""

    cache_hits: int = 0
    cache_misses: int = 0

    api_calls: int = 0
    api_errors: int = 0
    api_time: float = 0.0
    quota_errors: int = 0
    upstream_errors: int = 0

    coalesced_requests: int = 0

    @property
    def cache_hit_ratio(self) -> float:
        total = self.cache_hits + self.cache_misses
        return self.cache_hits / total if total > 0 else 0.0


class StatisticsCollector:
    """Central aggregator for cache and upstream telemetry."""

    def __init__(self) -> None:
        """Initialize the statistics collector."""
        self.metrics = CacheMetrics()
        self.session_start = datetime.now(timezone.utc)
        self.hits_by_type: dict[str, int] = defaultdict(int)
        self.misses_by_type: dict[str, int] = defaultdict(int)
        self.calls_by_endpoint: dict[str, int] = defaultdict(int)

        logger.debug("StatisticsCollector initialized")

    def record_cache_hit(self, cache_type: str) -> None:
        """Record a cache hit.

        Args:
            cache_type: Search type or "review"
        """
        self.metrics.cache_hits += 1
        self.hits_by_type[cache_type] += 1
        logger.debug("Recorded cache hit for type: %s", cache_type)

    def record_cache_miss(self, cache_type: str) -> None:
        """Record a cache miss.

        Args:
            cache_type: Search type or "review"
        """
        self.metrics.cache_misses += 1
        self.misses_by_type[cache_type] += 1
        logger.debug("Recorded cache miss for type: %s", cache_type)

    def record_api_call(
        self,
        endpoint: str,
        success: bool,
        duration: float | None = None,
    ) -> None:
        """Record an upstream API call.

        Args:
            endpoint: API endpoint called
            success: Whether the call was successful
            duration: Duration of the call in seconds
        """
        self.metrics.api_calls += 1
        self.calls_by_endpoint[endpoint] += 1

        if not success:
            self.metrics.api_errors += 1

        if duration is not None:
            self.metrics.api_time += duration

        logger.debug(
            "Recorded API call: %s, success=%s, duration=%s",
            endpoint,
            success,
            duration,
        )

    def record_quota_error(self) -> None:
        """Record an upstream quota-exceeded soft failure."""
        self.metrics.quota_errors += 1
        logger.debug("Recorded quota error")

    def record_upstream_error(self) -> None:
        """Record a generic upstream soft failure."""
        self.metrics.upstream_errors += 1
        logger.debug("Recorded upstream error")

    def record_coalesced_request(self, key: str) -> None:
        """Record a request that joined an in-flight miss instead of calling upstream."""
        self.metrics.coalesced_requests += 1
        logger.debug("Recorded coalesced request for key: %s", key)

    def get_cache_hit_ratio(self) -> float:
        """Get the session cache hit ratio (0.0-1.0)."""
        return self.metrics.cache_hit_ratio

    def get_summary(self) -> dict[str, Any]:
        """Get a summary of the session statistics.

        Returns:
            Dictionary containing summary statistics
        """
        session_duration = (datetime.now(timezone.utc) - self.session_start).total_seconds()

        return {
            "start_time": self.session_start.isoformat(),
            "duration_seconds": session_duration,
            "cache_hits": self.metrics.cache_hits,
            "cache_misses": self.metrics.cache_misses,
            "cache_hit_ratio": self.metrics.cache_hit_ratio,
            "api_calls": self.metrics.api_calls,
            "api_errors": self.metrics.api_errors,
            "api_time": self.metrics.api_time,
            "quota_errors": self.metrics.quota_errors,
            "upstream_errors": self.metrics.upstream_errors,
            "coalesced_requests": self.metrics.coalesced_requests,
            "hits_by_type": dict(self.hits_by_type),
            "misses_by_type": dict(self.misses_by_type),
            "calls_by_endpoint": dict(self.calls_by_endpoint),
        }

    def reset(self) -> None:
        """Reset all collected statistics."""
        self.metrics = CacheMetrics()
        self.session_start = datetime.now(timezone.utc)
        self.hits_by_type.clear()
        self.misses_by_type.clear()
        self.calls_by_endpoint.clear()

        logger.info("StatisticsCollector reset")


__all__ = ["CacheMetrics", "StatisticsCollector"]
