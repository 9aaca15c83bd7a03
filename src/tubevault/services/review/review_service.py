"""Channel review cache service.

Second instance of the cache pattern: LOOKUP by channel id (reviews never
expire) -> HIT: bump stats and return -> MISS: prompt the provider, strip
code fences, parse, validate, persist unconditionally and return.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from tubevault.core.statistics import StatisticsCollector
from tubevault.services.cache_models import ReviewCacheEntry
from tubevault.services.review.prompts import (
    build_messages,
    build_review_prompt,
    strip_code_fence,
)
from tubevault.services.review.review_client import ReviewClient
from tubevault.services.review.review_models import ChannelReview, ReviewOutcome
from tubevault.shared.constants import ReviewConfig, ReviewStatsKeys
from tubevault.shared.errors import create_parsing_error
from tubevault.shared.logging import log_operation_success

if TYPE_CHECKING:
    from tubevault.services.sqlite_cache_db import SQLiteCacheDB

logger = logging.getLogger(__name__)

REVIEW_CACHE_TYPE = "review"


def parse_review(content: str, channel_id: str | None = None) -> ChannelReview:
    """Parse a provider response into a ChannelReview.

    Raises:
        TubeVaultParsingError: If the text is not JSON after fence stripping
            or does not match the review schema
    """
    cleaned = strip_code_fence(content)
    additional_data = {"channel_id": channel_id or "", "preview": cleaned[:100]}

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise create_parsing_error(
            f"Channel review response is not valid JSON: {e.msg}",
            operation="parse_review",
            additional_data=additional_data,
            original_error=e,
        ) from e

    try:
        return ChannelReview.model_validate(data)
    except ValidationError as e:
        raise create_parsing_error(
            f"Channel review response does not match the review schema: {e.error_count()} error(s)",
            operation="parse_review",
            additional_data=additional_data,
            original_error=e,
        ) from e


class ReviewCacheAdmin:
    """Statistics and clearing of the review cache.

    Args:
        cache: SQLite store holding the review table
        cost_per_call: Estimated USD cost of one provider call
    """

    def __init__(
        self,
        cache: SQLiteCacheDB,
        cost_per_call: float = ReviewConfig.COST_PER_CALL,
    ) -> None:
        self.cache = cache
        self.cost_per_call = cost_per_call

    def get_cache_stats(self) -> dict[str, Any]:
        """Aggregate review cache statistics with estimated costs.

        Every stored review cost one provider call; every hit saved one.
        """
        total_entries, total_hits = self.cache.get_review_stats()
        total_api_calls = total_entries
        total_requests = total_api_calls + total_hits
        hit_rate = (total_hits / total_requests) * 100 if total_requests > 0 else 0.0

        return {
            ReviewStatsKeys.TOTAL_CACHE_ENTRIES: total_entries,
            ReviewStatsKeys.TOTAL_CACHE_HITS: total_hits,
            ReviewStatsKeys.TOTAL_API_CALLS: total_api_calls,
            ReviewStatsKeys.TOTAL_REQUESTS: total_requests,
            ReviewStatsKeys.CACHE_HIT_RATE: round(hit_rate, 1),
            ReviewStatsKeys.COST_SAVED: round(total_hits * self.cost_per_call, 3),
            ReviewStatsKeys.COST_SPENT: round(total_api_calls * self.cost_per_call, 3),
        }

    def clear_cached_review(self, channel_id: str) -> int:
        """Delete the cached review of one channel (e.g. to re-test a prompt)."""
        return self.cache.clear_review(channel_id)

    def clear_all(self) -> int:
        """Delete every cached review (e.g. after a prompt change)."""
        return self.cache.clear_all_reviews()


class ChannelReviewService(ReviewCacheAdmin):
    """Cache-first LLM review of YouTube channels.

    Args:
        cache: SQLite store holding the review table
        client: Review client used on misses
        statistics: Session telemetry collector
        cost_per_call: Estimated USD cost of one provider call
    """

    def __init__(
        self,
        cache: SQLiteCacheDB,
        client: ReviewClient,
        statistics: StatisticsCollector | None = None,
        cost_per_call: float = ReviewConfig.COST_PER_CALL,
    ) -> None:
        super().__init__(cache, cost_per_call)
        self.client = client
        self.statistics = statistics or StatisticsCollector()

    async def review_channel(
        self,
        channel_id: str,
        channel_title: str,
        description: str | None = None,
        subscriber_count: int | None = None,
        recent_video_titles: Sequence[str] = (),
    ) -> ReviewOutcome:
        """Return the cached review of a channel, generating it on a miss.

        Args:
            channel_id: YouTube channel id (the cache key)
            channel_title: Channel name
            description: Channel description
            subscriber_count: Subscriber count, if known
            recent_video_titles: Recent upload titles; at most 20 are sent

        Returns:
            ReviewOutcome; ``cache_hit_count`` is the reuse count including
            this hit, or 0 for a fresh review

        Raises:
            TubeVaultParsingError: If the provider response cannot be parsed
            InfrastructureError: If the provider call or the store fails
        """
        cached = self.cache.lookup_review(channel_id)
        if cached is not None and cached.id is not None:
            self.cache.record_review_hit(cached.id)
            self.statistics.record_cache_hit(REVIEW_CACHE_TYPE)
            logger.info("Review cache HIT for %s (%s)", channel_title, channel_id)
            return ReviewOutcome(
                review=cached.review,
                from_cache=True,
                cache_hit_count=cached.times_reused + 1,
            )

        self.statistics.record_cache_miss(REVIEW_CACHE_TYPE)
        logger.info("Review cache MISS for %s (%s)", channel_title, channel_id)

        started = time.perf_counter()
        prompt = build_review_prompt(
            channel_title,
            description=description,
            subscriber_count=subscriber_count,
            recent_video_titles=recent_video_titles,
        )

        success = False
        try:
            content = await self.client.complete(build_messages(prompt), channel_id=channel_id)
            success = True
        finally:
            self.statistics.record_api_call(
                "chat.completions",
                success=success,
                duration=time.perf_counter() - started,
            )

        review = parse_review(content, channel_id)

        self.cache.insert_review(
            ReviewCacheEntry(
                channel_id=channel_id,
                channel_title=channel_title,
                description=description,
                subscriber_count=subscriber_count,
                review=review,
            )
        )

        log_operation_success(
            logger=logger,
            operation="review_channel",
            duration_ms=(time.perf_counter() - started) * 1000,
            result_info={"recommendation": review.recommendation},
            context={"channel_id": channel_id},
        )
        return ReviewOutcome(review=review, from_cache=False, cache_hit_count=0)


__all__ = ["ChannelReviewService", "ReviewCacheAdmin", "parse_review"]
