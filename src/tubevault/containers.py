"""Dependency Injection container for TubeVault.

The container manages:
- Settings (Singleton)
- The SQLite cache store shared by both caches (Singleton)
- Session statistics (Singleton)
- YouTube and review clients
- The catalog service (Singleton), the channel review service and their
  admin surfaces
"""

from __future__ import annotations

from dependency_injector import containers, providers

from tubevault.config.loader import load_settings
from tubevault.core.statistics import StatisticsCollector
from tubevault.services.catalog_cache import CatalogCacheAdmin, CatalogCacheService
from tubevault.services.review.review_client import ReviewClient
from tubevault.services.review.review_service import ChannelReviewService, ReviewCacheAdmin
from tubevault.services.sqlite_cache_db import SQLiteCacheDB
from tubevault.services.youtube.youtube_client import YouTubeClient


class Container(containers.DeclarativeContainer):
    """Dependency Injection container for TubeVault services.

    Example:
        >>> container = Container()
        >>> catalog = container.catalog_service()
        >>> outcome = await catalog.search_videos("dinosaurs", 20)
    """

    # Configuration
    config = providers.Singleton(load_settings)

    statistics = providers.Singleton(StatisticsCollector)

    # One connection serves both cache tables
    cache_db = providers.Singleton(
        SQLiteCacheDB,
        db_path=providers.Callable(lambda config: config.cache.db_path, config=config),
    )

    youtube_client = providers.Factory(
        YouTubeClient,
        settings=providers.Callable(lambda config: config.api.youtube, config=config),
        statistics=statistics,
        batch_size=providers.Callable(lambda config: config.cache.detail_batch_size, config=config),
    )

    review_client = providers.Factory(
        ReviewClient,
        settings=providers.Callable(lambda config: config.api.openai, config=config),
    )

    # Maintenance surfaces need no API keys
    catalog_admin = providers.Factory(
        CatalogCacheAdmin,
        cache=cache_db,
        settings=providers.Callable(lambda config: config.cache, config=config),
        statistics=statistics,
    )

    review_admin = providers.Factory(
        ReviewCacheAdmin,
        cache=cache_db,
        cost_per_call=providers.Callable(lambda config: config.api.openai.cost_per_call, config=config),
    )

    # One instance per process so concurrent misses share its single-flight map
    catalog_service = providers.Singleton(
        CatalogCacheService,
        cache=cache_db,
        client=youtube_client,
        settings=providers.Callable(lambda config: config.cache, config=config),
        statistics=statistics,
    )

    review_service = providers.Factory(
        ChannelReviewService,
        cache=cache_db,
        client=review_client,
        statistics=statistics,
        cost_per_call=providers.Callable(lambda config: config.api.openai.cost_per_call, config=config),
    )
