"""Tests for the dependency injection container."""

from __future__ import annotations

from collections.abc import Generator

import pytest
from dependency_injector import providers

from tubevault.config.models.api_settings import APISettings, YouTubeSettings
from tubevault.config.models.cache_settings import CacheSettings
from tubevault.config.models.settings import Settings
from tubevault.containers import Container


@pytest.fixture
def configured() -> Generator[Container, None, None]:
    """Fresh container with a YouTube key and an in-memory store."""
    container = Container()
    container.config.override(
        providers.Object(
            Settings(
                api=APISettings(youtube=YouTubeSettings(api_key="test-key")),
                cache=CacheSettings(db_path=":memory:"),
            )
        )
    )

    yield container

    container.catalog_service().client.close()
    container.cache_db().close()
    container.reset_override()


class TestContainer:
    """Test provider scopes."""

    def test_catalog_service_is_process_wide(self, configured: Container) -> None:
        # When
        first = configured.catalog_service()
        second = configured.catalog_service()

        # Then: both resolutions coalesce through the same in-flight map
        assert first is second
        assert first.flight is second.flight

    def test_services_share_store_and_statistics(self, configured: Container) -> None:
        catalog = configured.catalog_service()
        admin = configured.catalog_admin()

        assert catalog.cache is admin.cache is configured.cache_db()
        assert catalog.statistics is admin.statistics is configured.statistics()
