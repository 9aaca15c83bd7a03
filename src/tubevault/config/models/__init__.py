"""Configuration domain models."""

from __future__ import annotations

from .api_settings import APISettings, OpenAISettings, YouTubeSettings
from .app_settings import AppSettings, LoggingSettings
from .cache_settings import CacheSettings
from .settings import Settings

__all__ = [
    "APISettings",
    "AppSettings",
    "CacheSettings",
    "LoggingSettings",
    "OpenAISettings",
    "Settings",
    "YouTubeSettings",
]
