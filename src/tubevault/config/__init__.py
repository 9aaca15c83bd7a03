"""TubeVault Configuration Module

Unified access to configuration models and settings management:
- Settings: Main configuration facade
- Loader functions: get_config, load_settings, reload_config
- Domain models: App, Logging, API (YouTube, OpenAI), Cache settings
"""

from __future__ import annotations

from .models import (
    APISettings,
    AppSettings,
    CacheSettings,
    LoggingSettings,
    OpenAISettings,
    Settings,
    YouTubeSettings,
)
from .loader import get_config, load_settings, reload_config

__all__ = [
    "APISettings",
    "AppSettings",
    "CacheSettings",
    "LoggingSettings",
    "OpenAISettings",
    "Settings",
    "YouTubeSettings",
    "get_config",
    "load_settings",
    "reload_config",
]
