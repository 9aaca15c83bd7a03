"""
TubeVault Constants Module

Centralized constants for TubeVault. Magic values shared by the cache,
the YouTube client, the review service and the CLI live here.
"""

from .cache import (
    CacheDefaults,
    CacheTTL,
    ReviewStatsKeys,
    SearchFilter,
    SearchType,
    StatsKeys,
)
from .cli import CLICommands, CLIExitCodes, CLIHelp
from .review import ReviewConfig, ReviewPrompts, ReviewValues
from .system import (
    BASE_HOUR_MS,
    BASE_MINUTE_MS,
    BASE_SECOND_MS,
    Application,
    FileSystem,
    Logging,
)
from .youtube import (
    VideoSearchParams,
    YouTubeConfig,
    YouTubeEndpoints,
    YouTubeFields,
    YouTubeKind,
    YouTubeMessages,
    YouTubeParts,
)

__all__ = [
    "BASE_HOUR_MS",
    "BASE_MINUTE_MS",
    "BASE_SECOND_MS",
    "Application",
    "CLICommands",
    "CLIExitCodes",
    "CLIHelp",
    "CacheDefaults",
    "CacheTTL",
    "FileSystem",
    "Logging",
    "ReviewConfig",
    "ReviewPrompts",
    "ReviewStatsKeys",
    "ReviewValues",
    "SearchFilter",
    "SearchType",
    "StatsKeys",
    "VideoSearchParams",
    "YouTubeConfig",
    "YouTubeEndpoints",
    "YouTubeFields",
    "YouTubeKind",
    "YouTubeMessages",
    "YouTubeParts",
]
