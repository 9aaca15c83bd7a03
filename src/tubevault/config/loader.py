"""Settings loader and singleton manager.

This module handles:
- Environment variable loading from .env files (python-dotenv)
- Configuration file loading from TOML
- Thread-safe singleton pattern for the Settings instance
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path

from dotenv import load_dotenv

from tubevault.config.models.settings import Settings
from tubevault.shared.constants import FileSystem, ReviewConfig, YouTubeConfig
from tubevault.shared.errors import ErrorCode, ErrorContext, InfrastructureError

logger = logging.getLogger(__name__)


class SettingsLoader:
    """Thread-safe singleton manager for Settings.

    Uses double-checked locking to ensure thread-safety while minimizing
    lock overhead.
    """

    _instance: Settings | None = None
    _lock: threading.RLock = threading.RLock()

    def get_config(self) -> Settings:
        """Get the global settings instance, loading it if necessary."""
        if self._instance is None:
            with self._lock:
                if self._instance is None:
                    self._instance = load_settings()

        return self._instance

    def reload_config(self, config_path: str | Path | None = None) -> Settings:
        """Reload the global settings instance from configuration files."""
        with self._lock:
            self._instance = load_settings(config_path)

        return self._instance


def _load_env_file(env_file: Path = Path(".env")) -> None:
    """Load environment variables from a .env file if one exists.

    Variables already present in the process environment win.

    Raises:
        InfrastructureError: If the .env file exists but cannot be read
    """
    if not env_file.exists():
        return

    try:
        load_dotenv(env_file, override=False)
    except (OSError, UnicodeDecodeError) as e:
        raise InfrastructureError(
            code=ErrorCode.FILE_READ_ERROR,
            message=f"Failed to read .env file: {e}",
            context=ErrorContext(
                operation="load_env",
                additional_data={"file_name": env_file.name},
            ),
            original_error=e,
        ) from e


def _apply_api_key_env(settings: Settings) -> Settings:
    """Fill empty API keys from the conventional environment variables."""
    youtube_key = os.getenv(YouTubeConfig.API_KEY_ENV, "").strip()
    if not settings.api.youtube.api_key and youtube_key:
        settings.api.youtube.api_key = youtube_key

    openai_key = os.getenv(ReviewConfig.API_KEY_ENV, "").strip()
    if not settings.api.openai.api_key and openai_key:
        settings.api.openai.api_key = openai_key

    return settings


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from a TOML configuration file or the environment.

    Args:
        config_path: Optional path to a TOML file. If None, the default
            locations are tried before falling back to environment variables.

    Returns:
        Settings instance loaded from the specified source

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
    """
    _load_env_file()

    if config_path:
        return _apply_api_key_env(Settings.from_toml_file(config_path))

    default_config_paths = [
        Path("config") / FileSystem.CONFIG_FILE,
        Path(FileSystem.CONFIG_FILE),
        Path.home() / FileSystem.HOME_DIR / FileSystem.CONFIG_FILE,
    ]

    for default_path in default_config_paths:
        if default_path.exists():
            return _apply_api_key_env(Settings.from_toml_file(default_path))

    logger.debug("No configuration file found, using environment and defaults")
    return _apply_api_key_env(Settings())


_loader = SettingsLoader()


def get_config() -> Settings:
    """Get the global settings instance (thread-safe)."""
    return _loader.get_config()


def reload_config(config_path: str | Path | None = None) -> Settings:
    """Reload the global settings instance from configuration files."""
    return _loader.reload_config(config_path)


__all__ = [
    "SettingsLoader",
    "get_config",
    "load_settings",
    "reload_config",
]
