"""TubeVault Settings Configuration Model.

Main Settings class that consolidates all configuration domains.
"""

from __future__ import annotations

import logging
from pathlib import Path

import toml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from tubevault.config.models.api_settings import APISettings
from tubevault.config.models.app_settings import AppSettings, LoggingSettings
from tubevault.config.models.cache_settings import CacheSettings
from tubevault.shared.errors import create_config_error

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Settings facade providing unified configuration access.

    Environment variables override file values, e.g.
    ``TUBEVAULT_CACHE__DB_PATH`` or ``TUBEVAULT_API__YOUTUBE__TIMEOUT``.
    """

    model_config = SettingsConfigDict(
        env_prefix="TUBEVAULT_",
        env_nested_delimiter="__",
        env_ignore_empty=True,
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    api: APISettings = Field(default_factory=APISettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)

    @classmethod
    def from_toml_file(cls, file_path: str | Path) -> Settings:
        """Load settings from TOML file with environment variable overrides.

        Raises:
            FileNotFoundError: If the file does not exist
            ApplicationError: If the file is not valid TOML or fails validation
        """
        file_path = Path(file_path)
        if not file_path.exists():
            msg = f"Configuration file not found: {file_path}"
            raise FileNotFoundError(msg)

        try:
            raw_config = toml.load(file_path)
        except toml.TomlDecodeError as e:
            raise create_config_error(
                f"Invalid TOML in {file_path.name}: {e}",
                operation="load_config",
                original_error=e,
            ) from e

        try:
            settings = cls(**raw_config)
        except ValidationError as e:
            raise create_config_error(
                f"Invalid configuration in {file_path.name}: {e.error_count()} error(s)",
                config_key=".".join(str(part) for part in e.errors()[0]["loc"]),
                operation="load_config",
                original_error=e,
            ) from e

        logger.debug("Loaded configuration from %s", file_path)
        return settings

    def to_toml_file(self, file_path: str | Path) -> None:
        """Save settings to TOML file.

        API keys are written to the file; logs see them masked via __repr__.
        """
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = self.model_dump(exclude_none=True, exclude_unset=False)

        with open(file_path, "w", encoding="utf-8") as f:
            toml.dump(config_dict, f)


__all__ = ["Settings"]
