"""Application and logging configuration models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from tubevault.shared.constants import Application, Logging


class AppSettings(BaseModel):
    """Application-level settings."""

    name: str = Field(default=Application.NAME, description="Application name")
    version: str = Field(default=Application.VERSION, description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")


class LoggingSettings(BaseModel):
    """Logging configuration.

    ``file`` may be empty to disable the JSON file handler.
    """

    level: str = Field(default=Logging.DEFAULT_LEVEL, description="Logging level")
    file: str = Field(default="", description="JSON log file path (empty disables)")
    console_output: bool = Field(
        default=True,
        description="Use the rich console handler (False emits JSON on stderr)",
    )


__all__ = [
    "AppSettings",
    "LoggingSettings",
]
