"""
CLI Context Management Module

Global CLI state parsed by the main callback and read by every command:
- log_level: Logging level (enum-based)
- json_output: JSON output mode (bool)
"""

from __future__ import annotations

import contextvars
from enum import Enum

from pydantic import BaseModel, Field


class LogLevel(str, Enum):
    """Log level enumeration for type safety."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class CliContext(BaseModel):
    """CLI context model for managing global state.

    Attributes:
        verbose: Verbosity level (0 = normal, 1+ = verbose)
        log_level: Logging level
        json_output: Whether to output in JSON format
    """

    verbose: int = Field(default=0, ge=0, description="Verbosity level")
    log_level: LogLevel = Field(default=LogLevel.WARNING, description="Logging level")
    json_output: bool = Field(default=False, description="Whether to output in JSON format")

    def get_effective_log_level(self) -> str:
        """Log level after the verbose override (verbose forces DEBUG)."""
        if self.verbose > 0:
            return LogLevel.DEBUG.value
        return self.log_level.value


cli_context_var: contextvars.ContextVar[CliContext | None] = contextvars.ContextVar(
    "cli_context",
    default=None,
)


def get_cli_context() -> CliContext:
    """Return the current CLI context, or the defaults if none was set."""
    context = cli_context_var.get()
    if context is None:
        return CliContext()
    return context


def set_cli_context(context: CliContext) -> None:
    cli_context_var.set(context)


def clear_cli_context() -> None:
    cli_context_var.set(None)
