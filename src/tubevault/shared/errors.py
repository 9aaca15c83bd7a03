"""Error types raised by TubeVault.

Quota exhaustion and generic upstream failures of the YouTube API are not
exceptions: they travel as result values (``tubevault.services.youtube.results``)
so a search can degrade instead of crash. Everything in this module is
meant to reach the caller: a broken cache database, a provider transport
failure, an unparseable review, a bad configuration file.

Each error carries an ``ErrorCode`` and an ``ErrorContext`` whose extra
data is restricted to primitives, so ``to_dict()`` can go straight into a
log record or the CLI JSON envelope.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Union

PrimitiveContextValue = Union[str, int, float, bool]

# Context keys whose values never leave the process unredacted
REDACTED_KEYS: frozenset[str] = frozenset({"api_key", "key", "authorization", "token"})
REDACTED_VALUE = "***"


class ErrorCode(str, Enum):
    """Stable identifiers for every failure TubeVault reports."""

    # Upstream APIs (YouTube Data API, LLM provider)
    API_REQUEST_FAILED = "API_REQUEST_FAILED"
    API_TIMEOUT = "API_TIMEOUT"
    API_AUTHENTICATION_FAILED = "API_AUTHENTICATION_FAILED"

    # SQLite cache
    CACHE_ERROR = "CACHE_ERROR"
    CACHE_READ_FAILED = "CACHE_READ_FAILED"
    CACHE_WRITE_FAILED = "CACHE_WRITE_FAILED"
    CACHE_INIT_FAILED = "CACHE_INIT_FAILED"

    VALIDATION_ERROR = "VALIDATION_ERROR"
    PARSING_ERROR = "PARSING_ERROR"

    # Configuration
    CONFIG_ERROR = "CONFIG_ERROR"
    MISSING_CONFIG = "MISSING_CONFIG"
    INVALID_CONFIG = "INVALID_CONFIG"

    FILE_READ_ERROR = "FILE_READ_ERROR"

    CLI_UNEXPECTED_ERROR = "CLI_UNEXPECTED_ERROR"


def _to_primitive(key: str, value: Any) -> PrimitiveContextValue:
    if isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    raise TypeError(
        f"Context value for {key!r} must be a primitive, Path or Enum, "
        f"got {type(value).__name__}"
    )


@dataclass(frozen=True)
class ErrorContext:
    """Where an error happened and the primitive facts around it.

    Attributes:
        operation: Name of the failing operation (e.g. ``search_videos``)
        additional_data: Extra facts; Path and Enum values are converted,
            anything else non-primitive raises TypeError
    """

    operation: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        if self.additional_data is None:
            return
        if not isinstance(self.additional_data, dict):
            raise TypeError(
                f"additional_data must be dict, got {type(self.additional_data).__name__}"
            )
        coerced = {k: _to_primitive(k, v) for k, v in self.additional_data.items()}
        object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self) -> dict[str, Any]:
        """Context as a dict with credential values redacted.

        Example:
            >>> ErrorContext("search", {"api_key": "AIza", "query": "cats"}).safe_dict()
            {'operation': 'search', 'additional_data': {'api_key': '***', 'query': 'cats'}}
        """
        data: dict[str, Any] = {}
        if self.operation is not None:
            data["operation"] = self.operation
        data["additional_data"] = {
            k: REDACTED_VALUE if k.lower() in REDACTED_KEYS else v
            for k, v in (self.additional_data or {}).items()
        }
        return data


class TubeVaultError(Exception):
    """Base exception class for all TubeVault errors.

    Args:
        code: Error code from ErrorCode enum
        message: Human-readable error message
        context: Additional context information
        original_error: Original exception that caused this error
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error

        super().__init__(f"{code.value}: {message}")

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Serializable form used by the logging helpers and the CLI."""
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(TubeVaultError):
    """A request TubeVault refuses: unknown search type, invalid filter, bad count."""


class InfrastructureError(TubeVaultError):
    """The cache database or the LLM provider transport failed."""


class TubeVaultParsingError(DomainError):
    """A generative-review response is not JSON after code fence stripping,
    or does not match the review schema."""


class ApplicationError(TubeVaultError):
    """Configuration or command handling failed."""


class SecurityError(TubeVaultError):
    """A required API key is missing or rejected."""


def create_validation_error(
    message: str,
    field: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> DomainError:
    """Create a validation error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"field": field} if field else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return DomainError(
        ErrorCode.VALIDATION_ERROR,
        message,
        context,
        original_error,
    )


def create_parsing_error(
    message: str,
    operation: str | None = None,
    additional_data: dict[str, PrimitiveContextValue] | None = None,
    original_error: Exception | None = None,
) -> TubeVaultParsingError:
    """Create a parsing error with context."""
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return TubeVaultParsingError(
        ErrorCode.PARSING_ERROR,
        message,
        context,
        original_error,
    )


def create_missing_api_key_error(
    env_var: str,
    operation: str | None = None,
) -> SecurityError:
    """Create the error raised when an upstream API key is not configured."""
    context = ErrorContext(
        operation=operation,
        additional_data={"env_var": env_var},
    )
    return SecurityError(
        ErrorCode.MISSING_CONFIG,
        f"{env_var} not configured. Set it in the environment or .env file.",
        context,
    )


def create_config_error(
    message: str,
    config_key: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> ApplicationError:
    """Create a configuration error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"config_key": config_key} if config_key else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return ApplicationError(
        ErrorCode.CONFIG_ERROR,
        message,
        context,
        original_error,
    )


__all__ = [
    "ApplicationError",
    "DomainError",
    "ErrorCode",
    "ErrorContext",
    "InfrastructureError",
    "PrimitiveContextValue",
    "SecurityError",
    "TubeVaultError",
    "TubeVaultParsingError",
    "create_config_error",
    "create_missing_api_key_error",
    "create_parsing_error",
    "create_validation_error",
]
