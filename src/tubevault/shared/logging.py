"""
Structured logging for TubeVault.

Helpers in this module attach operation names, context dictionaries and
timings to log records so that the JSON formatter (file output) and the
rich console handler (interactive output) can both render them.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

from tubevault.shared.errors import ErrorContext, TubeVaultError


class StructuredFormatter(logging.Formatter):
    """Formatter that renders log records as one JSON object per line.

    Structured ``extra`` fields set by the helpers below are copied through
    when present on the record.
    """

    EXTRA_FIELDS: tuple[str, ...] = (
        "error_code",
        "operation",
        "context",
        "duration_ms",
        "result_info",
    )

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        log_entry: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in self.EXTRA_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def _create_rich_console() -> Console:
    """Create the rich console used by the interactive log handler."""
    custom_theme = Theme(
        {
            "logging.level.debug": "cyan",
            "logging.level.info": "green",
            "logging.level.warning": "yellow",
            "logging.level.error": "red bold",
            "logging.level.critical": "red bold reverse",
            "log.time": "dim cyan",
            "log.message": "white",
            "log.path": "dim blue",
        }
    )
    return Console(theme=custom_theme, stderr=True)


def setup_structured_logger(
    name: str = "tubevault",
    level: str = "INFO",
    log_file: str | None = None,
    *,
    use_rich_console: bool = True,
) -> logging.Logger:
    """Configure the package logger.

    Args:
        name: Logger name (default: "tubevault")
        level: Log level name (default: "INFO")
        log_file: Optional path of a JSON log file
        use_rich_console: Use the rich console handler instead of JSON on stderr

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        logger.handlers.clear()

    log_level = getattr(logging, level.upper())
    logger.setLevel(log_level)

    if use_rich_console:
        handler: logging.Handler = RichHandler(
            console=_create_rich_console(),
            show_time=True,
            show_level=True,
            show_path=True,
            markup=False,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            log_time_format="[%H:%M:%S]",
        )
        handler.setLevel(log_level)
        logger.addHandler(handler)
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)

    # File output is always JSON
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def _context_to_dict(context: dict[str, Any] | ErrorContext | None) -> dict[str, Any]:
    if context is None:
        return {}
    if isinstance(context, ErrorContext):
        return context.safe_dict()
    return dict(context)


def log_operation_error(
    logger: logging.Logger,
    error: TubeVaultError,
    operation: str | None = None,
    additional_context: dict[str, Any] | ErrorContext | None = None,
) -> None:
    """Log a TubeVaultError with its structured context.

    Args:
        logger: Logger instance
        error: The error to log
        operation: Operation name (defaults to the error context's operation)
        additional_context: Extra context merged over the error's own context
    """
    context_dict: dict[str, Any] = {}

    if error.context:
        context_dict.update(error.context.safe_dict())

    context_dict.update(_context_to_dict(additional_context))

    logger.error(
        error.message,
        extra={
            "error_code": error.code.name,
            "context": context_dict,
            "operation": operation or error.context.operation,
        },
        exc_info=error.original_error is not None,
    )


def log_operation_success(
    logger: logging.Logger,
    operation: str,
    duration_ms: float,
    result_info: dict[str, Any] | None = None,
    context: dict[str, Any] | ErrorContext | None = None,
) -> None:
    """Log the successful completion of an operation.

    Args:
        logger: Logger instance
        operation: Operation name
        duration_ms: Elapsed time in milliseconds
        result_info: Optional result summary
        context: Optional context
    """
    logger.debug(
        "Operation '%s' completed successfully",
        operation,
        extra={
            "operation": operation,
            "duration_ms": duration_ms,
            "result_info": result_info or {},
            "context": _context_to_dict(context),
        },
    )


def log_operation_start(
    logger: logging.Logger,
    operation: str,
    context: dict[str, Any] | None = None,
) -> None:
    """Log the start of an operation."""
    logger.debug(
        "Starting operation '%s'",
        operation,
        extra={
            "operation": operation,
            "context": context or {},
        },
    )


def log_api_call(
    logger: logging.Logger,
    endpoint: str,
    method: str = "GET",
    status_code: int | None = None,
    duration_ms: float | None = None,
    context: dict[str, Any] | None = None,
) -> None:
    """Log an upstream API call.

    Args:
        logger: Logger instance
        endpoint: API endpoint
        method: HTTP method (default: "GET")
        status_code: HTTP status code, if a response was received
        duration_ms: Elapsed time in milliseconds
        context: Extra context
    """
    api_context: dict[str, Any] = {
        "endpoint": endpoint,
        "method": method,
    }

    if status_code:
        api_context["status_code"] = status_code
    if duration_ms:
        api_context["duration_ms"] = duration_ms
    if context:
        api_context.update(context)

    level = logging.DEBUG
    message = f"API call to {endpoint}"

    if status_code:
        if status_code >= 400:
            level = logging.WARNING
            message += f" failed with status {status_code}"
        else:
            message += f" succeeded with status {status_code}"

    logger.log(
        level,
        message,
        extra={
            "operation": "api_call",
            "context": api_context,
        },
    )


__all__ = [
    "StructuredFormatter",
    "log_api_call",
    "log_operation_error",
    "log_operation_start",
    "log_operation_success",
    "setup_structured_logger",
]
