"""
CLI Error Handling Utilities

Consistent error output and exit codes across commands. TubeVault errors
keep their error code; anything else is reported as an unexpected error.
"""

from __future__ import annotations

import logging
from typing import Any

import typer

from tubevault.cli.json_formatter import format_json_output, write_json_output
from tubevault.shared.constants import CLIExitCodes
from tubevault.shared.errors import (
    DomainError,
    ErrorCode,
    InfrastructureError,
    SecurityError,
    TubeVaultError,
)

logger = logging.getLogger(__name__)


def _describe(error: BaseException) -> tuple[str, str]:
    """Map an exception to (error code, user-facing message)."""
    if isinstance(error, KeyboardInterrupt):
        return ErrorCode.CLI_UNEXPECTED_ERROR.value, "Command interrupted by user"
    if isinstance(error, SecurityError):
        return error.code.value, f"Configuration error: {error.message}"
    if isinstance(error, DomainError):
        return error.code.value, f"Invalid input: {error.message}"
    if isinstance(error, InfrastructureError):
        return error.code.value, f"Infrastructure error: {error.message}"
    if isinstance(error, TubeVaultError):
        return error.code.value, error.message
    if isinstance(error, ValueError):
        return ErrorCode.VALIDATION_ERROR.value, f"Invalid input: {error}"
    return ErrorCode.CLI_UNEXPECTED_ERROR.value, f"Unexpected error: {error}"


def handle_cli_error(
    error: BaseException,
    command: str,
    *,
    json_output: bool = False,
) -> int:
    """Report a command failure and return the exit code.

    Args:
        error: The exception that occurred
        command: The CLI command being executed
        json_output: Whether to output JSON format

    Returns:
        Exit code for the CLI command
    """
    error_code, message = _describe(error)
    exit_code = CLIExitCodes.INTERRUPTED if isinstance(error, KeyboardInterrupt) else CLIExitCodes.ERROR

    context: dict[str, Any] = {
        "command": command,
        "error_type": type(error).__name__,
        "error_code": error_code,
    }
    if isinstance(error, (TubeVaultError, KeyboardInterrupt)):
        logger.warning("CLI error in %s: %s", command, message, extra={"context": context})
    else:
        logger.exception("CLI error in %s: %s", command, message, extra={"context": context})

    if json_output:
        write_json_output(
            format_json_output(
                success=False,
                command=command,
                errors=[message],
                data={"error_code": error_code, "error_type": type(error).__name__, "exit_code": exit_code},
            )
        )
    else:
        typer.echo(f"Error: {message}", err=True)

    return exit_code
