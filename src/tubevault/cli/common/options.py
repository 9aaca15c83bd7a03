"""
Reusable Typer Options Module

Options shared by the main callback: verbosity, log level, JSON output and
version.
"""

from __future__ import annotations

import typer

from tubevault import __version__
from tubevault.cli.common.context import LogLevel
from tubevault.shared.constants import CLIHelp


def version_callback(value: bool) -> None:
    """Print version information and exit."""
    if value:
        typer.echo(CLIHelp.VERSION_TEXT.format(version=__version__))
        raise typer.Exit


verbose_option = typer.Option(
    "--verbose",
    "-v",
    count=True,
    help="Enable verbose output (equivalent to --log-level DEBUG).",
)

log_level_option = typer.Option(
    "--log-level",
    case_sensitive=False,
    help=(
        "Set the logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). "
        "Default: logging.level from the configuration (WARNING)."
    ),
)

json_output_option = typer.Option(
    "--json",
    help="Enable machine-readable JSON output instead of human-readable format.",
)

version_option = typer.Option(
    "--version",
    "-V",
    help="Show version information and exit.",
    callback=version_callback,
    is_eager=True,
)

__all__ = [
    "json_output_option",
    "log_level_option",
    "verbose_option",
    "version_callback",
    "version_option",
]
