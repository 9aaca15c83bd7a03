"""
TubeVault Typer CLI Application

Main entry point of the ``tubevault`` command. The main callback parses the
global options, configures logging and stores the CLI context; the command
groups live in ``tubevault.cli.commands``.
"""

from __future__ import annotations

from typing import Annotated

import typer

from tubevault.cli.commands import cache, review, search
from tubevault.cli.common.context import CliContext, LogLevel, set_cli_context
from tubevault.cli.common.error_handler import handle_cli_error
from tubevault.cli.common.options import (
    json_output_option,
    log_level_option,
    verbose_option,
    version_option,
)
from tubevault.containers import Container
from tubevault.shared.constants import CLIHelp
from tubevault.shared.logging import setup_structured_logger

container = Container()
container.wire(modules=[cache, review, search])


def main_callback(
    verbose: int,
    log_level: LogLevel | None,
    json_output: bool,
) -> None:
    """Set up the CLI context and logging before any command runs.

    Options given on the command line win over the logging configuration;
    ``app.debug`` forces DEBUG like ``-v``.

    Args:
        verbose: Verbosity level (count-based)
        log_level: Logging level, or None to use the configured level
        json_output: Whether to output in JSON format
    """
    settings = container.config()
    if settings.app.debug:
        verbose = max(verbose, 1)

    context = CliContext(
        verbose=verbose,
        log_level=log_level or LogLevel(settings.logging.level.upper()),
        json_output=json_output,
    )
    set_cli_context(context)

    setup_structured_logger(
        level=context.get_effective_log_level(),
        log_file=settings.logging.file or None,
        use_rich_console=settings.logging.console_output and not json_output,
    )


app = typer.Typer(
    name=CLIHelp.APP_NAME,
    help=CLIHelp.APP_DESCRIPTION,
    rich_markup_mode=CLIHelp.APP_STYLE,
    no_args_is_help=True,
)
app.add_typer(search.search_app)
app.add_typer(cache.cache_app)
app.add_typer(review.review_app)


@app.callback()
def main(
    verbose: Annotated[int, verbose_option] = 0,
    log_level: Annotated[LogLevel | None, log_level_option] = None,
    json_output: Annotated[bool, json_output_option] = False,
    version: Annotated[bool, version_option] = False,  # noqa: ARG001  handled by version_callback
) -> None:
    """TubeVault - YouTube catalog cache and channel review tool."""
    try:
        main_callback(verbose, log_level, json_output)
    except Exception as e:  # noqa: BLE001
        exit_code = handle_cli_error(e, "main-callback", json_output=json_output)
        raise typer.Exit(exit_code) from e


if __name__ == "__main__":
    app()
