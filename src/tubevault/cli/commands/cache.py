"""Cache command implementation.

``tubevault cache stats|clear|purge`` inspect and maintain the catalog
cache. Expired entries are only deleted by ``purge``.
"""

from __future__ import annotations

from typing import Any

import typer
from dependency_injector.wiring import Provide, inject
from rich.console import Console
from rich.table import Table

from tubevault.cli.common.context import get_cli_context
from tubevault.cli.common.error_handler import handle_cli_error
from tubevault.cli.json_formatter import format_json_output, write_json_output
from tubevault.containers import Container
from tubevault.services.catalog_cache import CatalogCacheAdmin
from tubevault.shared.constants import CLICommands, CLIHelp, SearchType, StatsKeys

console = Console()

cache_app = typer.Typer(name=CLICommands.CACHE, help=CLIHelp.CACHE_HELP, no_args_is_help=True)


@inject
def get_catalog_admin(
    admin: CatalogCacheAdmin = Provide[Container.catalog_admin],
) -> CatalogCacheAdmin:
    """Catalog cache admin injected from the DI container."""
    return admin


def _command(name: str) -> str:
    return f"{CLICommands.CACHE} {name}"


def _print_deleted(command: str, deleted: int, action: str, **fields: Any) -> None:
    if get_cli_context().json_output:
        write_json_output(
            format_json_output(success=True, command=command, data={"deleted": deleted, **fields})
        )
    else:
        console.print(f"[green]{action}: {deleted} entr{'y' if deleted == 1 else 'ies'}[/green]")


@cache_app.command(CLICommands.STATS)
def stats_command() -> None:
    """Show catalog cache statistics."""
    command = _command(CLICommands.STATS)
    json_output = get_cli_context().json_output

    try:
        stats = get_catalog_admin().get_cache_stats()
    except Exception as e:  # noqa: BLE001
        raise typer.Exit(handle_cli_error(e, command, json_output=json_output)) from e

    if json_output:
        write_json_output(format_json_output(success=True, command=command, data=stats))
        return

    console.print("[blue]Catalog Cache Statistics[/blue]")

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Total Entries", str(stats[StatsKeys.TOTAL_ENTRIES]))
    table.add_row("Valid Entries", str(stats[StatsKeys.VALID_ENTRIES]))
    table.add_row("Expired Entries", str(stats[StatsKeys.EXPIRED_ENTRIES]))
    table.add_row("Total Reuses", str(stats[StatsKeys.TOTAL_REUSES]))
    for search_type, count in stats[StatsKeys.BY_TYPE].items():
        table.add_row(f"  {search_type}", str(count))

    console.print(table)


@cache_app.command(CLICommands.CLEAR)
def clear_command(
    search_type: SearchType | None = typer.Option(None, "--type", "-t", help=CLIHelp.SEARCH_TYPE_HELP),
    query: str | None = typer.Option(None, "--query", "-q", help=CLIHelp.CLEAR_QUERY_HELP),
    max_results: int | None = typer.Option(None, "--max-results", "-n", min=1, help=CLIHelp.MAX_RESULTS_HELP),
    channel_id: str | None = typer.Option(None, "--channel", help=CLIHelp.CHANNEL_ID_HELP),
    clear_all: bool = typer.Option(False, "--all", help=CLIHelp.CLEAR_ALL_HELP),
    yes: bool = typer.Option(False, "--yes", "-y", help=CLIHelp.YES_HELP),
) -> None:
    """
    Clear one cache key, one search type or the whole catalog cache.

    Examples:
        tubevault cache clear --type videos --query "cats|duration:short"
        tubevault cache clear --type channelVideos --channel UC123
        tubevault cache clear --type channels --all
        tubevault cache clear --all --yes
    """
    command = _command(CLICommands.CLEAR)
    json_output = get_cli_context().json_output

    if clear_all and search_type is None and not yes and not json_output:
        typer.confirm("Delete every catalog cache entry?", abort=True)

    try:
        admin = get_catalog_admin()
        if clear_all and search_type is None:
            deleted = admin.clear_all()
        elif clear_all:
            deleted = admin.clear_search_type(search_type)
        elif search_type is None:
            raise typer.BadParameter("--type is required unless --all is given", param_hint="--type")
        else:
            deleted = admin.clear_entry(search_type, query, max_results, channel_id)
    except typer.BadParameter:
        raise
    except Exception as e:  # noqa: BLE001
        raise typer.Exit(handle_cli_error(e, command, json_output=json_output)) from e

    _print_deleted(
        command,
        deleted,
        "Cleared",
        search_type=search_type.value if search_type else None,
    )


@cache_app.command(CLICommands.PURGE)
def purge_command() -> None:
    """Delete expired catalog cache entries."""
    command = _command(CLICommands.PURGE)
    json_output = get_cli_context().json_output

    try:
        purged = get_catalog_admin().purge_expired()
    except Exception as e:  # noqa: BLE001
        raise typer.Exit(handle_cli_error(e, command, json_output=json_output)) from e

    _print_deleted(command, purged, "Purged expired")
