"""Search commands.

``tubevault search channels|videos|channel-videos`` run the cache-first
catalog operations and print the results as a rich table or JSON envelope.
Soft failures (quota, upstream) print the error and exit non-zero.
"""

from __future__ import annotations

import asyncio
from typing import Any

import typer
from dependency_injector.wiring import Provide, inject
from rich.console import Console
from rich.table import Table

from tubevault.cli.common.context import get_cli_context
from tubevault.cli.common.error_handler import handle_cli_error
from tubevault.cli.json_formatter import format_json_output, write_json_output
from tubevault.containers import Container
from tubevault.services.catalog_cache import (
    CatalogCacheService,
    ChannelVideosOutcome,
    SearchOutcome,
)
from tubevault.services.youtube.youtube_models import ChannelResult, VideoResult
from tubevault.shared.constants import CLICommands, CLIExitCodes, CLIHelp, YouTubeMessages

console = Console()

search_app = typer.Typer(name=CLICommands.SEARCH, help=CLIHelp.SEARCH_HELP, no_args_is_help=True)


@inject
def get_catalog_service(
    service: CatalogCacheService = Provide[Container.catalog_service],
) -> CatalogCacheService:
    """Catalog service injected from the DI container."""
    return service


async def _run(service: CatalogCacheService, operation: str, **kwargs: Any) -> Any:
    try:
        return await getattr(service, operation)(**kwargs)
    finally:
        service.client.close()


def _execute(command: str, operation: str, **kwargs: Any) -> Any:
    json_output = get_cli_context().json_output
    try:
        service = get_catalog_service()
        return asyncio.run(_run(service, operation, **kwargs))
    except (Exception, KeyboardInterrupt) as e:  # noqa: BLE001
        raise typer.Exit(handle_cli_error(e, command, json_output=json_output)) from e


def _format_count(value: int | None) -> str:
    return f"{value:,}" if value is not None else "-"


def _format_duration(seconds: int) -> str:
    minutes, secs = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def _cache_label(from_cache: bool, times_reused: int) -> str:
    if from_cache:
        return f"[green]cache hit[/green] (reused {times_reused}x)"
    return "[yellow]fetched from YouTube[/yellow]"


def _channel_table(channels: list[ChannelResult]) -> Table:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Channel ID", style="cyan")
    table.add_column("Title", style="green")
    table.add_column("Subscribers", justify="right")
    table.add_column("Videos", justify="right")
    for channel in channels:
        table.add_row(
            channel.channel_id,
            channel.channel_title,
            _format_count(channel.subscriber_count),
            _format_count(channel.video_count),
        )
    return table


def _video_table(videos: list[VideoResult]) -> Table:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Video ID", style="cyan")
    table.add_column("Title", style="green")
    table.add_column("Channel")
    table.add_column("Duration", justify="right")
    table.add_column("Views", justify="right")
    table.add_column("Playable")
    for video in videos:
        table.add_row(
            video.video_id,
            video.title,
            video.channel_title,
            _format_duration(video.duration_seconds),
            _format_count(video.view_count),
            "yes" if video.playable else f"[red]{video.unplayable_reason}[/red]",
        )
    return table


def _finish(command: str, outcome: SearchOutcome[Any] | ChannelVideosOutcome, table: Table) -> None:
    """Print an outcome and exit non-zero on a soft failure."""
    json_output = get_cli_context().json_output

    if json_output:
        write_json_output(
            format_json_output(
                success=outcome.error is None,
                command=command,
                data=outcome,
                errors=[outcome.error] if outcome.error else None,
            )
        )
    elif outcome.error:
        console.print(f"[red]{outcome.error}[/red]")
    else:
        console.print(table)
        console.print(_cache_label(outcome.from_cache, outcome.times_reused))

    if outcome.error:
        exit_code = (
            CLIExitCodes.QUOTA_EXCEEDED
            if outcome.error == YouTubeMessages.QUOTA_EXCEEDED
            else CLIExitCodes.ERROR
        )
        raise typer.Exit(exit_code)


@search_app.command(CLICommands.CHANNELS)
def search_channels_command(
    query: str = typer.Argument(..., help=CLIHelp.QUERY_HELP),
    max_results: int | None = typer.Option(None, "--max-results", "-n", min=1, help=CLIHelp.MAX_RESULTS_HELP),
    force_refresh: bool = typer.Option(False, "--force-refresh", help=CLIHelp.FORCE_REFRESH_HELP),
) -> None:
    """
    Search YouTube channels.

    Examples:
        tubevault search channels "science for kids"
        tubevault --json search channels dinosaurs -n 5
    """
    command = f"{CLICommands.SEARCH} {CLICommands.CHANNELS}"
    outcome = _execute(
        command,
        "search_channels",
        query=query,
        max_results=max_results,
        force_refresh=force_refresh,
    )
    _finish(command, outcome, _channel_table(outcome.results))


@search_app.command(CLICommands.VIDEOS)
def search_videos_command(
    query: str = typer.Argument(..., help=CLIHelp.QUERY_HELP),
    max_results: int | None = typer.Option(None, "--max-results", "-n", min=1, help=CLIHelp.MAX_RESULTS_HELP),
    duration: str | None = typer.Option(None, "--duration", help=CLIHelp.DURATION_HELP),
    channel_id: str | None = typer.Option(None, "--channel", help=CLIHelp.CHANNEL_FILTER_HELP),
    force_refresh: bool = typer.Option(False, "--force-refresh", help=CLIHelp.FORCE_REFRESH_HELP),
) -> None:
    """
    Search YouTube videos with playability details.

    Examples:
        tubevault search videos dinosaurs -n 20
        tubevault search videos cats --duration short
    """
    command = f"{CLICommands.SEARCH} {CLICommands.VIDEOS}"
    outcome = _execute(
        command,
        "search_videos",
        query=query,
        max_results=max_results,
        force_refresh=force_refresh,
        duration=duration,
        channel_id=channel_id,
    )
    _finish(command, outcome, _video_table(outcome.results))


@search_app.command(CLICommands.CHANNEL_VIDEOS)
def channel_videos_command(
    channel_id: str = typer.Argument(..., help=CLIHelp.CHANNEL_ID_HELP),
    max_videos: int | None = typer.Option(None, "--max-videos", "-n", min=1, help=CLIHelp.MAX_VIDEOS_HELP),
    force_refresh: bool = typer.Option(False, "--force-refresh", help=CLIHelp.FORCE_REFRESH_HELP),
) -> None:
    """
    List a channel's uploads.

    Examples:
        tubevault search channel-videos UC123 --max-videos 100
    """
    command = f"{CLICommands.SEARCH} {CLICommands.CHANNEL_VIDEOS}"
    outcome = _execute(
        command,
        "get_channel_videos",
        channel_id=channel_id,
        max_videos=max_videos,
        force_refresh=force_refresh,
    )
    table = _video_table(outcome.videos)
    table.caption = f"{len(outcome.videos)} of {outcome.total_results} uploads"
    _finish(command, outcome, table)
