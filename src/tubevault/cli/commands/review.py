"""Review commands.

``tubevault review channel`` returns the cached review of a channel or
generates one; ``review stats`` and ``review clear`` manage the review cache.
"""

from __future__ import annotations

import asyncio

import typer
from dependency_injector.wiring import Provide, inject
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from tubevault.cli.common.context import get_cli_context
from tubevault.cli.common.error_handler import handle_cli_error
from tubevault.cli.json_formatter import format_json_output, write_json_output
from tubevault.containers import Container
from tubevault.services.review.review_models import ReviewOutcome
from tubevault.services.review.review_service import ChannelReviewService, ReviewCacheAdmin
from tubevault.shared.constants import CLICommands, CLIHelp, ReviewStatsKeys

console = Console()

review_app = typer.Typer(name=CLICommands.REVIEW, help=CLIHelp.REVIEW_HELP, no_args_is_help=True)


@inject
def get_review_service(
    service: ChannelReviewService = Provide[Container.review_service],
) -> ChannelReviewService:
    """Review service injected from the DI container."""
    return service


@inject
def get_review_admin(
    admin: ReviewCacheAdmin = Provide[Container.review_admin],
) -> ReviewCacheAdmin:
    """Review cache admin injected from the DI container."""
    return admin


def _command(name: str) -> str:
    return f"{CLICommands.REVIEW} {name}"


async def _review(
    channel_id: str,
    title: str,
    description: str | None,
    subscribers: int | None,
    recent_titles: list[str],
) -> ReviewOutcome:
    service = get_review_service()
    try:
        return await service.review_channel(
            channel_id,
            title,
            description=description,
            subscriber_count=subscribers,
            recent_video_titles=recent_titles,
        )
    finally:
        await service.client.close()


def _print_review(outcome: ReviewOutcome) -> None:
    review = outcome.review

    source = (
        f"[green]cached review (hit #{outcome.cache_hit_count})[/green]"
        if outcome.from_cache
        else "[yellow]fresh review[/yellow]"
    )
    console.print(Panel(review.summary, title=f"Recommendation: {review.recommendation}", subtitle=source))

    if review.age_recommendation:
        console.print(f"Age recommendation: {review.age_recommendation}")
    if review.content_categories:
        console.print(f"Categories: {', '.join(review.content_categories)}")

    if review.concerns:
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Category", style="cyan")
        table.add_column("Severity")
        table.add_column("Description")
        for concern in review.concerns:
            table.add_row(concern.category, concern.severity, concern.description)
        console.print(table)


@review_app.command(CLICommands.CHANNEL)
def review_channel_command(
    channel_id: str = typer.Argument(..., help=CLIHelp.CHANNEL_ID_HELP),
    title: str = typer.Option(..., "--title", help=CLIHelp.TITLE_HELP),
    description: str | None = typer.Option(None, "--description", help=CLIHelp.DESCRIPTION_HELP),
    subscribers: int | None = typer.Option(None, "--subscribers", min=0, help=CLIHelp.SUBSCRIBERS_HELP),
    recent_titles: list[str] = typer.Option([], "--recent-title", help=CLIHelp.RECENT_TITLE_HELP),
) -> None:
    """
    Review a channel for child-appropriateness.

    Examples:
        tubevault review channel UC123 --title "Dino Facts" --recent-title "T-Rex for kids"
    """
    command = _command(CLICommands.CHANNEL)
    json_output = get_cli_context().json_output

    try:
        outcome = asyncio.run(_review(channel_id, title, description, subscribers, recent_titles))
    except (Exception, KeyboardInterrupt) as e:  # noqa: BLE001
        raise typer.Exit(handle_cli_error(e, command, json_output=json_output)) from e

    if json_output:
        write_json_output(format_json_output(success=True, command=command, data=outcome))
    else:
        _print_review(outcome)


@review_app.command(CLICommands.STATS)
def review_stats_command() -> None:
    """Show review cache statistics and estimated costs."""
    command = _command(CLICommands.STATS)
    json_output = get_cli_context().json_output

    try:
        stats = get_review_admin().get_cache_stats()
    except Exception as e:  # noqa: BLE001
        raise typer.Exit(handle_cli_error(e, command, json_output=json_output)) from e

    if json_output:
        write_json_output(format_json_output(success=True, command=command, data=stats))
        return

    table = Table(show_header=True, header_style="bold magenta", title="Review Cache Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Cached Reviews", str(stats[ReviewStatsKeys.TOTAL_CACHE_ENTRIES]))
    table.add_row("Cache Hits", str(stats[ReviewStatsKeys.TOTAL_CACHE_HITS]))
    table.add_row("API Calls", str(stats[ReviewStatsKeys.TOTAL_API_CALLS]))
    table.add_row("Total Requests", str(stats[ReviewStatsKeys.TOTAL_REQUESTS]))
    table.add_row("Hit Rate", f"{stats[ReviewStatsKeys.CACHE_HIT_RATE]:.1f}%")
    table.add_row("Estimated Cost Saved", f"${stats[ReviewStatsKeys.COST_SAVED]:.3f}")
    table.add_row("Estimated Cost Spent", f"${stats[ReviewStatsKeys.COST_SPENT]:.3f}")

    console.print(table)


@review_app.command(CLICommands.CLEAR)
def review_clear_command(
    channel_id: str | None = typer.Argument(None, help=CLIHelp.REVIEW_CLEAR_HELP),
    clear_all: bool = typer.Option(False, "--all", help=CLIHelp.CLEAR_ALL_HELP),
    yes: bool = typer.Option(False, "--yes", "-y", help=CLIHelp.YES_HELP),
) -> None:
    """Delete the cached review of one channel, or every review with --all."""
    command = _command(CLICommands.CLEAR)
    json_output = get_cli_context().json_output

    if channel_id is None and not clear_all:
        raise typer.BadParameter("Give a channel id or --all", param_hint="CHANNEL_ID")
    if channel_id is None and not yes and not json_output:
        typer.confirm("Delete every cached review?", abort=True)

    try:
        admin = get_review_admin()
        deleted = admin.clear_cached_review(channel_id) if channel_id else admin.clear_all()
    except Exception as e:  # noqa: BLE001
        raise typer.Exit(handle_cli_error(e, command, json_output=json_output)) from e

    if json_output:
        write_json_output(
            format_json_output(success=True, command=command, data={"deleted": deleted, "channel_id": channel_id})
        )
    else:
        console.print(f"[green]Cleared {deleted} cached review(s)[/green]")
