"""
CLI Constants

Command names, exit codes and help text of the ``tubevault`` command line.
"""

from __future__ import annotations

from typing import Literal


class CLICommands:
    """Command and command group names."""

    SEARCH = "search"
    CACHE = "cache"
    REVIEW = "review"

    # search group
    CHANNELS = "channels"
    VIDEOS = "videos"
    CHANNEL_VIDEOS = "channel-videos"

    # cache group
    STATS = "stats"
    CLEAR = "clear"
    PURGE = "purge"

    # review group
    CHANNEL = "channel"


class CLIExitCodes:
    """Process exit codes."""

    SUCCESS = 0
    ERROR = 1
    QUOTA_EXCEEDED = 2
    INTERRUPTED = 130


class CLIHelp:
    """CLI help text and descriptions."""

    VERSION_TEXT = "TubeVault CLI v{version}"

    APP_NAME = "tubevault"
    APP_DESCRIPTION = "TubeVault - YouTube catalog cache and channel review tool"
    APP_STYLE: Literal["rich"] = "rich"

    SEARCH_HELP = "Search YouTube through the catalog cache"
    CACHE_HELP = "Inspect and maintain the catalog cache"
    REVIEW_HELP = "Generate and manage cached channel reviews"

    QUERY_HELP = "Free-text search query"
    MAX_RESULTS_HELP = "Maximum number of results (default from configuration)"
    MAX_VIDEOS_HELP = "Maximum number of uploads to list (default from configuration)"
    FORCE_REFRESH_HELP = "Bypass the cache and refetch from YouTube"
    DURATION_HELP = "Duration filter: short, medium or long"
    CHANNEL_FILTER_HELP = "Restrict the search to one channel id"
    CHANNEL_ID_HELP = "YouTube channel id"

    SEARCH_TYPE_HELP = "Search type: channels, videos or channelVideos"
    CLEAR_QUERY_HELP = "Cache key of the entry, filter suffixes included (e.g. 'cats|duration:short')"
    CLEAR_ALL_HELP = "Clear every entry of the given type, or the whole cache without a type"
    YES_HELP = "Do not ask for confirmation"

    TITLE_HELP = "Channel title"
    DESCRIPTION_HELP = "Channel description"
    SUBSCRIBERS_HELP = "Subscriber count"
    RECENT_TITLE_HELP = "Recent upload title (repeatable)"
    REVIEW_CLEAR_HELP = "Channel id whose review to delete; omit with --all to clear every review"
