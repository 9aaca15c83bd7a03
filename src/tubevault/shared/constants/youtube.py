"""
YouTube Data API Constants

Endpoint names, request parameters, response field names and the soft-failure
messages produced by the catalog client.
"""

from __future__ import annotations


class YouTubeConfig:
    """Transport configuration for the YouTube Data API v3."""

    BASE_URL = "https://www.googleapis.com/youtube/v3"
    API_KEY_ENV = "YOUTUBE_API_KEY"
    DEFAULT_TIMEOUT = 10
    MAX_BATCH_IDS = 50
    MAX_PAGE_SIZE = 50


class YouTubeEndpoints:
    """Relative endpoint paths."""

    SEARCH = "search"
    CHANNELS = "channels"
    VIDEOS = "videos"
    PLAYLIST_ITEMS = "playlistItems"


class YouTubeParts:
    """``part`` parameter values per endpoint."""

    SNIPPET = "snippet"
    CHANNEL_DETAILS = "snippet,statistics,contentDetails"
    CHANNEL_CONTENT = "contentDetails"
    VIDEO_DETAILS = "snippet,contentDetails,status,statistics"


class VideoSearchParams:
    """Fixed quality parameters applied to every video search."""

    SAFE_SEARCH = "strict"
    ORDER = "relevance"
    EMBEDDABLE = "true"
    REGION_CODE = "US"
    RELEVANCE_LANGUAGE = "en"


class YouTubeKind:
    """``type`` parameter values for the search endpoint."""

    CHANNEL = "channel"
    VIDEO = "video"


class YouTubeFields:
    """Response field names read by the client and the enricher."""

    ITEMS = "items"
    ID = "id"
    SNIPPET = "snippet"
    STATISTICS = "statistics"
    CONTENT_DETAILS = "contentDetails"
    STATUS = "status"
    NEXT_PAGE_TOKEN = "nextPageToken"
    PAGE_INFO = "pageInfo"
    TOTAL_RESULTS = "totalResults"
    ERROR = "error"
    ERRORS = "errors"
    REASON = "reason"
    MESSAGE = "message"
    QUOTA_EXCEEDED_REASON = "quotaExceeded"
    AGE_RESTRICTED_RATING = "ytAgeRestricted"
    THUMBNAIL_SIZES: tuple[str, ...] = ("high", "medium", "default")


class YouTubeMessages:
    """Soft-failure and classifier messages."""

    QUOTA_EXCEEDED = "YouTube API quota exceeded. Try again tomorrow."
    API_ERROR = "YouTube API error: {message}"
    UNKNOWN_ERROR = "Unknown error"
    VIDEO_NOT_FOUND = "Video not found"
    NOT_EMBEDDABLE = "Video cannot be embedded"
    AGE_RESTRICTED = "Age-restricted content"
    DEFAULT_DURATION = "PT0S"
