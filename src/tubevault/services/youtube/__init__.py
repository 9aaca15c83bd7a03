"""YouTube Data API service module.

This module provides the YouTube client, its typed results and the
enriched result models stored in the catalog cache.
"""

from .results import CatalogError, CatalogResult, CatalogSuccess, QuotaExceeded, UpstreamError
from .youtube_client import CollectionListing, YouTubeClient, classify_error_body
from .youtube_models import ChannelResult, ChannelVideosPayload, VideoResult

__all__ = [
    "CatalogError",
    "CatalogResult",
    "CatalogSuccess",
    "ChannelResult",
    "ChannelVideosPayload",
    "CollectionListing",
    "QuotaExceeded",
    "UpstreamError",
    "VideoResult",
    "YouTubeClient",
    "classify_error_body",
]
