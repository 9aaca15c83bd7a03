"""YouTube Data API v3 client.

Wraps the three upstream call shapes the catalog cache needs: entity search,
batch entity detail lookup and paginated playlist enumeration.

Transient upstream failures never raise. Every call returns a
``CatalogResult``: a structured error whose first reason is ``quotaExceeded``
becomes ``QuotaExceeded``; anything else (error bodies, non-JSON bodies,
transport failures) becomes ``UpstreamError``. The batch detail helpers go
one step further and swallow failures entirely, since enrichment is optional.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import requests

from tubevault.config.loader import get_config
from tubevault.config.models.api_settings import YouTubeSettings
from tubevault.core.statistics import StatisticsCollector
from tubevault.shared.constants import (
    SearchFilter,
    VideoSearchParams,
    YouTubeConfig,
    YouTubeEndpoints,
    YouTubeFields,
    YouTubeKind,
    YouTubeMessages,
    YouTubeParts,
)
from tubevault.shared.errors import create_missing_api_key_error
from tubevault.shared.logging import log_api_call

from .results import CatalogResult, CatalogSuccess, QuotaExceeded, UpstreamError
from .youtube_models import as_mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollectionListing:
    """Items collected from a paginated playlist."""

    items: list[dict[str, Any]] = field(default_factory=list)
    total_count: int = 0
    pages: int = 0


def _chunks(ids: Sequence[str], size: int) -> list[list[str]]:
    return [list(ids[i : i + size]) for i in range(0, len(ids), size)]


def classify_error_body(error: Any, status_code: int | None = None) -> QuotaExceeded | UpstreamError:
    """Turn a YouTube ``error`` object into a soft-failure value.

    Args:
        error: The ``error`` member of a response body
        status_code: HTTP status of the response, if known

    Returns:
        QuotaExceeded if the first listed reason is ``quotaExceeded``,
        UpstreamError carrying the upstream message otherwise
    """
    if isinstance(error, dict):
        errors = error.get(YouTubeFields.ERRORS) or []
        first = errors[0] if isinstance(errors, list) and errors else {}
        if isinstance(first, dict) and first.get(YouTubeFields.REASON) == YouTubeFields.QUOTA_EXCEEDED_REASON:
            return QuotaExceeded(YouTubeMessages.QUOTA_EXCEEDED)
        message = error.get(YouTubeFields.MESSAGE) or YouTubeMessages.UNKNOWN_ERROR
    else:
        message = str(error) if error else YouTubeMessages.UNKNOWN_ERROR

    return UpstreamError(
        YouTubeMessages.API_ERROR.format(message=message),
        status_code=status_code,
    )


class YouTubeClient:
    """YouTube Data API client returning typed soft-failure results.

    Blocking ``requests`` calls are run in a worker thread so the client can
    be awaited from the orchestrator's coroutines. Calls within one
    operation are sequential.

    Args:
        settings: YouTube API settings (defaults to the global configuration)
        session: requests session to use (created if omitted)
        statistics: Collector that counts upstream calls and failures
        batch_size: Ids per batch detail request (upstream limit: 50)

    Raises:
        SecurityError: If no API key is configured
    """

    def __init__(
        self,
        settings: YouTubeSettings | None = None,
        session: requests.Session | None = None,
        statistics: StatisticsCollector | None = None,
        batch_size: int = YouTubeConfig.MAX_BATCH_IDS,
    ) -> None:
        self.settings = settings or get_config().api.youtube
        if not self.settings.api_key:
            raise create_missing_api_key_error(
                YouTubeConfig.API_KEY_ENV,
                operation="youtube_client_init",
            )

        self.session = session or requests.Session()
        self.statistics = statistics or StatisticsCollector()
        self.batch_size = min(batch_size, YouTubeConfig.MAX_BATCH_IDS)

        logger.debug("YouTube client initialized (base_url=%s)", self.settings.base_url)

    async def _request(self, endpoint: str, params: dict[str, str]) -> CatalogResult[dict[str, Any]]:
        return await asyncio.to_thread(self._request_sync, endpoint, params)

    def _request_sync(self, endpoint: str, params: dict[str, str]) -> CatalogResult[dict[str, Any]]:
        """Perform one GET and classify the outcome.

        The API key is added here and never logged.
        """
        url = f"{self.settings.base_url}/{endpoint}"
        log_context = {k: v for k, v in params.items() if k != "key"}
        started = time.monotonic()

        try:
            response = self.session.get(
                url,
                params={**params, "key": self.settings.api_key},
                timeout=self.settings.timeout,
            )
        except requests.RequestException as e:
            duration = time.monotonic() - started
            self.statistics.record_api_call(endpoint, success=False, duration=duration)
            self.statistics.record_upstream_error()
            logger.warning("YouTube %s request failed: %s", endpoint, e)
            return UpstreamError(YouTubeMessages.API_ERROR.format(message=str(e)))

        duration = time.monotonic() - started
        status_code = response.status_code
        log_api_call(
            logger,
            endpoint=endpoint,
            method="GET",
            status_code=status_code,
            duration_ms=duration * 1000,
            context=log_context,
        )

        try:
            data = response.json()
        except ValueError:
            self.statistics.record_api_call(endpoint, success=False, duration=duration)
            self.statistics.record_upstream_error()
            return UpstreamError(
                YouTubeMessages.API_ERROR.format(message=f"non-JSON response (HTTP {status_code})"),
                status_code=status_code,
            )

        if not isinstance(data, dict):
            self.statistics.record_api_call(endpoint, success=False, duration=duration)
            self.statistics.record_upstream_error()
            return UpstreamError(
                YouTubeMessages.API_ERROR.format(message="unexpected response shape"),
                status_code=status_code,
            )

        error = data.get(YouTubeFields.ERROR)
        if error or status_code >= 400:
            self.statistics.record_api_call(endpoint, success=False, duration=duration)
            failure = classify_error_body(error or f"HTTP {status_code}", status_code)
            if isinstance(failure, QuotaExceeded):
                self.statistics.record_quota_error()
                logger.warning("YouTube quota exceeded on %s", endpoint)
            else:
                self.statistics.record_upstream_error()
                logger.warning("YouTube %s error: %s", endpoint, failure.message)
            return failure

        self.statistics.record_api_call(endpoint, success=True, duration=duration)
        return CatalogSuccess(data)

    async def search(
        self,
        query: str,
        kind: str,
        max_results: int,
        duration: str | None = None,
        channel_id: str | None = None,
    ) -> CatalogResult[list[dict[str, Any]]]:
        """Entity search returning lightweight stubs (id + snippet).

        Video searches always carry the fixed quality parameters (strict
        safe search, relevance order, embeddable only, region and language
        bias). ``duration`` is sent only when it is one of short, medium or
        long; ``channel_id`` restricts a video search to one channel.

        Args:
            query: Free-text query as typed by the user
            kind: "channel" or "video"
            max_results: Number of stubs to request
            duration: Optional video duration class
            channel_id: Optional channel restriction

        Returns:
            CatalogResult wrapping the list of search items
        """
        if kind not in (YouTubeKind.CHANNEL, YouTubeKind.VIDEO):
            msg = f"Unsupported search kind: {kind}"
            raise ValueError(msg)

        params = {
            "part": YouTubeParts.SNIPPET,
            "type": kind,
            "q": query,
            "maxResults": str(max_results),
        }

        if kind == YouTubeKind.VIDEO:
            params.update(
                {
                    "safeSearch": VideoSearchParams.SAFE_SEARCH,
                    "order": VideoSearchParams.ORDER,
                    "videoEmbeddable": VideoSearchParams.EMBEDDABLE,
                    "regionCode": self.settings.region_code,
                    "relevanceLanguage": self.settings.relevance_language,
                }
            )
            if duration:
                if duration in SearchFilter.VALID_DURATIONS:
                    params["videoDuration"] = duration
                else:
                    logger.info("Ignoring unknown video duration filter: %s", duration)
            if channel_id:
                params["channelId"] = channel_id

        result = await self._request(YouTubeEndpoints.SEARCH, params)
        if not isinstance(result, CatalogSuccess):
            return result

        items = result.value.get(YouTubeFields.ITEMS) or []
        if not isinstance(items, list):
            return CatalogSuccess([])
        return CatalogSuccess([item for item in items if isinstance(item, dict)])

    async def _get_details(self, endpoint: str, part: str, ids: Sequence[str]) -> list[dict[str, Any]]:
        """Fetch detail records in batches, swallowing failures per batch."""
        details: list[dict[str, Any]] = []

        for batch in _chunks([i for i in ids if i], self.batch_size):
            result = await self._request(endpoint, {"part": part, "id": ",".join(batch)})
            if not isinstance(result, CatalogSuccess):
                logger.warning(
                    "Enrichment skipped for %d %s: %s",
                    len(batch),
                    endpoint,
                    result.message,
                )
                continue

            items = result.value.get(YouTubeFields.ITEMS) or []
            if not isinstance(items, list):
                logger.warning("Enrichment skipped for %d %s: malformed items", len(batch), endpoint)
                continue

            details.extend(item for item in items if isinstance(item, dict))

        return details

    async def get_channel_details(self, channel_ids: Sequence[str]) -> list[dict[str, Any]]:
        """Batch-fetch channel records (snippet, statistics, contentDetails).

        Failed or malformed batches are logged and contribute nothing.
        """
        return await self._get_details(YouTubeEndpoints.CHANNELS, YouTubeParts.CHANNEL_DETAILS, channel_ids)

    async def get_video_details(self, video_ids: Sequence[str]) -> list[dict[str, Any]]:
        """Batch-fetch video records (snippet, contentDetails, status, statistics).

        Failed or malformed batches are logged and contribute nothing.
        """
        return await self._get_details(YouTubeEndpoints.VIDEOS, YouTubeParts.VIDEO_DETAILS, video_ids)

    async def get_uploads_collection_id(self, channel_id: str) -> CatalogResult[str | None]:
        """Resolve the uploads playlist id of a channel.

        Returns:
            CatalogSuccess with the playlist id, or with None if the channel
            does not exist or has no uploads playlist
        """
        result = await self._request(
            YouTubeEndpoints.CHANNELS,
            {"part": YouTubeParts.CHANNEL_CONTENT, "id": channel_id},
        )
        if not isinstance(result, CatalogSuccess):
            return result

        items = result.value.get(YouTubeFields.ITEMS) or []
        if not isinstance(items, list) or not items:
            return CatalogSuccess(None)

        content = as_mapping(as_mapping(items[0]).get(YouTubeFields.CONTENT_DETAILS))
        uploads = as_mapping(content.get("relatedPlaylists")).get("uploads")
        return CatalogSuccess(uploads if isinstance(uploads, str) and uploads else None)

    async def enumerate_collection(
        self,
        collection_id: str,
        max_items: int,
        page_size: int = YouTubeConfig.MAX_PAGE_SIZE,
    ) -> CatalogResult[CollectionListing]:
        """Collect playlist items, following ``nextPageToken``.

        Stops when the token is exhausted or ``max_items`` have been
        collected; the result is truncated to ``max_items``. Any failed page
        aborts the whole enumeration so a partial listing is never returned.

        Args:
            collection_id: Playlist id
            max_items: Upper bound on collected items
            page_size: Items requested per page (upstream limit: 50)

        Returns:
            CatalogResult wrapping the collected items and total count
        """
        page_size = min(page_size, YouTubeConfig.MAX_PAGE_SIZE)
        items: list[dict[str, Any]] = []
        total_count = 0
        pages = 0
        page_token: str | None = None

        while True:
            params = {
                "part": YouTubeParts.SNIPPET,
                "playlistId": collection_id,
                "maxResults": str(min(page_size, max_items - len(items))),
            }
            if page_token:
                params["pageToken"] = page_token

            result = await self._request(YouTubeEndpoints.PLAYLIST_ITEMS, params)
            if not isinstance(result, CatalogSuccess):
                logger.warning(
                    "Enumeration of %s aborted after %d page(s): %s",
                    collection_id,
                    pages,
                    result.message,
                )
                return result

            pages += 1
            data = result.value
            page_items = data.get(YouTubeFields.ITEMS) or []
            if isinstance(page_items, list):
                items.extend(item for item in page_items if isinstance(item, dict))
            page_token = data.get(YouTubeFields.NEXT_PAGE_TOKEN) or None
            reported = as_mapping(data.get(YouTubeFields.PAGE_INFO)).get(YouTubeFields.TOTAL_RESULTS)
            total_count = reported if isinstance(reported, int) and reported else len(items)

            if len(items) >= max_items:
                items = items[:max_items]
                break
            if not page_token:
                break

        logger.debug(
            "Enumerated %d item(s) of %s in %d page(s)",
            len(items),
            collection_id,
            pages,
        )
        return CatalogSuccess(CollectionListing(items=items, total_count=total_count, pages=pages))

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()


__all__ = ["CollectionListing", "YouTubeClient", "classify_error_body"]
