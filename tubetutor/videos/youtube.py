"""YouTube Data API v3 helpers: video id parsing and metadata lookup."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import httpx

from tubetutor.config import load_settings
from tubetutor.errors import MalformedResponseError, ProviderUnavailableError

logger = logging.getLogger(__name__)

_VIDEO_ID_PATTERNS = [
    re.compile(r"(?:youtube\.com/watch\?(?:.*&)?v=|youtu\.be/)([^&\s?#/]+)", re.IGNORECASE),
    re.compile(r"youtube\.com/embed/([^&\s?#/]+)", re.IGNORECASE),
    re.compile(r"youtube\.com/v/([^&\s?#/]+)", re.IGNORECASE),
    re.compile(r"youtube\.com/shorts/([^&\s?#/]+)", re.IGNORECASE),
]


def extract_video_id(url: str) -> str | None:
    """Return the video id from a YouTube URL, or None if it is not one."""
    for pattern in _VIDEO_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def resolve_video_id(value: str) -> str:
    """Accept either a bare video id or a YouTube URL."""
    value = value.strip()
    return extract_video_id(value) or value


@dataclass
class VideoDetails:
    """Metadata for one YouTube video."""

    video_id: str
    title: str
    channel_id: str
    channel_title: str
    description: str
    published_at: str
    thumbnail_url: str | None = None
    view_count: str | None = None
    like_count: str | None = None
    duration: str | None = None

    @property
    def url(self) -> str:
        return f"https://www.youtube.com/watch?v={self.video_id}"

    @classmethod
    def from_api_item(cls, item: dict[str, Any]) -> VideoDetails:
        snippet = item["snippet"]
        thumbnails = snippet.get("thumbnails", {})
        thumbnail = thumbnails.get("medium") or thumbnails.get("default") or {}
        statistics = item.get("statistics", {})
        return cls(
            video_id=item["id"],
            title=snippet.get("title", ""),
            channel_id=snippet.get("channelId", ""),
            channel_title=snippet.get("channelTitle", ""),
            description=snippet.get("description", ""),
            published_at=snippet.get("publishedAt", ""),
            thumbnail_url=thumbnail.get("url"),
            view_count=statistics.get("viewCount"),
            like_count=statistics.get("likeCount"),
            duration=item.get("contentDetails", {}).get("duration"),
        )


async def fetch_video_details(
    video_ids: Iterable[str],
    *,
    api_key: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[VideoDetails]:
    """Fetch snippet, statistics and duration for several videos in one call.

    Returns an empty list when no YouTube API key is configured.

    Raises:
        ProviderUnavailableError: The API could not be reached or answered non-2xx.
        MalformedResponseError: The response body was not the expected shape.
    """
    cfg = load_settings()
    key = api_key if api_key is not None else cfg.youtube_api_key
    if not key:
        logger.warning("YouTube API key not found in environment variables")
        return []

    unique_ids = list(dict.fromkeys(v for v in video_ids if v))
    if not unique_ids:
        return []

    try:
        async with httpx.AsyncClient(timeout=cfg.http_timeout, transport=transport) as client:
            response = await client.get(
                f"{cfg.youtube_api_base_url.rstrip('/')}/videos",
                params={
                    "part": "snippet,statistics,contentDetails",
                    "id": ",".join(unique_ids),
                    "key": key,
                },
            )
            response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise ProviderUnavailableError(
            f"YouTube API error: {exc.response.status_code}"
        ) from exc
    except httpx.HTTPError as exc:
        raise ProviderUnavailableError(f"YouTube API request failed: {exc}") from exc

    try:
        items = response.json().get("items") or []
        return [VideoDetails.from_api_item(item) for item in items]
    except (ValueError, KeyError, AttributeError, TypeError) as exc:
        raise MalformedResponseError(f"Unexpected YouTube API response: {exc}") from exc
