"""Transcript providers: the YouTube caption track and the Supadata API.

Both implement :class:`TranscriptProvider`: ``retrieve`` returns whatever the
provider sends back and ``normalize`` turns that payload into one string.
"""

from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

import httpx
from youtube_transcript_api import (
    CouldNotRetrieveTranscript,
    NoTranscriptFound,
    TranscriptsDisabled,
    YouTubeTranscriptApi,
)

from tubetutor.config import load_settings, supadata_key_configured
from tubetutor.errors import (
    CredentialMissingError,
    EmptyTranscriptError,
    MalformedResponseError,
    ProviderUnavailableError,
)
from tubetutor.transcripts.models import TranscriptSource

logger = logging.getLogger(__name__)


class TranscriptProvider(ABC):
    """A source of transcript text for a video id."""

    source: TranscriptSource

    @abstractmethod
    async def retrieve(self, video_id: str) -> Any:
        """Fetch the provider's raw payload for ``video_id``."""

    @abstractmethod
    def normalize(self, raw: Any) -> str:
        """Turn a raw payload into the transcript text stored in an entry."""

    async def fetch_text(self, video_id: str) -> str:
        text = self.normalize(await self.retrieve(video_id))
        if not text.strip():
            raise EmptyTranscriptError(f"No transcript found for video {video_id}")
        return text


class YouTubeCaptionProvider(TranscriptProvider):
    """Primary provider: the video's own caption track."""

    source = TranscriptSource.PRIMARY

    def __init__(self, api: Any = None, languages: Sequence[str] | None = None) -> None:
        self._api = api if api is not None else YouTubeTranscriptApi()
        self._languages = list(languages or load_settings().transcript_languages)

    async def retrieve(self, video_id: str) -> Any:
        # youtube-transcript-api is synchronous; keep it off the event loop.
        try:
            return await asyncio.to_thread(self._api.fetch, video_id, languages=self._languages)
        except (TranscriptsDisabled, NoTranscriptFound) as exc:
            raise EmptyTranscriptError(f"No transcript found for video {video_id}") from exc
        except CouldNotRetrieveTranscript as exc:
            raise ProviderUnavailableError(
                f"YouTube caption retrieval failed for {video_id}: {exc}"
            ) from exc
        except OSError as exc:
            # requests.RequestException derives from OSError
            raise ProviderUnavailableError(f"YouTube caption request failed: {exc}") from exc

    def normalize(self, raw: Any) -> str:
        fragments = list(raw or [])
        if not fragments:
            raise EmptyTranscriptError("Caption track is empty")

        texts: list[str] = []
        for fragment in fragments:
            if isinstance(fragment, str):
                texts.append(fragment)
            elif isinstance(fragment, dict) and isinstance(fragment.get("text"), str):
                texts.append(fragment["text"])
            elif isinstance(getattr(fragment, "text", None), str):
                texts.append(fragment.text)
            else:
                raise MalformedResponseError(
                    f"Caption fragment has no text: {type(fragment).__name__}"
                )
        return " ".join(texts)


class SupadataProvider(TranscriptProvider):
    """Alternate provider: Supadata's authenticated transcript endpoint.

    ``api_key`` overrides the configured key; when omitted the key is read
    from the environment on every call.
    """

    source = TranscriptSource.ALTERNATE

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport

    async def retrieve(self, video_id: str) -> Any:
        cfg = load_settings()
        api_key = self._api_key if self._api_key is not None else cfg.supadata_api_key
        if not supadata_key_configured(api_key):
            raise CredentialMissingError("Supadata API key is not configured")

        base_url = (self._base_url or cfg.supadata_base_url).rstrip("/")
        timeout = self._timeout if self._timeout is not None else cfg.http_timeout

        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                response = await client.get(
                    f"{base_url}/youtube/transcript",
                    params={"videoId": video_id},
                    headers={"x-api-key": api_key},
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ProviderUnavailableError(
                f"Supadata API error: {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderUnavailableError(f"Supadata request failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise MalformedResponseError("Supadata returned a non-JSON body") from exc

        if not isinstance(payload, dict):
            raise MalformedResponseError("Supadata response is not a JSON object")
        for field in ("transcript", "content"):
            if payload.get(field) is not None:
                return payload[field]
        raise MalformedResponseError("Failed to get transcript from Supadata API")

    def normalize(self, raw: Any) -> str:
        if isinstance(raw, str):
            return raw
        if not raw:
            raise EmptyTranscriptError("Supadata returned an empty transcript")
        logger.debug("Serializing structured Supadata payload of type %s", type(raw).__name__)
        return json.dumps(raw)
