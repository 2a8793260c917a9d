"""Fetch-or-reuse gateway in front of the transcript providers."""

from __future__ import annotations

import asyncio
import functools
import logging

from tubetutor.errors import TranscriptServiceError, UnknownError
from tubetutor.transcripts.models import TranscriptEntry, utc_timestamp
from tubetutor.transcripts.providers import TranscriptProvider
from tubetutor.transcripts.store import TranscriptStore

logger = logging.getLogger(__name__)


def _collect_outcome(video_id: str, task: asyncio.Task[TranscriptEntry]) -> None:
    """Retrieve a finished fetch's exception even when every waiter was cancelled."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug("Fetch for %s finished with %s", video_id, type(exc).__name__)


class TranscriptGateway:
    """Return a stored transcript or fetch, store and return a fresh one.

    At most one provider fetch happens per video id unless the caller forces
    a refresh. Concurrent non-forced callers for the same uncached id share
    one in-flight fetch.
    """

    def __init__(
        self,
        store: TranscriptStore,
        primary: TranscriptProvider,
        alternate: TranscriptProvider,
    ) -> None:
        self.store = store
        self._primary = primary
        self._alternate = alternate
        self._inflight: dict[str, asyncio.Task[TranscriptEntry]] = {}

    def provider_for(self, use_alternate_provider: bool) -> TranscriptProvider:
        return self._alternate if use_alternate_provider else self._primary

    async def fetch_and_store(
        self,
        video_id: str,
        *,
        force_refresh: bool = False,
        use_alternate_provider: bool = False,
    ) -> TranscriptEntry:
        """Get the transcript for ``video_id``, hitting the network only on a miss.

        Args:
            video_id: YouTube video id (not validated).
            force_refresh: Bypass the stored entry and fetch again.
            use_alternate_provider: Fetch from Supadata instead of the caption track.

        Raises:
            TranscriptServiceError: One of CredentialMissingError,
                ProviderUnavailableError, EmptyTranscriptError,
                MalformedResponseError, or UnknownError for anything else.
        """
        if not force_refresh:
            cached = self.store.get(video_id)
            if cached is not None:
                return cached
            pending = self._inflight.get(video_id)
            if pending is not None:
                logger.debug("Joining in-flight fetch for %s", video_id)
                return await asyncio.shield(pending)

        provider = self.provider_for(use_alternate_provider)
        task = asyncio.ensure_future(self._fetch(video_id, provider))
        task.add_done_callback(functools.partial(_collect_outcome, video_id))
        self._inflight[video_id] = task
        try:
            return await asyncio.shield(task)
        finally:
            if self._inflight.get(video_id) is task:
                del self._inflight[video_id]

    async def _fetch(self, video_id: str, provider: TranscriptProvider) -> TranscriptEntry:
        logger.info("Fetching transcript for %s from %s", video_id, provider.source.value)
        try:
            text = await provider.fetch_text(video_id)
        except TranscriptServiceError as exc:
            logger.warning("Transcript fetch for %s failed: %s", video_id, exc.message)
            raise
        except Exception as exc:
            logger.exception("Unexpected error fetching transcript for %s", video_id)
            raise UnknownError(str(exc) or "An unknown error occurred") from exc

        entry = TranscriptEntry(
            video_id=video_id,
            transcript=text,
            source=provider.source,
            fetched_at=utc_timestamp(),
        )
        self.store.put(entry)
        return entry
