"""Keyed transcript cache persisted as a single JSON blob."""

from __future__ import annotations

import json
import logging

from tubetutor.transcripts.models import TranscriptEntry
from tubetutor.transcripts.storage import KeyValueStorage

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "youtube_transcripts"


class TranscriptStore:
    """Mapping of video id to :class:`TranscriptEntry`, one entry per id.

    The whole mapping is serialized as ``{videoId: entry}`` under one storage
    key. Persistence failures are logged and swallowed: the in-memory view
    stays authoritative for the life of the process.
    """

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_STORAGE_KEY) -> None:
        self._storage = storage
        self._key = key
        self._entries: dict[str, TranscriptEntry] = self._load()

    def _load(self) -> dict[str, TranscriptEntry]:
        try:
            raw = self._storage.get_item(self._key)
        except OSError:
            logger.exception("Could not read transcript store %r", self._key)
            return {}
        except UnicodeDecodeError as exc:
            logger.warning("Discarding unreadable transcript store %r: %s", self._key, exc)
            return {}
        if not raw:
            return {}

        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError(f"expected an object, got {type(data).__name__}")
            entries = {vid: TranscriptEntry.from_dict(item) for vid, item in data.items()}
            mismatched = [vid for vid, e in entries.items() if e.video_id != vid]
            if mismatched:
                raise ValueError(f"entries stored under the wrong id: {mismatched}")
        except (ValueError, KeyError, TypeError) as exc:
            # No schema versioning: anything unreadable counts as "no stored data".
            logger.warning("Discarding unreadable transcript store %r: %s", self._key, exc)
            return {}

        logger.info("Loaded %d stored transcripts", len(entries))
        return entries

    def _save(self) -> None:
        try:
            blob = json.dumps({vid: e.to_dict() for vid, e in self._entries.items()})
            self._storage.set_item(self._key, blob)
        except (OSError, TypeError, ValueError):
            logger.exception("Could not persist transcript store %r", self._key)

    def get(self, video_id: str) -> TranscriptEntry | None:
        return self._entries.get(video_id)

    def get_all(self) -> list[TranscriptEntry]:
        return list(self._entries.values())

    def put(self, entry: TranscriptEntry) -> None:
        self._entries[entry.video_id] = entry
        self._save()

    def remove(self, video_id: str) -> None:
        if self._entries.pop(video_id, None) is not None:
            self._save()

    def clear(self) -> None:
        self._entries = {}
        self._save()

    def __contains__(self, video_id: object) -> bool:
        return video_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
