"""Data models for cached transcripts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class TranscriptSource(str, Enum):
    """Which external provider produced a transcript."""

    PRIMARY = "primary"  # YouTube caption track via youtube-transcript-api
    ALTERNATE = "alternate"  # Supadata transcript API


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision, e.g. 2024-05-01T12:00:00.123Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class TranscriptEntry:
    """One stored transcript, keyed by ``video_id``.

    Entries are immutable; a refresh replaces the whole entry.
    """

    video_id: str
    transcript: str
    source: TranscriptSource
    fetched_at: str = field(default_factory=utc_timestamp)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase shape used in storage and on the wire."""
        return {
            "videoId": self.video_id,
            "transcript": self.transcript,
            "fetchedAt": self.fetched_at,
            "source": self.source.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TranscriptEntry:
        """Inverse of :meth:`to_dict`.

        Raises:
            KeyError: A required field is missing.
            ValueError: A field has the wrong type or an unknown source tag.
        """
        video_id = data["videoId"]
        transcript = data["transcript"]
        fetched_at = data["fetchedAt"]
        if not all(isinstance(v, str) for v in (video_id, transcript, fetched_at)):
            raise ValueError("videoId, transcript and fetchedAt must be strings")
        return cls(
            video_id=video_id,
            transcript=transcript,
            source=TranscriptSource(data["source"]),
            fetched_at=fetched_at,
        )
