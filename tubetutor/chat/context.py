"""Assemble the transcript context a chat question is grounded in."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from tubetutor.transcripts.models import TranscriptEntry

MAX_CONTEXT_VIDEOS = 3


@dataclass(frozen=True)
class TranscriptContext:
    """One transcript plus the label it is shown under."""

    video_id: str
    transcript: str
    video_title: str | None = None

    @property
    def label(self) -> str:
        return self.video_title or self.video_id

    @classmethod
    def from_entry(cls, entry: TranscriptEntry, video_title: str | None = None) -> TranscriptContext:
        return cls(video_id=entry.video_id, transcript=entry.transcript, video_title=video_title)


def build_context(sources: Iterable[TranscriptContext]) -> str:
    """Concatenate up to three transcripts, each under a ``VIDEO:`` label.

    >>> build_context([TranscriptContext("abc123", "Hello world", "Intro")])
    'VIDEO: Intro\\n\\nHello world\\n\\n'

    Raises:
        ValueError: More than ``MAX_CONTEXT_VIDEOS`` transcripts were given.
    """
    items = list(sources)
    if len(items) > MAX_CONTEXT_VIDEOS:
        raise ValueError(
            f"At most {MAX_CONTEXT_VIDEOS} videos can be discussed at once, got {len(items)}"
        )
    return "".join(f"VIDEO: {item.label}\n\n{item.transcript}\n\n" for item in items)
