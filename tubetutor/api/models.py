"""Pydantic request/response schemas for the TubeTutor API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tubetutor.transcripts.models import TranscriptEntry, TranscriptSource


class CamelModel(BaseModel):
    """Accepts and emits camelCase field names, matching the web client."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TranscriptEntryModel(CamelModel):
    """A stored transcript as returned by the API."""

    video_id: str
    transcript: str
    fetched_at: str
    source: TranscriptSource

    @classmethod
    def from_entry(cls, entry: TranscriptEntry) -> TranscriptEntryModel:
        return cls(
            video_id=entry.video_id,
            transcript=entry.transcript,
            fetched_at=entry.fetched_at,
            source=entry.source,
        )


class Envelope(BaseModel):
    """Every API response: ``success`` plus either ``data`` or ``error``."""

    success: bool
    data: Any = None
    error: str | None = None
    kind: str | None = None


class TranscriptResponse(Envelope):
    data: TranscriptEntryModel | None = None


class TranscriptListResponse(Envelope):
    data: list[TranscriptEntryModel] = []


class ChatRequest(CamelModel):
    """Request body for /api/chat and /api/chat/stream.

    Required fields are optional here so a missing one yields the API's own
    400 message instead of a 422 validation error.
    """

    video_id: str | None = None
    video_title: str | None = None
    transcript: str | None = None
    query: str | None = None


class MultiVideoChatRequest(CamelModel):
    """Request body for /api/chat/videos: stored transcripts by id."""

    video_ids: list[str] = Field(default_factory=list)
    query: str | None = None
    video_titles: dict[str, str] = Field(default_factory=dict)


class SummaryRequest(CamelModel):
    video_id: str | None = None
    video_title: str | None = None
    transcript: str | None = None


class TextResponse(Envelope):
    data: str | None = None


class VideoDetailsModel(CamelModel):
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
    url: str


class VideoListResponse(Envelope):
    data: list[VideoDetailsModel] = []
