"""Transcript endpoints: fetch-or-reuse retrieval and store management."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from tubetutor.api.dependencies import get_gateway, get_store
from tubetutor.api.models import (
    Envelope,
    TranscriptEntryModel,
    TranscriptListResponse,
    TranscriptResponse,
)
from tubetutor.api.responses import error_response
from tubetutor.transcripts.gateway import TranscriptGateway
from tubetutor.transcripts.store import TranscriptStore
from tubetutor.videos.youtube import resolve_video_id

router = APIRouter()


@router.get("/api/youtube-transcript", response_model=TranscriptResponse)
async def youtube_transcript(
    gateway: Annotated[TranscriptGateway, Depends(get_gateway)],
    video_id: Annotated[str | None, Query(alias="videoId")] = None,
    force_refresh: Annotated[bool, Query(alias="forceRefresh")] = False,
    use_alternate_provider: Annotated[bool, Query(alias="useAlternateProvider")] = False,
    use_supadata: Annotated[bool, Query(alias="useSupadata")] = False,
) -> TranscriptResponse | JSONResponse:
    """Return the transcript for a video, fetching it only if not already stored.

    ``videoId`` may also be a full YouTube URL. ``useSupadata`` is accepted as
    an older name for ``useAlternateProvider``.
    """
    if not video_id or not video_id.strip():
        return error_response(400, "Video ID is required")

    entry = await gateway.fetch_and_store(
        resolve_video_id(video_id),
        force_refresh=force_refresh,
        use_alternate_provider=use_alternate_provider or use_supadata,
    )
    return TranscriptResponse(success=True, data=TranscriptEntryModel.from_entry(entry))


@router.get("/api/transcripts", response_model=TranscriptListResponse)
async def list_transcripts(
    store: Annotated[TranscriptStore, Depends(get_store)],
) -> TranscriptListResponse:
    """List every stored transcript."""
    return TranscriptListResponse(
        success=True,
        data=[TranscriptEntryModel.from_entry(e) for e in store.get_all()],
    )


@router.get("/api/transcripts/{video_id}", response_model=TranscriptResponse)
async def get_transcript(
    video_id: str,
    store: Annotated[TranscriptStore, Depends(get_store)],
) -> TranscriptResponse | JSONResponse:
    entry = store.get(video_id)
    if entry is None:
        return error_response(404, f"No stored transcript for video {video_id}")
    return TranscriptResponse(success=True, data=TranscriptEntryModel.from_entry(entry))


@router.delete("/api/transcripts/{video_id}", response_model=Envelope)
async def delete_transcript(
    video_id: str,
    store: Annotated[TranscriptStore, Depends(get_store)],
) -> Envelope:
    """Remove one stored transcript; removing an unknown id is not an error."""
    store.remove(video_id)
    return Envelope(success=True)


@router.delete("/api/transcripts", response_model=Envelope)
async def clear_transcripts(
    store: Annotated[TranscriptStore, Depends(get_store)],
) -> Envelope:
    store.clear()
    return Envelope(success=True, data="All transcripts cleared")
