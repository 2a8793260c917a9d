"""Chat endpoints: questions and summaries grounded in video transcripts."""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse

from tubetutor.api.dependencies import Services, get_chat, get_services
from tubetutor.api.models import ChatRequest, MultiVideoChatRequest, SummaryRequest, TextResponse
from tubetutor.api.responses import error_response
from tubetutor.chat.adapter import ChatFragment, GeminiChatAdapter
from tubetutor.chat.context import MAX_CONTEXT_VIDEOS, TranscriptContext, build_context

router = APIRouter()

_MISSING_CHAT_PARAMS = "Missing required parameters: videoId, transcript, and query are required"


def _single_video_context(request: ChatRequest | SummaryRequest) -> str:
    return build_context(
        [
            TranscriptContext(
                video_id=request.video_id or "",
                transcript=request.transcript or "",
                video_title=request.video_title,
            )
        ]
    )


def _ndjson(fragments: AsyncIterator[ChatFragment]) -> StreamingResponse:
    """Stream fragments as newline-delimited JSON: ``{"text": ...}`` or ``{"error": {...}}``."""

    async def body() -> AsyncIterator[str]:
        async for fragment in fragments:
            yield json.dumps(fragment.to_dict()) + "\n"

    return StreamingResponse(body(), media_type="application/x-ndjson")


@router.post("/api/chat", response_model=TextResponse)
async def chat(
    request: ChatRequest,
    adapter: Annotated[GeminiChatAdapter, Depends(get_chat)],
) -> TextResponse | JSONResponse:
    """Answer a question about one transcript and return the whole answer."""
    if not (request.video_id and request.transcript and request.query):
        return error_response(400, _MISSING_CHAT_PARAMS)

    answer = await adapter.answer(_single_video_context(request), request.query)
    return TextResponse(success=True, data=answer)


@router.post("/api/chat/stream", response_model=None)
async def chat_stream(
    request: ChatRequest,
    adapter: Annotated[GeminiChatAdapter, Depends(get_chat)],
) -> StreamingResponse | JSONResponse:
    """Answer a question about one transcript as a stream of fragments."""
    if not (request.video_id and request.transcript and request.query):
        return error_response(400, _MISSING_CHAT_PARAMS)

    return _ndjson(adapter.iter_answer(_single_video_context(request), request.query))


@router.post("/api/chat/videos", response_model=None)
async def chat_videos(
    request: MultiVideoChatRequest,
    services: Annotated[Services, Depends(get_services)],
) -> StreamingResponse | JSONResponse:
    """Answer a question across up to three stored transcripts, streamed.

    Transcripts must already be in the store (see /api/youtube-transcript).
    """
    video_ids = list(dict.fromkeys(v for v in request.video_ids if v))
    if not video_ids or not request.query:
        return error_response(400, "Missing required parameters: videoIds and query are required")
    if len(video_ids) > MAX_CONTEXT_VIDEOS:
        return error_response(400, f"Select at most {MAX_CONTEXT_VIDEOS} videos")

    sources: list[TranscriptContext] = []
    missing: list[str] = []
    for video_id in video_ids:
        entry = services.store.get(video_id)
        if entry is None:
            missing.append(video_id)
        else:
            sources.append(TranscriptContext.from_entry(entry, request.video_titles.get(video_id)))
    if missing:
        return error_response(404, f"No stored transcript for: {', '.join(missing)}")

    return _ndjson(services.chat.iter_answer(build_context(sources), request.query))


@router.post("/api/chat/summary", response_model=TextResponse)
async def summarize(
    request: SummaryRequest,
    adapter: Annotated[GeminiChatAdapter, Depends(get_chat)],
) -> TextResponse | JSONResponse:
    """Summarize one transcript as bullet points."""
    if not (request.video_id and request.transcript):
        return error_response(
            400, "Missing required parameters: videoId and transcript are required"
        )

    summary = await adapter.summarize(_single_video_context(request))
    return TextResponse(success=True, data=summary)
