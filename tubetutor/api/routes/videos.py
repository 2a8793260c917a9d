"""Video metadata endpoint backed by the YouTube Data API."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from tubetutor.api.models import VideoDetailsModel, VideoListResponse
from tubetutor.api.responses import error_response
from tubetutor.videos.youtube import fetch_video_details, resolve_video_id

router = APIRouter()


@router.get("/api/videos", response_model=VideoListResponse)
async def list_videos(ids: str = "") -> VideoListResponse | JSONResponse:
    """Look up metadata for comma-separated video ids or URLs.

    Returns an empty list when YOUTUBE_API_KEY is not configured.
    """
    video_ids = [resolve_video_id(v) for v in ids.split(",") if v.strip()]
    if not video_ids:
        return error_response(400, "At least one video id is required")

    details = await fetch_video_details(video_ids)
    return VideoListResponse(
        success=True,
        data=[VideoDetailsModel(**asdict(d), url=d.url) for d in details],
    )
