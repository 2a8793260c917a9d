"""Error envelopes shared by every route."""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from tubetutor.errors import TranscriptServiceError

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str, kind: str | None = None) -> JSONResponse:
    content: dict[str, object] = {"success": False, "error": message}
    if kind is not None:
        content["kind"] = kind
    return JSONResponse(status_code=status_code, content=content)


async def service_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render a TranscriptServiceError as ``{success: false, error, kind}``."""
    if not isinstance(exc, TranscriptServiceError):
        raise exc
    logger.info("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.kind.value)
    return error_response(exc.status_code, exc.message, exc.kind.value)
