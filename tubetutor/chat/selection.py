"""Pick the first Gemini model that answers a trivial probe."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

from tubetutor.errors import NoModelAvailableError

logger = logging.getLogger(__name__)

PROBE_PROMPT = "Test"


@dataclass(frozen=True)
class ModelSelection:
    """The chosen model and its position in the candidate list."""

    selected: str
    index: int


async def select_model(
    candidates: Sequence[str],
    probe: Callable[[str], Awaitable[object]],
) -> ModelSelection:
    """Probe ``candidates`` in order and return the first that succeeds.

    Caching the result is the caller's business; this function probes every
    time it is called.

    Raises:
        NoModelAvailableError: Every candidate failed (or there were none).
    """
    failures: list[str] = []
    for index, name in enumerate(candidates):
        try:
            await probe(name)
        except Exception as exc:
            logger.warning("Model %s failed: %s", name, exc)
            failures.append(f"{name}: {exc}")
            continue
        logger.info("Successfully connected to model: %s", name)
        return ModelSelection(selected=name, index=index)

    logger.error("All Gemini models failed to connect")
    detail = "; ".join(failures) if failures else "no candidate models configured"
    raise NoModelAvailableError(
        f"Could not connect to Gemini API. Please check your API key and try again. ({detail})"
    )
