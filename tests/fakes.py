"""Fakes for the caption library and the Gemini SDK."""

from __future__ import annotations

import time
from typing import Any


class FakeCaptionApi:
    """Stands in for YouTubeTranscriptApi; ``fetch`` runs in a worker thread."""

    def __init__(
        self,
        fragments: list[Any] | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.fragments = fragments if fragments is not None else [{"text": "Hello"}, {"text": "world"}]
        self.error = error
        self.delay = delay
        self.calls: list[str] = []

    def fetch(self, video_id: str, languages: list[str] | None = None) -> list[Any]:
        self.calls.append(video_id)
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.fragments)


class FakeResponse:
    def __init__(self, text: str) -> None:
        self.text = text


class FakeStream:
    def __init__(self, chunks: list[str], error: Exception | None = None) -> None:
        self._chunks = chunks
        self._error = error

    async def _iterate(self) -> Any:
        for chunk in self._chunks:
            yield FakeResponse(chunk)
        if self._error is not None:
            raise self._error

    def __aiter__(self) -> Any:
        return self._iterate()


class FakeGemini:
    """Model factory + model in one: records every model built and every prompt sent.

    ``failing_models`` raise on every call; ``error`` is raised by real
    (non-probe) requests; ``stream_error`` is raised after the chunks.
    """

    def __init__(
        self,
        answer: str = "This video is an introduction.",
        chunks: list[str] | None = None,
        failing_models: set[str] | None = None,
        error: Exception | None = None,
        stream_error: Exception | None = None,
    ) -> None:
        self.answer = answer
        self.chunks = chunks if chunks is not None else ["This video ", "is an ", "introduction."]
        self.failing_models = failing_models or set()
        self.error = error
        self.stream_error = stream_error
        self.built: list[str] = []
        self.prompts: list[tuple[str, str, bool]] = []

    def __call__(self, model_name: str, api_key: str) -> Any:
        self.built.append(model_name)
        fake = self

        class _Model:
            async def generate_content_async(self, prompt: str, stream: bool = False) -> Any:
                fake.prompts.append((model_name, prompt, stream))
                if model_name in fake.failing_models:
                    raise RuntimeError(f"404 models/{model_name} is not found")
                if prompt != "Test" and fake.error is not None:
                    raise fake.error
                if stream:
                    return FakeStream(fake.chunks, fake.stream_error)
                return FakeResponse(fake.answer)

        return _Model()

    @property
    def requests(self) -> list[tuple[str, str, bool]]:
        """Prompts other than the selection probe."""
        return [p for p in self.prompts if p[1] != "Test"]

