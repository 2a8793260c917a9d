"""Shared fakes and fixtures: no test here touches a live API."""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from tubetutor.api.dependencies import Services
from tubetutor.api.main import create_app
from tubetutor.chat.adapter import GeminiChatAdapter
from tubetutor.config import Settings
from tubetutor.transcripts.gateway import TranscriptGateway
from tubetutor.transcripts.providers import SupadataProvider, YouTubeCaptionProvider
from tubetutor.transcripts.storage import MemoryStorage
from tubetutor.transcripts.store import TranscriptStore

from tests.fakes import FakeCaptionApi, FakeGemini


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        gemini_api_key="test-key",
        gemini_models=["model-a", "model-b", "model-c"],
        transcript_store_dir="",
    )


@pytest.fixture
def store() -> TranscriptStore:
    return TranscriptStore(MemoryStorage())


@pytest.fixture
def caption_api() -> FakeCaptionApi:
    return FakeCaptionApi()


@pytest.fixture
def supadata_handler() -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"transcript": "Alternate transcript text"})

    return handler


@pytest.fixture
def gateway(
    store: TranscriptStore,
    caption_api: FakeCaptionApi,
    supadata_handler: Callable[[httpx.Request], httpx.Response],
) -> TranscriptGateway:
    return TranscriptGateway(
        store,
        primary=YouTubeCaptionProvider(api=caption_api, languages=["en"]),
        alternate=SupadataProvider(
            api_key="supadata-key",
            base_url="https://supadata.test/v1",
            transport=httpx.MockTransport(supadata_handler),
        ),
    )


@pytest.fixture
def gemini() -> FakeGemini:
    return FakeGemini()


@pytest.fixture
def adapter(test_settings: Settings, gemini: FakeGemini) -> GeminiChatAdapter:
    return GeminiChatAdapter(test_settings, api_key="test-key", model_factory=gemini)


@pytest.fixture
def services(
    store: TranscriptStore, gateway: TranscriptGateway, adapter: GeminiChatAdapter
) -> Services:
    return Services(store=store, gateway=gateway, chat=adapter)


@pytest.fixture
def client(services: Services) -> TestClient:
    return TestClient(create_app(services))
