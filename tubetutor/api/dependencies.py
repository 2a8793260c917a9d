"""Application services, built once at startup and injected into routes."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from tubetutor.chat.adapter import GeminiChatAdapter
from tubetutor.config import Settings, get_settings
from tubetutor.transcripts.gateway import TranscriptGateway
from tubetutor.transcripts.providers import SupadataProvider, YouTubeCaptionProvider
from tubetutor.transcripts.storage import FileStorage, KeyValueStorage, MemoryStorage
from tubetutor.transcripts.store import TranscriptStore


@dataclass
class Services:
    store: TranscriptStore
    gateway: TranscriptGateway
    chat: GeminiChatAdapter


def build_services(settings: Settings | None = None) -> Services:
    """Wire the store, gateway and chat adapter from settings."""
    cfg = settings or get_settings()
    storage: KeyValueStorage = (
        FileStorage(cfg.transcript_store_dir) if cfg.transcript_store_dir else MemoryStorage()
    )
    store = TranscriptStore(storage, key=cfg.transcript_store_key)
    gateway = TranscriptGateway(
        store,
        primary=YouTubeCaptionProvider(languages=cfg.transcript_languages),
        alternate=SupadataProvider(base_url=cfg.supadata_base_url, timeout=cfg.http_timeout),
    )
    return Services(store=store, gateway=gateway, chat=GeminiChatAdapter(cfg))


def get_services(request: Request) -> Services:
    services: Services = request.app.state.services
    return services


def get_store(request: Request) -> TranscriptStore:
    return get_services(request).store


def get_gateway(request: Request) -> TranscriptGateway:
    return get_services(request).gateway


def get_chat(request: Request) -> GeminiChatAdapter:
    return get_services(request).chat
