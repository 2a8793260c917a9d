from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

# Value shipped in the example .env; treated the same as an unset key.
PLACEHOLDER_SUPADATA_KEY = "your_supadata_api_key_here"


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file.
    """

    # API Keys
    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("GEMINI_API_KEY", "NEXT_PUBLIC_GEMINI_API_KEY"),
    )
    youtube_api_key: str = ""
    supadata_api_key: str = ""  # Optional: alternate transcript provider

    # Providers
    supadata_base_url: str = "https://api.supadata.ai/v1"
    youtube_api_base_url: str = "https://www.googleapis.com/youtube/v3"
    transcript_languages: list[str] = ["en"]
    http_timeout: float = 30.0

    # Gemini: candidates are probed in this order and the first that answers wins
    gemini_models: list[str] = ["gemini-2.0-flash", "gemini-1.5-pro", "gemini-1.5-flash"]
    gemini_temperature: float = 0.7
    gemini_top_k: int = 40
    gemini_top_p: float = 0.95
    gemini_max_output_tokens: int = 2048

    # Transcript store; an empty directory keeps transcripts in memory only
    transcript_store_dir: str = ".transcripts"
    transcript_store_key: str = "youtube_transcripts"

    # App config
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }


def load_settings() -> Settings:
    """Build a fresh Settings instance from the current environment.

    Used wherever a credential must be read at call time rather than at
    import time. Falls back to environment variables only when the .env file
    is missing or unreadable (e.g. in CI/testing).
    """
    try:
        return Settings()
    except Exception:
        return Settings(_env_file=None)  # type: ignore[call-arg]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance for application wiring."""
    return load_settings()


def supadata_key_configured(value: str) -> bool:
    return bool(value.strip()) and value != PLACEHOLDER_SUPADATA_KEY


settings = get_settings()
