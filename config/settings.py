from __future__ import annotations

import os
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv


load_dotenv()


def _split_csv(raw: Optional[str]) -> List[str]:
    return [item.strip() for item in (raw or "").split(",") if item.strip()]


class Settings:
    """Application settings loaded from environment variables.

    Keep all credentials and config centralized here. Values are read when
    the instance is created so ``get_settings.cache_clear()`` picks up a
    changed environment.
    """

    def __init__(self) -> None:
        self.app_env: str = os.getenv("APP_ENV", "development")
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO")

        # "gateway" talks to an OpenAI-compatible chat-completions endpoint,
        # "gemini" calls Google directly through langchain.
        self.ai_provider: str = os.getenv("AI_PROVIDER", "gateway").lower()
        self.ai_gateway_url: str = os.getenv(
            "AI_GATEWAY_URL", "https://ai.gateway.lovable.dev/v1/chat/completions"
        )
        self.ai_gateway_api_key: Optional[str] = os.getenv("AI_GATEWAY_API_KEY")
        self.ai_model: str = os.getenv("AI_MODEL", "google/gemini-2.5-flash")
        self.google_api_key: Optional[str] = os.getenv("GOOGLE_API_KEY")
        self.gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
        self.temperature: float = float(os.getenv("MODEL_TEMPERATURE", "0.3"))
        self.upstream_timeout: float = float(os.getenv("UPSTREAM_TIMEOUT", "60"))

        self.cors_allow_origins: List[str] = _split_csv(
            os.getenv("CORS_ALLOW_ORIGINS", "*")
        )

        # Workspace UI
        self.migrate_api_url: str = os.getenv(
            "MIGRATE_API_URL", "http://127.0.0.1:8000/migrate-code"
        )
        self.history_limit: int = int(os.getenv("HISTORY_LIMIT", "50"))

    @property
    def provider_key(self) -> Optional[str]:
        if self.ai_provider == "gemini":
            return self.google_api_key
        return self.ai_gateway_api_key


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
