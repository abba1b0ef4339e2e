"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

MAX_UPLOAD_BYTES = 2 * 1024 * 1024


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str | None = "low"
    openai_store: bool = False
    openai_timeout_seconds: float | None = 60.0
    data_dir: Path = Path(".nutrivision")
    advice_debounce_seconds: float = 1.0
    max_upload_bytes: int = MAX_UPLOAD_BYTES
    nutrition_cache_ttl_seconds: int = 86400
    image_store_capacity: int = 20
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def is_local(self) -> bool:
        """True when user-facing errors may include debug detail."""
        return self.environment == "local"
