"""Application configuration — reads from environment variables and Docker Swarm secrets."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


SECRET_FIELDS = ("supabase_url", "supabase_key", "openai_api_key", "checkout_api_key")


def _read_secret(name: str) -> str | None:
    """Read a Docker Swarm secret from /run/secrets/."""
    secret_path = Path(f"/run/secrets/{name}")
    if secret_path.exists():
        return secret_path.read_text().strip()
    return None


class Settings(BaseSettings):
    """Application settings with env var and secret support."""

    supabase_url: str = ""
    supabase_key: str = ""
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    completion_model: str = "gpt-4o-mini"
    completion_max_tokens: int = 1000
    completion_timeout: float = 60.0
    checkout_url: str = ""
    checkout_api_key: str = ""
    port: int = 8400
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Override credentials with Docker Swarm secrets if available
        for name in SECRET_FIELDS:
            if secret := _read_secret(name):
                setattr(self, name, secret)

    @property
    def checkout_configured(self) -> bool:
        return bool(self.checkout_url)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
