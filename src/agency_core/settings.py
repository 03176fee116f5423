"""
agency_core.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (JWT secret, OpenAI API key).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="AGENCY_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables and the dev token route.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "agency-core"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Auth
    jwt_alg: str = "HS256"
    jwt_issuer: str = "agency-core"
    jwt_audience: str = "agency-api"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)
    jwt_ttl_minutes: int = 30 * 24 * 60
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./agency.db"

    # AI drafting collaborator
    openai_api_key: str | None = Field(default=None, repr=False)
    openai_model: str = "gpt-4"
    draft_temperature: float = 0.7
    draft_max_tokens: int = 500
    draft_timeout_seconds: float = 30.0


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# `create_app` overrides `get_settings` with the instance it was built from, so
# tests can pass explicit Settings without touching the environment.
