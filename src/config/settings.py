"""Application-wide configuration loading and validation."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Centralized environment configuration.

    Fields without a default are required; instantiation fails at startup
    when any of them is missing.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    environment: Literal["local", "dev", "prod"] = Field(default="local")
    log_level: str = Field(default="INFO")

    # Calling platform API
    call_api_url: str = Field(description="Endpoint receiving call commands (accept).")
    call_api_token: str = Field(description="Sent verbatim in the Authorization header.")
    id_social_context: str = Field(description="Sent in the idSocialNetwork header.")
    call_api_timeout_seconds: float = Field(default=30.0, gt=0)

    # Inbound webhook
    webhook_url: str = Field(description="Path of the call-event webhook route, e.g. /webhooks/calls.")
    webhook_secret_header: str = Field(description="Header carrying the shared webhook secret.")
    webhook_secret: str

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(ge=1, le=65535)
    signaling_ws_path: str = Field(default="/ws/signaling")

    # Call sessions
    session_ttl_seconds: float = Field(
        default=3600.0,
        gt=0,
        description="Sessions untouched for this long are dropped from the registry.",
    )

    @field_validator("webhook_url", "signaling_ws_path")
    @classmethod
    def ensure_absolute_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("must be an absolute path starting with '/'")
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()
