"""Client settings (env/.env)."""

from __future__ import annotations

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for talking to a PocketBase server."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: AnyHttpUrl = Field(
        default="http://127.0.0.1:8090",
        alias="POCKETBASE_URL",
    )
    normalize_timestamps: bool = Field(
        default=False,
        alias="POCKETBASE_NORMALIZE_TIMESTAMPS",
    )

    http_timeout_seconds: float = Field(
        default=15.0,
        alias="HTTP_TIMEOUT_SECONDS",
        gt=0,
    )
