"""
Configuration module.

Manages environment variables in a type-safe way with pydantic-settings.
Do not read os.environ directly; go through this module.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Loaded from environment variables (and an optional .env file).
    Missing required variables or malformed values raise ValidationError.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    slack_signing_secret: str = Field(
        ...,
        min_length=1,
        description="Signing secret used to verify Slack requests",
    )
    slack_client_id: str = Field(
        ...,
        description="OAuth client ID of the Slack app",
    )
    slack_client_secret: str = Field(
        ...,
        description="OAuth client secret of the Slack app",
    )
    slack_redirect_uri: str | None = Field(
        default=None,
        description="Redirect URL registered for the OAuth callback",
    )
    paste_api_base_url: str = Field(
        ...,
        pattern=r"^https?://.+",
        description="Base URL of the paste-hosting API server",
    )
    paste_list_api_url: str = Field(
        default="https://api.github.com",
        pattern=r"^https?://.+",
        description="Base URL of the API used to list existing pastes",
    )
    paste_list_user: str = Field(
        default="SlackLackey",
        min_length=1,
        description="User whose pastes are listed",
    )
    list_keyword: str = Field(
        default="get gists",
        min_length=1,
        description="Literal phrase that asks the bot for the paste list",
    )
    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="HTTP listen port",
    )
    storage_backend: Literal["redis", "local"] = Field(
        default="redis",
        description="Where team tokens and pending actions are kept",
    )
    redis_url: str | None = Field(
        default=None,
        description="Redis connection URL (required for the redis backend)",
    )
    local_storage_dir: str = Field(
        default="./storage",
        description="Directory for the local token files",
    )
    pending_action_ttl_seconds: int = Field(
        default=900,
        ge=1,
        description="How long a save prompt stays confirmable",
    )
    http_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Per-request timeout for paste API calls",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level",
    )

    @model_validator(mode="after")
    def _require_redis_url(self) -> "Settings":
        if self.storage_backend == "redis" and not self.redis_url:
            msg = "REDIS_URL is required when STORAGE_BACKEND is redis"
            raise ValueError(msg)
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the cached Settings instance.

    Used so the whole application shares a single Settings object.

    Returns:
        Settings: the cached settings instance
    """
    return Settings()
