"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./marketnotify.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        default="change-me",
        description="Secret key used to verify bearer tokens",
        min_length=1,
    )
    access_token_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(
        default=60,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    notification_cache_ttl_seconds: float = Field(
        default=5.0,
        description="TTL for cached listings, unread counts and recent feeds",
        gt=0,
    )
    statistics_cache_ttl_seconds: float = Field(
        default=120.0,
        description="TTL for cached notification history statistics",
        gt=0,
    )
    channel_timeout_seconds: float = Field(
        default=5.0,
        description="Upper bound for a single push or realtime delivery attempt",
        gt=0,
    )
    list_max_limit: int = Field(default=100, gt=0)
    recent_batch_size: int = Field(default=50, gt=0)
    push_enabled: bool = Field(default=False)
    expo_push_url: str = Field(default="https://exp.host/--/api/v2/push/send")
    expo_access_token: str | None = Field(default=None)
    notification_retention_days: int = Field(default=90, gt=0)
    purge_batch_size: int = Field(default=1000, gt=0)
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:8081"])
    log_level: str = Field(default="INFO")

    @model_validator(mode="after")
    def _validate_push_settings(self) -> "Settings":
        if self.push_enabled and not self.expo_push_url.startswith(("http://", "https://")):
            raise ValueError("EXPO_PUSH_URL must be an http(s) URL when push is enabled")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
