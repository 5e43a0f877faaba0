"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Gateway configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Connection URL of the hosted Postgres database used for point reads and mutations",
        min_length=1,
    )
    backend_jwt_secret: str = Field(
        description="Secret used by the hosted backend to sign user access tokens",
        min_length=1,
    )
    backend_jwt_audience: str = Field(
        default="authenticated",
        description="Audience claim expected in backend access tokens",
    )
    webhook_secret: str | None = Field(
        default=None,
        description="Shared secret the backend sends in X-Webhook-Secret with change events",
    )
    dedup_window_ms: int = Field(
        default=500,
        description="Events with the same composite key inside this window are duplicates",
        gt=0,
    )
    dedup_ttl_ms: int = Field(
        default=5000,
        description="Dedup entries older than this are evicted",
        gt=0,
    )
    toast_duration_ms: int = Field(
        default=4000,
        description="Unpaused lifetime of a toast before it is dismissed",
        gt=0,
    )
    app_timezone: str | None = Field(
        default=None,
        description="Timezone used to render toast time labels",
    )

    @model_validator(mode="after")
    def _validate_dedup_windows(self) -> "Settings":
        if self.dedup_window_ms > self.dedup_ttl_ms:
            raise ValueError("DEDUP_WINDOW_MS must not be greater than DEDUP_TTL_MS")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
