"""Application settings powered by Pydantic BaseSettings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from status_radar.fetch.config import FetchConfig
from status_radar.fetch.constants import (
    DEFAULT_RELAY_TIMEOUT_MS,
    DEFAULT_USER_AGENT,
    MAX_RELAY_TIMEOUT_MS,
)


class AppSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STATUS_RADAR_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    registry_path: Path | None = Field(
        default=None, description="Registry YAML; the bundled registry when unset"
    )
    refresh_interval_seconds: float = Field(default=30.0, gt=0)
    relay_timeout_ms: int = Field(
        default=DEFAULT_RELAY_TIMEOUT_MS, ge=1, le=MAX_RELAY_TIMEOUT_MS
    )
    user_agent: str = Field(default=DEFAULT_USER_AGENT, min_length=1)
    discard_stale_results: bool = True
    json_logs: bool = False

    def fetch_config(self) -> FetchConfig:
        """Build the fetch layer configuration."""
        return FetchConfig(
            user_agent=self.user_agent,
            relay_timeout_ms=self.relay_timeout_ms,
        )


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
