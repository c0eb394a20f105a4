"""Configuration model for the relay fetch layer."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from status_radar.fetch.constants import (
    DEFAULT_RELAY_TIMEOUT_MS,
    DEFAULT_USER_AGENT,
    MAX_RELAY_TIMEOUT_MS,
)


class FetchConfig(BaseModel):
    """Configuration for relay fetch operations."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    user_agent: Annotated[str, Field(min_length=1, max_length=500)] = (
        DEFAULT_USER_AGENT
    )
    relay_timeout_ms: Annotated[int, Field(ge=1, le=MAX_RELAY_TIMEOUT_MS)] = (
        DEFAULT_RELAY_TIMEOUT_MS
    )
    follow_redirects: bool = True

    @property
    def relay_timeout_seconds(self) -> float:
        """Per relay attempt timeout in seconds."""
        return self.relay_timeout_ms / 1000.0

    def build_headers(self) -> dict[str, str]:
        """Build request headers.

        Returns:
            Headers dictionary.
        """
        return {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }
