"""Relay fetch layer with ordered fallback and per-attempt timeouts.

This module provides HTTP fetch operations with:
- Ordered relay chains (CORS-style proxies or direct requests)
- Per-attempt timeout enforced by cancellation
- Failures returned as typed values rather than raised
- Metrics collection for observability
"""

from status_radar.fetch.client import ParseFn, RelayFetcher, classify_http_status
from status_radar.fetch.config import FetchConfig
from status_radar.fetch.constants import (
    DEFAULT_RELAY_TIMEOUT_MS,
    DEFAULT_USER_AGENT,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
)
from status_radar.fetch.metrics import FetchMetrics
from status_radar.fetch.models import (
    FetchError,
    FetchErrorClass,
    RelayAttempt,
    RelayOutcome,
)
from status_radar.fetch.relays import (
    DirectRelay,
    Relay,
    TemplateRelay,
    build_relays,
    encode_uri_component,
    relay_from_config,
)


__all__ = [
    # Client
    "RelayFetcher",
    "ParseFn",
    "classify_http_status",
    # Config
    "FetchConfig",
    # Relays
    "Relay",
    "TemplateRelay",
    "DirectRelay",
    "build_relays",
    "relay_from_config",
    "encode_uri_component",
    # Models
    "FetchError",
    "FetchErrorClass",
    "RelayAttempt",
    "RelayOutcome",
    # Constants
    "DEFAULT_RELAY_TIMEOUT_MS",
    "DEFAULT_USER_AGENT",
    "HTTP_STATUS_OK_MIN",
    "HTTP_STATUS_OK_MAX",
    # Metrics
    "FetchMetrics",
]
