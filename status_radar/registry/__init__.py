"""Service registry: schema, loading and validation hints."""

from status_radar.registry.error_hints import format_validation_error, get_error_hint
from status_radar.registry.loader import RegistryLoader, RegistryValidationError
from status_radar.registry.schemas import (
    DEFAULT_MOCK_PROFILE,
    DEFAULT_RELAYS,
    MockProfile,
    RegistryConfig,
    RelayConfig,
    RelayKind,
    ServiceDescriptor,
    ServiceEntry,
)


__all__ = [
    "DEFAULT_MOCK_PROFILE",
    "DEFAULT_RELAYS",
    "MockProfile",
    "RegistryConfig",
    "RegistryLoader",
    "RegistryValidationError",
    "RelayConfig",
    "RelayKind",
    "ServiceDescriptor",
    "ServiceEntry",
    "format_validation_error",
    "get_error_hint",
]
