"""Service registry schema."""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _validate_http_url(v: str) -> str:
    if not v.startswith(("http://", "https://")):
        msg = "URL must start with http:// or https://"
        raise ValueError(msg)
    return v


class MockProfile(BaseModel):
    """Latency personality of a service, used by the mock simulator.

    Attributes:
        base_latency_ms: Typical latency in milliseconds.
        variance_ms: How much the latency fluctuates (plus or minus).
        up_probability: Probability of drawing an operational status.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_latency_ms: Annotated[float, Field(ge=0)]
    variance_ms: Annotated[float, Field(ge=0)]
    up_probability: Annotated[float, Field(ge=0.0, le=1.0)]


DEFAULT_MOCK_PROFILE = MockProfile(
    base_latency_ms=150, variance_ms=100, up_probability=0.95
)


class RelayKind(str, Enum):
    """How a relay turns a target URL into a request URL."""

    TEMPLATE = "template"
    DIRECT = "direct"


class RelayConfig(BaseModel):
    """Configuration for a single relay hop.

    Attributes:
        name: Relay identifier used in logs and metrics.
        kind: Relay strategy.
        template: URL template with a ``{url}`` placeholder (template relays).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: Annotated[str, Field(min_length=1, max_length=100, pattern=r"^[a-z0-9_-]+$")]
    kind: RelayKind = RelayKind.TEMPLATE
    template: str | None = None

    @model_validator(mode="after")
    def validate_template(self) -> "RelayConfig":
        """Ensure template relays carry a usable template."""
        if self.kind == RelayKind.TEMPLATE:
            if not self.template or "{url}" not in self.template:
                msg = "Template relays require a template containing '{url}'"
                raise ValueError(msg)
            _validate_http_url(self.template)
        return self


DEFAULT_RELAYS: tuple[RelayConfig, ...] = (
    RelayConfig(name="corsproxy", template="https://corsproxy.io/?{url}"),
    RelayConfig(
        name="allorigins", template="https://api.allorigins.win/get?url={url}"
    ),
)


class ServiceEntry(BaseModel):
    """A service as listed in the registry file, without its mock profile."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: Annotated[str, Field(min_length=1, max_length=100, pattern=r"^[a-z0-9_-]+$")]
    name: Annotated[str, Field(min_length=1, max_length=200)]
    category: Annotated[str, Field(min_length=1, max_length=100)]
    description: str = ""
    status_url: Annotated[str, Field(min_length=1)]
    homepage_url: Annotated[str, Field(min_length=1)]

    @field_validator("status_url", "homepage_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate URL starts with http:// or https://."""
        return _validate_http_url(v)


class ServiceDescriptor(ServiceEntry):
    """Immutable record of a monitored service.

    Loaded once at startup and never mutated. ``mock_profile`` is None when
    the registry carries no profile for the service.
    """

    mock_profile: MockProfile | None = None

    @property
    def effective_mock_profile(self) -> MockProfile:
        """Mock profile, falling back to the default profile."""
        return self.mock_profile or DEFAULT_MOCK_PROFILE


class RegistryConfig(BaseModel):
    """Root configuration for services.yaml.

    Attributes:
        version: Schema version.
        relays: Ordered relay chain.
        services: Ordered list of monitored services.
        mock_profiles: Mapping of service id to mock profile.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    version: Annotated[str, Field(pattern=r"^\d+\.\d+$")] = "1.0"
    relays: list[RelayConfig] = Field(default_factory=lambda: list(DEFAULT_RELAYS))
    services: list[ServiceEntry]
    mock_profiles: dict[str, MockProfile] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "RegistryConfig":
        """Ensure all service and relay IDs are unique."""
        ids = [s.id for s in self.services]
        duplicates = {id_ for id_ in ids if ids.count(id_) > 1}
        if duplicates:
            msg = f"Duplicate service IDs found: {duplicates}"
            raise ValueError(msg)

        names = [r.name for r in self.relays]
        duplicate_relays = {n for n in names if names.count(n) > 1}
        if duplicate_relays:
            msg = f"Duplicate relay names found: {duplicate_relays}"
            raise ValueError(msg)
        if not self.relays:
            msg = "At least one relay must be configured"
            raise ValueError(msg)
        return self

    @model_validator(mode="after")
    def validate_profile_references(self) -> "RegistryConfig":
        """Ensure every mock profile refers to a listed service."""
        known = {s.id for s in self.services}
        unknown = sorted(set(self.mock_profiles) - known)
        if unknown:
            msg = f"Mock profiles reference unknown services: {unknown}"
            raise ValueError(msg)
        return self

    def descriptors(self) -> list[ServiceDescriptor]:
        """Build service descriptors, joining each entry with its profile.

        Returns:
            Descriptors in registry order.
        """
        return [
            ServiceDescriptor(
                **entry.model_dump(),
                mock_profile=self.mock_profiles.get(entry.id),
            )
            for entry in self.services
        ]
