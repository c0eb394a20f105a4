"""Models for service health classification and check results."""

from datetime import datetime
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ServiceStatus(str, Enum):
    """Canonical health status of a monitored service.

    - OPERATIONAL: Service reports no issues
    - DEGRADED: Minor incident, maintenance, or elevated latency
    - DOWN: Major/critical incident or unreachable
    """

    OPERATIONAL = "operational"
    DEGRADED = "degraded"
    DOWN = "down"


class Indicator(str, Enum):
    """Upstream Statuspage indicator vocabulary."""

    NONE = "none"
    MINOR = "minor"
    MAINTENANCE = "maintenance"
    MAJOR = "major"
    CRITICAL = "critical"


# Indicators that map to something other than DOWN
INDICATOR_STATUS_MAP: dict[str, ServiceStatus] = {
    Indicator.NONE.value: ServiceStatus.OPERATIONAL,
    Indicator.MINOR.value: ServiceStatus.DEGRADED,
    Indicator.MAINTENANCE.value: ServiceStatus.DEGRADED,
}


class NormalizedStatus(BaseModel):
    """Canonical {status, message} pair extracted from an upstream document."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    status: ServiceStatus
    message: str


class SimulatedStatus(BaseModel):
    """Status triple produced by the mock simulator, before timestamping."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    status: ServiceStatus
    latency_ms: Annotated[int, Field(ge=0)] | None = None
    message: str

    @model_validator(mode="after")
    def validate_down_has_no_latency(self) -> "SimulatedStatus":
        """Ensure a DOWN status never carries a latency."""
        if self.status == ServiceStatus.DOWN and self.latency_ms is not None:
            msg = "A down status must not carry a latency"
            raise ValueError(msg)
        return self


class CheckResult(BaseModel):
    """Result of a single service check.

    Produced fresh by each check and superseded by the next check for the
    same service.

    Attributes:
        status: Canonical health status.
        latency_ms: Elapsed time in milliseconds; absent when down.
        message: Upstream description or a fixed simulator message.
        observed_at: When the check finalized (timezone-aware).
        is_simulated: True iff the result came from the mock simulator.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    status: ServiceStatus
    latency_ms: Annotated[int, Field(ge=0)] | None = None
    message: str
    observed_at: datetime
    is_simulated: bool = False

    @model_validator(mode="after")
    def validate_down_has_no_latency(self) -> "CheckResult":
        """Ensure a DOWN result never carries a latency."""
        if self.status == ServiceStatus.DOWN and self.latency_ms is not None:
            msg = "A down result must not carry a latency"
            raise ValueError(msg)
        return self


class HistorySample(BaseModel):
    """One entry of a service's rolling history."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    status: ServiceStatus
    latency_ms: int | None = None

    @classmethod
    def from_result(cls, result: CheckResult) -> "HistorySample":
        """Build a history sample from a check result."""
        return cls(status=result.status, latency_ms=result.latency_ms)
