"""Models for derived dashboard statistics."""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from status_radar.status.models import ServiceStatus


class AggregateSummary(BaseModel):
    """Summary counts across the latest result of every checked service.

    Attributes:
        operational_count: Services currently operational.
        degraded_count: Services currently degraded.
        down_count: Services currently down.
        average_latency_ms: Mean latency over results with a latency, rounded;
            None if no result has one.
        checked_count: Services with at least one result.
        total_services: Registered services, when known.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    operational_count: Annotated[int, Field(ge=0)] = 0
    degraded_count: Annotated[int, Field(ge=0)] = 0
    down_count: Annotated[int, Field(ge=0)] = 0
    average_latency_ms: Annotated[int, Field(ge=0)] | None = None
    checked_count: Annotated[int, Field(ge=0)] = 0
    total_services: Annotated[int, Field(ge=0)] | None = None

    @property
    def issue_count(self) -> int:
        """Services degraded or down."""
        return self.degraded_count + self.down_count

    @property
    def all_clear(self) -> bool:
        """True when something is checked and nothing has an issue."""
        return self.issue_count == 0 and self.operational_count > 0


class FeedItemKind(str, Enum):
    """Kind of entry in the issue feed."""

    HEADLINE = "headline"
    ISSUE = "issue"
    OPERATIONAL = "operational"


class FeedItem(BaseModel):
    """One entry of the scrolling issue feed."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: FeedItemKind
    text: str
    service_id: str | None = None
    status: ServiceStatus | None = None


class LatencyClass(str, Enum):
    """Coarse latency bucket for display."""

    FAST = "fast"
    MEDIUM = "medium"
    SLOW = "slow"
    UNKNOWN = "unknown"


class StatusFilter(str, Enum):
    """Status filter for service views; CHECKING matches unchecked services."""

    ALL = "all"
    OPERATIONAL = "operational"
    DEGRADED = "degraded"
    DOWN = "down"
    CHECKING = "checking"


class SortKey(str, Enum):
    """Ordering for service views."""

    DEFAULT = "default"
    NAME = "name"
    LATENCY = "latency"
    STATUS = "status"
