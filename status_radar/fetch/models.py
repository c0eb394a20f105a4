"""Data models for the relay fetch layer."""

from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field


class FetchErrorClass(str, Enum):
    """Classification of relay attempt failures.

    - NETWORK_TIMEOUT: Attempt exceeded its timeout and was cancelled
    - CONNECTION_ERROR: Could not establish connection / transport error
    - HTTP_4XX: Relay answered with a 4xx status
    - HTTP_5XX: Relay answered with a 5xx status
    - INVALID_JSON: Body could not be decoded as JSON
    - NORMALIZATION_FAILED: Body decoded but carried no usable status
    - UNKNOWN: Unclassified error
    """

    NETWORK_TIMEOUT = "NETWORK_TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    HTTP_4XX = "HTTP_4XX"
    HTTP_5XX = "HTTP_5XX"
    INVALID_JSON = "INVALID_JSON"
    NORMALIZATION_FAILED = "NORMALIZATION_FAILED"
    UNKNOWN = "UNKNOWN"


NETWORK_ERROR_CLASSES = frozenset(
    {
        FetchErrorClass.NETWORK_TIMEOUT,
        FetchErrorClass.CONNECTION_ERROR,
        FetchErrorClass.HTTP_4XX,
        FetchErrorClass.HTTP_5XX,
    }
)


class FetchError(BaseModel):
    """Typed error from a single relay attempt."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    error_class: FetchErrorClass = Field(description="Classification of the error")
    message: Annotated[str, Field(min_length=1, description="Human-readable message")]
    status_code: int | None = Field(
        default=None, description="HTTP status code if available"
    )

    @property
    def is_network_failure(self) -> bool:
        """Timeout, connection error, or non-success HTTP status."""
        return self.error_class in NETWORK_ERROR_CLASSES


class RelayAttempt(BaseModel):
    """Record of one relay attempt within a fallback chain."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    relay: Annotated[str, Field(min_length=1)]
    duration_ms: Annotated[float, Field(ge=0)]
    error: FetchError | None = None

    @property
    def succeeded(self) -> bool:
        """Check if the attempt produced a payload."""
        return self.error is None


class RelayOutcome(BaseModel):
    """Result of a fallback chain: a payload or a terminal failure.

    Exactly one of ``payload`` (with ``relay``) or ``error`` is set.
    ``attempts`` lists every attempt in order, including the successful one.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    payload: Any = None
    relay: str | None = None
    error: FetchError | None = None
    attempts: tuple[RelayAttempt, ...] = ()

    @property
    def is_success(self) -> bool:
        """Check if any relay produced a payload."""
        return self.error is None and self.relay is not None

    @classmethod
    def success(
        cls, payload: Any, relay: str, attempts: list[RelayAttempt]
    ) -> "RelayOutcome":
        """Build a successful outcome."""
        return cls(payload=payload, relay=relay, attempts=tuple(attempts))

    @classmethod
    def failure(cls, attempts: list[RelayAttempt]) -> "RelayOutcome":
        """Build a terminal failure from the exhausted attempts."""
        last_error = attempts[-1].error if attempts else None
        error = FetchError(
            error_class=FetchErrorClass.UNKNOWN
            if last_error is None
            else last_error.error_class,
            message=f"All {len(attempts)} relays failed"
            + (f"; last error: {last_error.message}" if last_error else ""),
            status_code=last_error.status_code if last_error else None,
        )
        return cls(error=error, attempts=tuple(attempts))
