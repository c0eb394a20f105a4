"""Metrics collection for the relay fetch layer."""

from dataclasses import dataclass, field
from typing import ClassVar

from status_radar.fetch.models import FetchErrorClass


@dataclass
class FetchMetrics:
    """Metrics for relay fetch operations.

    Singleton class that tracks relay attempts, successes per relay,
    failures per error class, and cumulative attempt duration.
    """

    relay_attempts_total: dict[str, int] = field(default_factory=dict)
    relay_successes_total: dict[str, int] = field(default_factory=dict)
    relay_failures_total: dict[str, int] = field(default_factory=dict)
    chains_exhausted_total: int = 0
    attempt_duration_ms_total: float = 0.0
    attempt_count: int = 0

    _instance: ClassVar["FetchMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "FetchMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_attempt(self, relay: str, duration_ms: float) -> None:
        """Record a relay attempt.

        Args:
            relay: Relay name.
            duration_ms: Attempt duration in milliseconds.
        """
        self.relay_attempts_total[relay] = self.relay_attempts_total.get(relay, 0) + 1
        self.attempt_duration_ms_total += duration_ms
        self.attempt_count += 1

    def record_success(self, relay: str) -> None:
        """Record a relay that produced a payload."""
        self.relay_successes_total[relay] = (
            self.relay_successes_total.get(relay, 0) + 1
        )

    def record_failure(self, error_class: FetchErrorClass) -> None:
        """Record a failed attempt.

        Args:
            error_class: Classification of the failure.
        """
        key = error_class.value
        self.relay_failures_total[key] = self.relay_failures_total.get(key, 0) + 1

    def record_exhausted(self) -> None:
        """Record a chain where every relay failed."""
        self.chains_exhausted_total += 1

    def to_dict(self) -> dict[str, int | float | dict[str, int]]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "relay_attempts_total": dict(self.relay_attempts_total),
            "relay_successes_total": dict(self.relay_successes_total),
            "relay_failures_total": dict(self.relay_failures_total),
            "chains_exhausted_total": self.chains_exhausted_total,
            "attempt_duration_ms_total": round(self.attempt_duration_ms_total, 2),
            "attempt_count": self.attempt_count,
        }

    @property
    def avg_attempt_duration_ms(self) -> float:
        """Calculate average attempt duration.

        Returns:
            Average duration in milliseconds.
        """
        if self.attempt_count == 0:
            return 0.0
        return self.attempt_duration_ms_total / self.attempt_count
