"""Metrics collection for service checks."""

from dataclasses import dataclass, field
from typing import ClassVar

from status_radar.status.models import ServiceStatus


@dataclass
class MonitorMetrics:
    """Metrics for check invocations and refresh cycles.

    Singleton class that tracks live and simulated results, stale discards,
    completed cycles, and committed results per status.
    """

    checks_total: int = 0
    live_results_total: int = 0
    simulated_results_total: int = 0
    stale_results_discarded_total: int = 0
    cycles_total: int = 0
    status_total: dict[str, int] = field(default_factory=dict)

    _instance: ClassVar["MonitorMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "MonitorMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_check(self, *, simulated: bool) -> None:
        """Record a finished check invocation.

        Args:
            simulated: Whether the result came from the simulator.
        """
        self.checks_total += 1
        if simulated:
            self.simulated_results_total += 1
        else:
            self.live_results_total += 1

    def record_committed(self, status: ServiceStatus) -> None:
        """Record a result written to the store."""
        key = status.value
        self.status_total[key] = self.status_total.get(key, 0) + 1

    def record_stale_discard(self) -> None:
        """Record a result discarded as stale."""
        self.stale_results_discarded_total += 1

    def record_cycle(self) -> None:
        """Record a completed refresh cycle."""
        self.cycles_total += 1

    def to_dict(self) -> dict[str, int | dict[str, int]]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "checks_total": self.checks_total,
            "live_results_total": self.live_results_total,
            "simulated_results_total": self.simulated_results_total,
            "stale_results_discarded_total": self.stale_results_discarded_total,
            "cycles_total": self.cycles_total,
            "status_total": dict(self.status_total),
        }
