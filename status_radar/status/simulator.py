"""Mock status simulator used when no live source answers.

Produces a plausible status/latency/message triple shaped by a per-service
mock profile. The random source is injectable so that a fixed draw yields an
exact branch.
"""

import random
from typing import Protocol

from status_radar.registry.schemas import DEFAULT_MOCK_PROFILE, MockProfile
from status_radar.status.models import ServiceStatus, SimulatedStatus


# Latency floor for the operational branch
MIN_SIMULATED_LATENCY_MS = 40
# Operational latency above this is reported as degraded
ELEVATED_LATENCY_THRESHOLD_MS = 800
# Probability band above up_probability that yields a degraded draw
DEGRADED_PROBABILITY_BAND = 0.05
DEGRADED_LATENCY_MULTIPLIER = 2.5
DEGRADED_LATENCY_JITTER_MS = 200

MESSAGE_OPERATIONAL = "All Systems Operational"
MESSAGE_ELEVATED_LATENCY = "Elevated response times"
MESSAGE_PARTIAL_DISRUPTION = "Partial service disruption"
MESSAGE_UNAVAILABLE = "Service unavailable or timed out"


class RandomSource(Protocol):
    """Anything with a ``random()`` method returning a float in [0, 1)."""

    def random(self) -> float: ...


class MockSimulator:
    """Generates simulated check outcomes from mock profiles."""

    def __init__(self, rng: RandomSource | None = None) -> None:
        """Initialize the simulator.

        Args:
            rng: Random source; defaults to a fresh ``random.Random``.
        """
        self._rng: RandomSource = rng or random.Random()  # noqa: S311

    def simulate(self, profile: MockProfile | None = None) -> SimulatedStatus:
        """Draw one simulated outcome.

        Args:
            profile: Mock profile for the service; the default profile is
                used when missing.

        Returns:
            SimulatedStatus for the drawn branch.
        """
        p = profile or DEFAULT_MOCK_PROFILE
        r = self._rng.random()

        if r < p.up_probability:
            jitter = (self._rng.random() - 0.5) * 2 * p.variance_ms
            latency = max(MIN_SIMULATED_LATENCY_MS, round(p.base_latency_ms + jitter))
            if latency > ELEVATED_LATENCY_THRESHOLD_MS:
                return SimulatedStatus(
                    status=ServiceStatus.DEGRADED,
                    latency_ms=latency,
                    message=MESSAGE_ELEVATED_LATENCY,
                )
            return SimulatedStatus(
                status=ServiceStatus.OPERATIONAL,
                latency_ms=latency,
                message=MESSAGE_OPERATIONAL,
            )

        if r < p.up_probability + DEGRADED_PROBABILITY_BAND:
            latency = round(
                p.base_latency_ms * DEGRADED_LATENCY_MULTIPLIER
                + self._rng.random() * DEGRADED_LATENCY_JITTER_MS
            )
            return SimulatedStatus(
                status=ServiceStatus.DEGRADED,
                latency_ms=latency,
                message=MESSAGE_PARTIAL_DISRUPTION,
            )

        return SimulatedStatus(
            status=ServiceStatus.DOWN,
            latency_ms=None,
            message=MESSAGE_UNAVAILABLE,
        )
