"""Unit tests for the mock simulator."""

import pytest

from status_radar.registry.schemas import MockProfile
from status_radar.status.models import ServiceStatus
from status_radar.status.simulator import (
    MESSAGE_ELEVATED_LATENCY,
    MESSAGE_OPERATIONAL,
    MESSAGE_PARTIAL_DISRUPTION,
    MESSAGE_UNAVAILABLE,
    MIN_SIMULATED_LATENCY_MS,
    MockSimulator,
)
from tests.helpers.fakes import FixedRandom, SequenceRandom


def _profile(base: float, variance: float, up: float) -> MockProfile:
    return MockProfile(base_latency_ms=base, variance_ms=variance, up_probability=up)


class TestOperationalBranch:
    """Tests for draws below up_probability."""

    @pytest.mark.unit
    def test_fixed_draw_gives_exact_latency(self) -> None:
        """Test that zero variance yields the base latency."""
        simulator = MockSimulator(rng=FixedRandom(0.0))

        result = simulator.simulate(_profile(100, 0, 1.0))

        assert result.status == ServiceStatus.OPERATIONAL
        assert result.latency_ms == 100
        assert result.message == MESSAGE_OPERATIONAL

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("jitter_draw", "expected"),
        [(0.0, 50), (0.5, 150), (0.75, 200)],
    )
    def test_jitter_spans_plus_minus_variance(
        self, jitter_draw: float, expected: int
    ) -> None:
        """Test that the jitter draw moves latency within base +/- variance."""
        simulator = MockSimulator(rng=SequenceRandom([0.1, jitter_draw]))

        result = simulator.simulate(_profile(150, 100, 0.95))

        assert result.latency_ms == expected

    @pytest.mark.unit
    def test_latency_floor(self) -> None:
        """Test that latency never drops below the floor."""
        simulator = MockSimulator(rng=SequenceRandom([0.0, 0.0]))

        result = simulator.simulate(_profile(20, 50, 1.0))

        assert result.latency_ms == MIN_SIMULATED_LATENCY_MS

    @pytest.mark.unit
    def test_elevated_latency_is_degraded(self) -> None:
        """Test that operational latency above 800ms is reported degraded."""
        simulator = MockSimulator(rng=SequenceRandom([0.0, 0.5]))

        result = simulator.simulate(_profile(900, 0, 1.0))

        assert result.status == ServiceStatus.DEGRADED
        assert result.latency_ms == 900
        assert result.message == MESSAGE_ELEVATED_LATENCY

    @pytest.mark.unit
    def test_missing_profile_uses_default(self) -> None:
        """Test that the default profile applies when none is given."""
        simulator = MockSimulator(rng=SequenceRandom([0.0, 0.5]))

        result = simulator.simulate(None)

        assert result.status == ServiceStatus.OPERATIONAL
        assert result.latency_ms == 150


class TestDegradedBranch:
    """Tests for draws in the degraded band."""

    @pytest.mark.unit
    def test_degraded_band(self) -> None:
        """Test latency formula for the degraded band."""
        simulator = MockSimulator(rng=SequenceRandom([0.92, 0.5]))

        result = simulator.simulate(_profile(100, 60, 0.9))

        assert result.status == ServiceStatus.DEGRADED
        assert result.latency_ms == 350
        assert result.message == MESSAGE_PARTIAL_DISRUPTION


class TestDownBranch:
    """Tests for draws above the degraded band."""

    @pytest.mark.unit
    def test_down_has_no_latency(self) -> None:
        """Test that a down draw carries no latency."""
        simulator = MockSimulator(rng=FixedRandom(0.99))

        result = simulator.simulate(_profile(100, 60, 0.9))

        assert result.status == ServiceStatus.DOWN
        assert result.latency_ms is None
        assert result.message == MESSAGE_UNAVAILABLE

    @pytest.mark.unit
    def test_zero_up_probability_never_operational(self) -> None:
        """Test that a profile that is never up lands in degraded or down."""
        simulator = MockSimulator()
        profile = _profile(100, 60, 0.0)

        statuses = {simulator.simulate(profile).status for _ in range(200)}

        assert ServiceStatus.OPERATIONAL not in statuses
