"""Service status classification: models, normalization and simulation."""

from status_radar.status.models import (
    CheckResult,
    HistorySample,
    Indicator,
    NormalizedStatus,
    ServiceStatus,
    SimulatedStatus,
)
from status_radar.status.normalizer import map_indicator, normalize, unwrap_envelope
from status_radar.status.simulator import MockSimulator, RandomSource


__all__ = [
    # Models
    "CheckResult",
    "HistorySample",
    "Indicator",
    "NormalizedStatus",
    "ServiceStatus",
    "SimulatedStatus",
    # Normalizer
    "map_indicator",
    "normalize",
    "unwrap_envelope",
    # Simulator
    "MockSimulator",
    "RandomSource",
]
