"""Shared fixtures."""

from collections.abc import Iterator

import pytest

from status_radar.fetch.metrics import FetchMetrics
from status_radar.monitor.metrics import MonitorMetrics


@pytest.fixture(autouse=True)
def reset_metrics() -> Iterator[None]:
    """Give every test fresh metrics singletons."""
    FetchMetrics.reset()
    MonitorMetrics.reset()
    yield
    FetchMetrics.reset()
    MonitorMetrics.reset()
