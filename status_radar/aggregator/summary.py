"""Summary statistics over the result store."""

from collections import Counter
from collections.abc import Mapping

from status_radar.aggregator.models import AggregateSummary, LatencyClass
from status_radar.status.models import CheckResult, ServiceStatus


FAST_LATENCY_MAX_MS = 400
MEDIUM_LATENCY_MAX_MS = 900


def summarize(
    results: Mapping[str, CheckResult],
    total_services: int | None = None,
) -> AggregateSummary:
    """Derive summary counts and average latency.

    Down results carry no latency and so never contribute to the average.

    Args:
        results: Latest result per service id.
        total_services: Number of registered services, if known.

    Returns:
        AggregateSummary for the given results.
    """
    counts = Counter(r.status for r in results.values())
    latencies = [r.latency_ms for r in results.values() if r.latency_ms is not None]
    average = round(sum(latencies) / len(latencies)) if latencies else None

    return AggregateSummary(
        operational_count=counts[ServiceStatus.OPERATIONAL],
        degraded_count=counts[ServiceStatus.DEGRADED],
        down_count=counts[ServiceStatus.DOWN],
        average_latency_ms=average,
        checked_count=len(results),
        total_services=total_services,
    )


def classify_latency(latency_ms: int | None) -> LatencyClass:
    """Bucket a latency for display."""
    if latency_ms is None:
        return LatencyClass.UNKNOWN
    if latency_ms < FAST_LATENCY_MAX_MS:
        return LatencyClass.FAST
    if latency_ms < MEDIUM_LATENCY_MAX_MS:
        return LatencyClass.MEDIUM
    return LatencyClass.SLOW
