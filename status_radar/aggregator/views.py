"""Filtered and sorted views over the registry and its latest results."""

from collections.abc import Mapping, Sequence

from status_radar.aggregator.models import SortKey, StatusFilter
from status_radar.registry.schemas import ServiceDescriptor
from status_radar.status.models import CheckResult, ServiceStatus


# Unchecked services sort after every status
_STATUS_ORDER: dict[str, int] = {
    ServiceStatus.OPERATIONAL.value: 0,
    ServiceStatus.DEGRADED.value: 1,
    ServiceStatus.DOWN.value: 2,
    StatusFilter.CHECKING.value: 3,
}
_MISSING_LATENCY = float("inf")


def current_status(result: CheckResult | None) -> str:
    """Status value of a result, or ``checking`` when there is none."""
    return result.status.value if result else StatusFilter.CHECKING.value


def select_services(
    descriptors: Sequence[ServiceDescriptor],
    results: Mapping[str, CheckResult],
    status_filter: StatusFilter = StatusFilter.ALL,
    query: str = "",
    sort: SortKey = SortKey.DEFAULT,
) -> list[ServiceDescriptor]:
    """Select the services to display.

    Args:
        descriptors: Registered services in registry order.
        results: Latest result per service id.
        status_filter: Keep only services in this status.
        query: Case-insensitive substring matched against name and category.
        sort: Ordering of the returned services.

    Returns:
        Matching descriptors in the requested order.
    """
    q = query.strip().lower()
    selected = [
        d
        for d in descriptors
        if (not q or q in d.name.lower() or q in d.category.lower())
        and (
            status_filter == StatusFilter.ALL
            or current_status(results.get(d.id)) == status_filter.value
        )
    ]

    if sort == SortKey.NAME:
        selected.sort(key=lambda d: d.name.lower())
    elif sort == SortKey.LATENCY:

        def latency_key(d: ServiceDescriptor) -> float:
            result = results.get(d.id)
            if result is None or result.latency_ms is None:
                return _MISSING_LATENCY
            return result.latency_ms

        selected.sort(key=latency_key)
    elif sort == SortKey.STATUS:
        selected.sort(key=lambda d: _STATUS_ORDER[current_status(results.get(d.id))])

    return selected
