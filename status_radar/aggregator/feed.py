"""Scrolling issue feed derived from the latest results."""

from collections.abc import Mapping, Sequence

from status_radar.aggregator.models import FeedItem, FeedItemKind
from status_radar.registry.schemas import ServiceDescriptor
from status_radar.status.models import CheckResult, ServiceStatus


ALL_CLEAR_HEADLINE = "All monitored services operational"
ALL_CLEAR_OPERATIONAL_LIMIT = 8
ISSUE_PADDING_OPERATIONAL_LIMIT = 5

# Issues are listed most severe first
_ISSUE_PRIORITY: dict[ServiceStatus, int] = {
    ServiceStatus.DOWN: 0,
    ServiceStatus.DEGRADED: 1,
}


def _operational_item(descriptor: ServiceDescriptor, result: CheckResult) -> FeedItem:
    latency = f"{result.latency_ms}ms" if result.latency_ms is not None else "n/a"
    return FeedItem(
        kind=FeedItemKind.OPERATIONAL,
        text=f"{descriptor.name} - {latency}",
        service_id=descriptor.id,
        status=result.status,
    )


def _issue_item(descriptor: ServiceDescriptor, result: CheckResult) -> FeedItem:
    return FeedItem(
        kind=FeedItemKind.ISSUE,
        text=f"{descriptor.name}: {result.message or result.status.value}",
        service_id=descriptor.id,
        status=result.status,
    )


def build_issue_feed(
    descriptors: Sequence[ServiceDescriptor],
    results: Mapping[str, CheckResult],
) -> list[FeedItem]:
    """Build the ordered issue feed.

    With no degraded/down service and at least one operational service, the
    feed is an all-clear headline followed by up to 8 operational entries.
    Otherwise every degraded/down service is listed (down first, registry
    order within a status) followed by up to 5 operational entries.

    Args:
        descriptors: Registered services in registry order.
        results: Latest result per service id.

    Returns:
        Feed items in display order; empty when nothing has been checked.
    """
    checked = [(d, results[d.id]) for d in descriptors if d.id in results]
    issues = [(d, r) for d, r in checked if r.status in _ISSUE_PRIORITY]
    operational = [
        (d, r) for d, r in checked if r.status == ServiceStatus.OPERATIONAL
    ]

    if not issues and operational:
        items = [FeedItem(kind=FeedItemKind.HEADLINE, text=ALL_CLEAR_HEADLINE)]
        items.extend(
            _operational_item(d, r)
            for d, r in operational[:ALL_CLEAR_OPERATIONAL_LIMIT]
        )
        return items

    issues.sort(key=lambda pair: _ISSUE_PRIORITY[pair[1].status])
    items = [_issue_item(d, r) for d, r in issues]
    items.extend(
        _operational_item(d, r)
        for d, r in operational[:ISSUE_PADDING_OPERATIONAL_LIMIT]
    )
    return items
