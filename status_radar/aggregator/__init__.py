"""Derived statistics: summary counts, issue feed and service views."""

from status_radar.aggregator.feed import ALL_CLEAR_HEADLINE, build_issue_feed
from status_radar.aggregator.models import (
    AggregateSummary,
    FeedItem,
    FeedItemKind,
    LatencyClass,
    SortKey,
    StatusFilter,
)
from status_radar.aggregator.summary import classify_latency, summarize
from status_radar.aggregator.views import current_status, select_services


__all__ = [
    "ALL_CLEAR_HEADLINE",
    "AggregateSummary",
    "FeedItem",
    "FeedItemKind",
    "LatencyClass",
    "SortKey",
    "StatusFilter",
    "build_issue_feed",
    "classify_latency",
    "current_status",
    "select_services",
    "summarize",
]
