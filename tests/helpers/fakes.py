"""Test doubles shared across test modules."""

import json
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

import httpx

from status_radar.aggregator.models import AggregateSummary
from status_radar.registry.schemas import MockProfile, ServiceDescriptor
from status_radar.status.models import CheckResult, HistorySample


Handler = Callable[[httpx.Request], httpx.Response | Awaitable[httpx.Response]]


class FixedRandom:
    """Random source that always returns the same value."""

    def __init__(self, value: float) -> None:
        self.value = value

    def random(self) -> float:
        return self.value


class SequenceRandom:
    """Random source that returns values from a sequence, in order."""

    def __init__(self, values: Iterable[float]) -> None:
        self._values = iter(values)

    def random(self) -> float:
        return next(self._values)


class RecordingHooks:
    """Presentation hooks that record every call."""

    def __init__(self) -> None:
        self.results: list[tuple[str, CheckResult, tuple[HistorySample, ...]]] = []
        self.summaries: list[AggregateSummary] = []

    def on_result_updated(
        self,
        service_id: str,
        result: CheckResult,
        history: tuple[HistorySample, ...],
    ) -> None:
        self.results.append((service_id, result, history))

    def on_batch_summary_updated(self, summary: AggregateSummary) -> None:
        self.summaries.append(summary)


def make_descriptor(
    service_id: str = "svc",
    name: str | None = None,
    category: str = "Testing",
    mock_profile: MockProfile | None = None,
) -> ServiceDescriptor:
    """Build a service descriptor with sensible defaults."""
    return ServiceDescriptor(
        id=service_id,
        name=name or service_id.title(),
        category=category,
        status_url=f"https://status.{service_id}.example.com/api/v2/status.json",
        homepage_url=f"https://status.{service_id}.example.com",
        mock_profile=mock_profile,
    )


def status_document(indicator: str, description: str = "All Systems Operational") -> dict[str, Any]:
    """Statuspage v2 status.json document."""
    return {
        "page": {"id": "abc123", "name": "Example"},
        "status": {"indicator": indicator, "description": description},
    }


def envelope(document: dict[str, Any]) -> dict[str, Any]:
    """Wrap a document the way an envelope relay does."""
    return {"contents": json.dumps(document), "status": {"http_code": 200}}


def failing_handler(request: httpx.Request) -> httpx.Response:
    """Handler that fails every request at the transport level."""
    raise httpx.ConnectError("connection refused", request=request)


def json_handler(document: dict[str, Any]) -> Handler:
    """Handler that answers every request with the same JSON body."""

    def handler(request: httpx.Request) -> httpx.Response:  # noqa: ARG001
        return httpx.Response(200, json=document)

    return handler


def mock_client(handler: Handler) -> httpx.AsyncClient:
    """Async client routed through an in-process transport."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))
