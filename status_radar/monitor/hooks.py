"""Presentation boundary called on every committed result."""

from typing import Protocol, runtime_checkable

from status_radar.aggregator.models import AggregateSummary
from status_radar.status.models import CheckResult, HistorySample


@runtime_checkable
class PresentationHooks(Protocol):
    """Callbacks into the presentation layer.

    Both hooks are called after each committed result, in order.
    """

    def on_result_updated(
        self,
        service_id: str,
        result: CheckResult,
        history: tuple[HistorySample, ...],
    ) -> None:
        """A service's latest result and history changed."""
        ...

    def on_batch_summary_updated(self, summary: AggregateSummary) -> None:
        """Summary statistics changed."""
        ...


class NullHooks:
    """Hooks that ignore every update."""

    def on_result_updated(
        self,
        service_id: str,  # noqa: ARG002
        result: CheckResult,  # noqa: ARG002
        history: tuple[HistorySample, ...],  # noqa: ARG002
    ) -> None:
        return None

    def on_batch_summary_updated(self, summary: AggregateSummary) -> None:  # noqa: ARG002
        return None
