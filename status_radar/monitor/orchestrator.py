"""Per-service check workflow and concurrent bulk refresh."""

import asyncio
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime

import structlog

from status_radar.aggregator.models import AggregateSummary
from status_radar.aggregator.summary import summarize
from status_radar.fetch.client import RelayFetcher
from status_radar.fetch.models import RelayOutcome
from status_radar.fetch.relays import Relay
from status_radar.monitor.hooks import NullHooks, PresentationHooks
from status_radar.monitor.metrics import MonitorMetrics
from status_radar.monitor.state import MonitorState
from status_radar.monitor.state_machine import CheckStateMachine
from status_radar.observability.logging import bind_cycle_context, clear_cycle_context
from status_radar.registry.schemas import ServiceDescriptor
from status_radar.status.models import CheckResult, NormalizedStatus, ServiceStatus
from status_radar.status.normalizer import normalize
from status_radar.status.simulator import MockSimulator


logger = structlog.get_logger()


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class BatchResult:
    """Result of one bulk refresh cycle."""

    cycle_id: int
    started_at: datetime
    finished_at: datetime
    results: dict[str, CheckResult] = field(default_factory=dict)
    summary: AggregateSummary = field(default_factory=AggregateSummary)
    failed_service_ids: list[str] = field(default_factory=list)

    @property
    def simulated_count(self) -> int:
        """Number of results in this cycle that were simulated."""
        return sum(1 for r in self.results.values() if r.is_simulated)

    @property
    def duration_ms(self) -> float:
        """Get total duration in milliseconds."""
        return (self.finished_at - self.started_at).total_seconds() * 1000


class CheckOrchestrator:
    """Runs service checks: relay chain, normalization, simulator fallback.

    Every invocation ends in exactly one CheckResult. Relay and
    normalization failures are absorbed; when every relay fails the result
    is simulated.
    """

    def __init__(  # noqa: PLR0913
        self,
        fetcher: RelayFetcher,
        relays: Sequence[Relay],
        state: MonitorState | None = None,
        simulator: MockSimulator | None = None,
        hooks: PresentationHooks | None = None,
        timeout_ms: int | None = None,
        clock: Callable[[], datetime] | None = None,
        discard_stale_results: bool = True,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            fetcher: Relay fetcher for live requests.
            relays: Ordered, non-empty relay chain.
            state: Shared monitor state; a fresh one when omitted.
            simulator: Mock simulator for the fallback path.
            hooks: Presentation hooks called on each committed result.
            timeout_ms: Per relay attempt timeout override.
            clock: Source of ``observed_at`` timestamps.
            discard_stale_results: Drop results older than the last
                committed result of the same service.

        Raises:
            ValueError: If the relay chain is empty.
        """
        if not relays:
            msg = "At least one relay is required"
            raise ValueError(msg)
        self._fetcher = fetcher
        self._relays = list(relays)
        self._state = state or MonitorState()
        self._simulator = simulator or MockSimulator()
        self._hooks: PresentationHooks = hooks or NullHooks()
        self._timeout_ms = timeout_ms
        self._clock = clock or _utcnow
        self._discard_stale = discard_stale_results
        self._total_services: int | None = None
        self._metrics = MonitorMetrics.get_instance()
        self._log = logger.bind(component="monitor")

    @property
    def state(self) -> MonitorState:
        """Get the shared monitor state."""
        return self._state

    def summary(self) -> AggregateSummary:
        """Summarize the current result store."""
        return summarize(self._state.results, self._total_services)

    async def check_service(
        self,
        descriptor: ServiceDescriptor,
        *,
        cycle_id: int | None = None,
    ) -> CheckResult:
        """Check one service and record the result.

        Args:
            descriptor: Service to check.
            cycle_id: Refresh cycle the invocation belongs to, for logging.

        Returns:
            The live result, or a simulated one if every relay failed.
        """
        service_id = descriptor.id
        ticket = self._state.next_ticket()
        log = self._log.bind(service_id=service_id, cycle_id=cycle_id, ticket=ticket)
        machine = CheckStateMachine(service_id)

        self._state.begin_check(service_id)
        try:
            start = time.perf_counter()
            machine.to_fetching()
            outcome = await self._fetch(descriptor, log)

            if outcome is not None and outcome.is_success:
                latency_ms = round((time.perf_counter() - start) * 1000)
                machine.to_live()
                result = self._live_result(outcome.payload, latency_ms)
            else:
                machine.to_simulating()
                result = self._simulated_result(descriptor)

            machine.to_done()
            self._metrics.record_check(simulated=result.is_simulated)
            self._finalize(service_id, ticket, result, log)
        finally:
            self._state.end_check(service_id)

        log.info(
            "check_complete",
            status=result.status.value,
            latency_ms=result.latency_ms,
            is_simulated=result.is_simulated,
            relay=outcome.relay if outcome is not None else None,
        )
        return result

    async def refresh_all(
        self, descriptors: Sequence[ServiceDescriptor]
    ) -> BatchResult:
        """Check every service concurrently and wait for all to settle.

        A failing invocation is logged and never aborts the batch.

        Args:
            descriptors: Services to check.

        Returns:
            BatchResult with this cycle's results and the resulting summary.
        """
        cycle_id = self._state.start_cycle()
        self._total_services = len(descriptors)
        started_at = self._clock()
        bind_cycle_context(cycle_id)
        log = self._log.bind(cycle_id=cycle_id)
        log.info("refresh_cycle_started", service_count=len(descriptors))

        try:
            settled = await asyncio.gather(
                *(self.check_service(d, cycle_id=cycle_id) for d in descriptors),
                return_exceptions=True,
            )
        finally:
            clear_cycle_context()

        batch = BatchResult(
            cycle_id=cycle_id, started_at=started_at, finished_at=started_at
        )
        for descriptor, outcome in zip(descriptors, settled, strict=True):
            if isinstance(outcome, BaseException):
                log.error(
                    "check_task_failed",
                    service_id=descriptor.id,
                    error=f"{type(outcome).__name__}: {outcome}",
                )
                batch.failed_service_ids.append(descriptor.id)
                continue
            batch.results[descriptor.id] = outcome

        batch.finished_at = self._clock()
        batch.summary = self.summary()
        self._metrics.record_cycle()

        log.info(
            "refresh_cycle_complete",
            checked=len(batch.results),
            simulated=batch.simulated_count,
            failed=len(batch.failed_service_ids),
            operational=batch.summary.operational_count,
            degraded=batch.summary.degraded_count,
            down=batch.summary.down_count,
            average_latency_ms=batch.summary.average_latency_ms,
            duration_ms=round(batch.duration_ms, 2),
        )
        return batch

    async def _fetch(
        self,
        descriptor: ServiceDescriptor,
        log: structlog.stdlib.BoundLogger,
    ) -> RelayOutcome | None:
        try:
            return await self._fetcher.fetch_via_relays(
                descriptor.status_url,
                self._relays,
                self._timeout_ms,
                parse=normalize,
                service_id=descriptor.id,
            )
        except Exception:  # noqa: BLE001
            log.exception("live_check_error")
            return None

    def _live_result(self, normalized: NormalizedStatus, latency_ms: int) -> CheckResult:
        # Down results never carry a latency, even when measured live
        return CheckResult(
            status=normalized.status,
            latency_ms=None if normalized.status == ServiceStatus.DOWN else latency_ms,
            message=normalized.message,
            observed_at=self._clock(),
            is_simulated=False,
        )

    def _simulated_result(self, descriptor: ServiceDescriptor) -> CheckResult:
        simulated = self._simulator.simulate(descriptor.mock_profile)
        return CheckResult(
            status=simulated.status,
            latency_ms=simulated.latency_ms,
            message=simulated.message,
            observed_at=self._clock(),
            is_simulated=True,
        )

    def _finalize(
        self,
        service_id: str,
        ticket: int,
        result: CheckResult,
        log: structlog.stdlib.BoundLogger,
    ) -> None:
        committed = self._state.commit(
            service_id, ticket, result, discard_stale=self._discard_stale
        )
        if not committed:
            self._metrics.record_stale_discard()
            log.info("stale_result_discarded", status=result.status.value)
            return

        self._metrics.record_committed(result.status)
        history = self._state.history_for(service_id).snapshot()
        try:
            self._hooks.on_result_updated(service_id, result, history)
        except Exception:  # noqa: BLE001
            log.exception("presentation_hook_failed", hook="on_result_updated")
        try:
            self._hooks.on_batch_summary_updated(self.summary())
        except Exception:  # noqa: BLE001
            log.exception("presentation_hook_failed", hook="on_batch_summary_updated")
