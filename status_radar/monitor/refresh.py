"""Periodic refresh loop with manual trigger and per-service re-check."""

import asyncio
from collections.abc import Callable, Sequence

import structlog

from status_radar.monitor.orchestrator import BatchResult, CheckOrchestrator
from status_radar.registry.schemas import ServiceDescriptor
from status_radar.status.models import CheckResult


logger = structlog.get_logger()

DEFAULT_REFRESH_INTERVAL_SECONDS = 30.0


class RefreshLoop:
    """Drives bulk refresh cycles on a fixed interval.

    A manual trigger cancels the pending wait and starts a new cycle at
    once. Triggers that arrive while a cycle is running are ignored. In-flight
    checks of an earlier cycle are never cancelled; their late results are
    handled by the orchestrator's stale-result policy.
    """

    def __init__(
        self,
        orchestrator: CheckOrchestrator,
        descriptors: Sequence[ServiceDescriptor],
        interval_seconds: float = DEFAULT_REFRESH_INTERVAL_SECONDS,
        on_cycle_complete: Callable[[BatchResult], None] | None = None,
    ) -> None:
        """Initialize the loop.

        Args:
            orchestrator: Orchestrator that performs the checks.
            descriptors: Services to refresh each cycle.
            interval_seconds: Wait between the end of one cycle and the next.
            on_cycle_complete: Optional callback with each cycle's result.

        Raises:
            ValueError: If the interval is not positive.
        """
        if interval_seconds <= 0:
            msg = f"Refresh interval must be positive, got {interval_seconds}"
            raise ValueError(msg)
        self._orchestrator = orchestrator
        self._descriptors = list(descriptors)
        self._by_id = {d.id: d for d in self._descriptors}
        self._interval = interval_seconds
        self._on_cycle_complete = on_cycle_complete
        self._wake = asyncio.Event()
        self._refreshing = False
        self._stopped = False
        self._cycles_completed = 0
        self._log = logger.bind(component="monitor")

    @property
    def refreshing(self) -> bool:
        """Check if a bulk refresh is running."""
        return self._refreshing

    @property
    def cycles_completed(self) -> int:
        """Number of bulk refreshes completed by this loop."""
        return self._cycles_completed

    async def refresh_now(self) -> BatchResult | None:
        """Run one bulk refresh unless one is already running.

        Returns:
            The cycle's BatchResult, or None if a refresh was already running.
        """
        if self._refreshing:
            self._log.info("refresh_skipped_already_running")
            return None

        self._refreshing = True
        try:
            batch = await self._orchestrator.refresh_all(self._descriptors)
        finally:
            self._refreshing = False

        self._cycles_completed += 1
        if self._on_cycle_complete is not None:
            self._on_cycle_complete(batch)
        return batch

    def trigger(self) -> None:
        """Request an immediate refresh, resetting the interval."""
        self._log.info("manual_refresh_requested", refreshing=self._refreshing)
        self._wake.set()

    def stop(self) -> None:
        """Stop the loop after the current cycle."""
        self._stopped = True
        self._wake.set()

    async def ping(self, service_id: str) -> CheckResult | None:
        """Re-check one service unless a check of it is already in flight.

        Args:
            service_id: Service to re-check.

        Returns:
            The new result, or None if the service is unknown or busy.
        """
        descriptor = self._by_id.get(service_id)
        if descriptor is None:
            self._log.warning("ping_unknown_service", service_id=service_id)
            return None
        if self._orchestrator.state.is_checking(service_id):
            self._log.info("ping_skipped_already_checking", service_id=service_id)
            return None
        return await self._orchestrator.check_service(descriptor)

    async def run(self, max_cycles: int | None = None) -> None:
        """Refresh, then wait for the interval or a trigger, until stopped.

        Args:
            max_cycles: Stop after this many cycles; run until stopped if None.
        """
        self._stopped = False
        self._log.info(
            "refresh_loop_started",
            interval_seconds=self._interval,
            service_count=len(self._descriptors),
        )

        cycles = 0
        while not self._stopped:
            if await self.refresh_now() is not None:
                cycles += 1
            # Triggers received mid-cycle are dropped
            if not self._stopped:
                self._wake.clear()

            if max_cycles is not None and cycles >= max_cycles:
                break
            if self._stopped:
                break

            try:
                await asyncio.wait_for(self._wake.wait(), timeout=self._interval)
            except TimeoutError:
                continue

        self._log.info("refresh_loop_stopped", cycles=cycles)
