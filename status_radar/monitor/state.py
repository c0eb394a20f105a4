"""Process-wide monitor state: latest results and rolling history.

State is an explicit object owned by the caller that drives checks and is
passed to the aggregator and presentation hooks. Each service's slot is only
written by that service's own check invocation. Execution is single-threaded
on one event loop, so no locking is done here; a threaded driver must
serialize writes per service id.
"""

import itertools
from collections import deque
from collections.abc import Iterator, Mapping
from types import MappingProxyType

from status_radar.status.models import CheckResult, HistorySample


HISTORY_CAPACITY = 12


class HistoryLog:
    """Bounded FIFO of the most recent history samples of one service."""

    def __init__(self, capacity: int = HISTORY_CAPACITY) -> None:
        """Initialize the log.

        Args:
            capacity: Maximum number of samples kept; oldest evicted first.
        """
        self._samples: deque[HistorySample] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        """Maximum number of samples kept."""
        return self._samples.maxlen or 0

    def append(self, sample: HistorySample) -> None:
        """Push a sample, evicting the oldest when full."""
        self._samples.append(sample)

    def snapshot(self) -> tuple[HistorySample, ...]:
        """Immutable copy of the samples, oldest first."""
        return tuple(self._samples)

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[HistorySample]:
        return iter(self.snapshot())


class MonitorState:
    """Result store, history logs, and check bookkeeping.

    Commit tickets are drawn from one monotonically increasing counter. A
    result is committed for a service only if its ticket is newer than the
    last committed ticket for that service, so a slow check from an earlier
    refresh cycle cannot overwrite a newer result.
    """

    def __init__(self, history_capacity: int = HISTORY_CAPACITY) -> None:
        """Initialize empty state.

        Args:
            history_capacity: Samples kept per service.
        """
        self._history_capacity = history_capacity
        self._results: dict[str, CheckResult] = {}
        self._history: dict[str, HistoryLog] = {}
        self._in_flight: dict[str, int] = {}
        self._last_committed: dict[str, int] = {}
        self._tickets = itertools.count(1)
        self._cycle_id = 0
        self._stale_discards = 0

    @property
    def results(self) -> Mapping[str, CheckResult]:
        """Read-only view of the latest result per service id."""
        return MappingProxyType(self._results)

    @property
    def cycle_id(self) -> int:
        """Identifier of the most recently started refresh cycle."""
        return self._cycle_id

    @property
    def stale_discards(self) -> int:
        """Number of results discarded because a newer one was committed."""
        return self._stale_discards

    def result_for(self, service_id: str) -> CheckResult | None:
        """Latest result of a service, if any."""
        return self._results.get(service_id)

    def history_for(self, service_id: str) -> HistoryLog:
        """History log of a service, created on first use."""
        log = self._history.get(service_id)
        if log is None:
            log = HistoryLog(self._history_capacity)
            self._history[service_id] = log
        return log

    def start_cycle(self) -> int:
        """Begin a new refresh cycle.

        Returns:
            The new cycle id.
        """
        self._cycle_id += 1
        return self._cycle_id

    def next_ticket(self) -> int:
        """Draw a commit ticket for a new check invocation."""
        return next(self._tickets)

    def begin_check(self, service_id: str) -> None:
        """Mark a check of the service as in flight."""
        self._in_flight[service_id] = self._in_flight.get(service_id, 0) + 1

    def end_check(self, service_id: str) -> None:
        """Mark one in-flight check of the service as settled."""
        remaining = self._in_flight.get(service_id, 0) - 1
        if remaining > 0:
            self._in_flight[service_id] = remaining
        else:
            self._in_flight.pop(service_id, None)

    def is_checking(self, service_id: str) -> bool:
        """Check if a check of the service is in flight."""
        return service_id in self._in_flight

    def commit(
        self,
        service_id: str,
        ticket: int,
        result: CheckResult,
        *,
        discard_stale: bool = True,
    ) -> bool:
        """Write a result and append it to the service's history.

        Args:
            service_id: Service the result belongs to.
            ticket: Commit ticket drawn when the check started.
            result: Result to store.
            discard_stale: Reject results older than the last committed one;
                when False the last writer wins.

        Returns:
            True if the result was written, False if discarded as stale.
        """
        last = self._last_committed.get(service_id, 0)
        if discard_stale and ticket < last:
            self._stale_discards += 1
            return False

        self._last_committed[service_id] = max(last, ticket)
        self._results[service_id] = result
        self.history_for(service_id).append(HistorySample.from_result(result))
        return True
