"""Unit tests for monitor state and history."""

import pytest

from status_radar.monitor.state import HISTORY_CAPACITY, HistoryLog, MonitorState
from status_radar.status.models import CheckResult, HistorySample, ServiceStatus
from tests.helpers.time import FIXED_NOW


def _result(latency_ms: int | None, status: ServiceStatus = ServiceStatus.OPERATIONAL) -> CheckResult:
    return CheckResult(
        status=status, latency_ms=latency_ms, message="", observed_at=FIXED_NOW
    )


class TestHistoryLog:
    """Tests for HistoryLog."""

    @pytest.mark.unit
    def test_evicts_oldest_after_capacity(self) -> None:
        """Test FIFO eviction after 13 appends."""
        log = HistoryLog()

        for latency in range(13):
            log.append(HistorySample(status=ServiceStatus.OPERATIONAL, latency_ms=latency))

        samples = log.snapshot()
        assert len(log) == HISTORY_CAPACITY == 12
        assert samples[0].latency_ms == 1
        assert samples[-1].latency_ms == 12

    @pytest.mark.unit
    def test_snapshot_is_a_copy(self) -> None:
        """Test that snapshots do not change with later appends."""
        log = HistoryLog(capacity=3)
        log.append(HistorySample(status=ServiceStatus.DOWN))
        snapshot = log.snapshot()

        log.append(HistorySample(status=ServiceStatus.OPERATIONAL, latency_ms=80))

        assert len(snapshot) == 1
        assert [s.status for s in log] == [ServiceStatus.DOWN, ServiceStatus.OPERATIONAL]
        assert log.capacity == 3


class TestMonitorState:
    """Tests for MonitorState."""

    @pytest.mark.unit
    def test_commit_updates_result_and_history(self) -> None:
        """Test that a commit writes the store and appends history."""
        state = MonitorState()
        ticket = state.next_ticket()

        assert state.commit("github", ticket, _result(90)) is True

        assert state.result_for("github") == _result(90)
        assert len(state.history_for("github")) == 1

    @pytest.mark.unit
    def test_results_view_is_read_only(self) -> None:
        """Test that callers cannot write the store directly."""
        state = MonitorState()

        with pytest.raises(TypeError):
            state.results["github"] = _result(90)  # type: ignore[index]

    @pytest.mark.unit
    def test_stale_result_discarded(self) -> None:
        """Test that an older ticket cannot overwrite a newer result."""
        state = MonitorState()
        older = state.next_ticket()
        newer = state.next_ticket()

        state.commit("github", newer, _result(None, ServiceStatus.DOWN))
        committed = state.commit("github", older, _result(90))

        assert committed is False
        assert state.result_for("github").status == ServiceStatus.DOWN
        assert state.stale_discards == 1
        assert len(state.history_for("github")) == 1

    @pytest.mark.unit
    def test_last_writer_wins_without_discard(self) -> None:
        """Test that disabling discard keeps completion order."""
        state = MonitorState()
        older = state.next_ticket()
        newer = state.next_ticket()

        state.commit("github", newer, _result(None, ServiceStatus.DOWN))
        committed = state.commit("github", older, _result(90), discard_stale=False)

        assert committed is True
        assert state.result_for("github").latency_ms == 90
        assert len(state.history_for("github")) == 2

    @pytest.mark.unit
    def test_tickets_are_per_service(self) -> None:
        """Test that a newer ticket for one service does not block another."""
        state = MonitorState()
        older = state.next_ticket()
        newer = state.next_ticket()

        state.commit("github", newer, _result(90))

        assert state.commit("stripe", older, _result(100)) is True

    @pytest.mark.unit
    def test_in_flight_tracking(self) -> None:
        """Test overlapping in-flight checks of one service."""
        state = MonitorState()

        state.begin_check("github")
        state.begin_check("github")
        state.end_check("github")
        assert state.is_checking("github")

        state.end_check("github")
        assert not state.is_checking("github")

    @pytest.mark.unit
    def test_cycle_ids_increase(self) -> None:
        """Test cycle numbering."""
        state = MonitorState()

        assert state.cycle_id == 0
        assert state.start_cycle() == 1
        assert state.start_cycle() == 2
