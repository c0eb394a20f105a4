"""Unit tests for the refresh loop."""

import asyncio
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio

from status_radar.fetch.client import RelayFetcher
from status_radar.fetch.relays import build_relays
from status_radar.monitor.orchestrator import BatchResult, CheckOrchestrator
from status_radar.monitor.refresh import RefreshLoop
from status_radar.status.simulator import MockSimulator
from tests.helpers.fakes import FixedRandom, failing_handler, make_descriptor, mock_client


@pytest_asyncio.fixture
async def orchestrator() -> AsyncIterator[CheckOrchestrator]:
    """Orchestrator whose relays always fail."""
    async with mock_client(failing_handler) as client:
        yield CheckOrchestrator(
            fetcher=RelayFetcher(client=client),
            relays=build_relays(),
            simulator=MockSimulator(rng=FixedRandom(0.0)),
        )


async def _wait_for_cycles(loop: RefreshLoop, count: int) -> None:
    async with asyncio.timeout(2):
        while loop.cycles_completed < count:
            await asyncio.sleep(0.005)


class TestRefreshLoop:
    """Tests for RefreshLoop."""

    @pytest.mark.unit
    def test_rejects_non_positive_interval(self) -> None:
        """Test interval validation."""
        with pytest.raises(ValueError, match="positive"):
            RefreshLoop(None, [], interval_seconds=0)  # type: ignore[arg-type]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_runs_max_cycles(self, orchestrator: CheckOrchestrator) -> None:
        """Test that the loop stops after the requested number of cycles."""
        batches: list[BatchResult] = []
        loop = RefreshLoop(
            orchestrator,
            [make_descriptor("github")],
            interval_seconds=0.01,
            on_cycle_complete=batches.append,
        )

        await asyncio.wait_for(loop.run(max_cycles=3), timeout=2)

        assert loop.cycles_completed == 3
        assert [b.cycle_id for b in batches] == [1, 2, 3]
        assert not loop.refreshing

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_trigger_skips_the_wait(self, orchestrator: CheckOrchestrator) -> None:
        """Test that a manual trigger starts a cycle before the interval ends."""
        loop = RefreshLoop(orchestrator, [make_descriptor("github")], interval_seconds=60)
        task = asyncio.create_task(loop.run(max_cycles=2))

        await _wait_for_cycles(loop, 1)
        loop.trigger()

        await asyncio.wait_for(task, timeout=2)
        assert loop.cycles_completed == 2

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_stop_ends_loop(self, orchestrator: CheckOrchestrator) -> None:
        """Test that stop wakes and ends a waiting loop."""
        loop = RefreshLoop(orchestrator, [make_descriptor("github")], interval_seconds=60)
        task = asyncio.create_task(loop.run())

        await _wait_for_cycles(loop, 1)
        loop.stop()

        await asyncio.wait_for(task, timeout=2)
        assert loop.cycles_completed == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_refresh_now_ignored_while_refreshing(
        self, orchestrator: CheckOrchestrator
    ) -> None:
        """Test that overlapping bulk refreshes are not started."""
        loop = RefreshLoop(orchestrator, [make_descriptor("github")])

        first = asyncio.create_task(loop.refresh_now())
        await asyncio.sleep(0)
        second = await loop.refresh_now()
        await first

        assert loop.refreshing is False
        assert second is None
        assert loop.cycles_completed == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_ping_checks_one_service(self, orchestrator: CheckOrchestrator) -> None:
        """Test a single service re-check."""
        loop = RefreshLoop(orchestrator, [make_descriptor("github")])

        result = await loop.ping("github")

        assert result is not None
        assert orchestrator.state.result_for("github") == result

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_ping_ignored_while_checking(
        self, orchestrator: CheckOrchestrator
    ) -> None:
        """Test that a ping is dropped while the service is in flight."""
        loop = RefreshLoop(orchestrator, [make_descriptor("github")])
        orchestrator.state.begin_check("github")

        assert await loop.ping("github") is None
        assert orchestrator.state.result_for("github") is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_ping_unknown_service(self, orchestrator: CheckOrchestrator) -> None:
        """Test that unknown ids are ignored."""
        loop = RefreshLoop(orchestrator, [make_descriptor("github")])

        assert await loop.ping("gitlab") is None
