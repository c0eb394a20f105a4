"""Check orchestration, monitor state and the refresh loop."""

from status_radar.monitor.hooks import NullHooks, PresentationHooks
from status_radar.monitor.metrics import MonitorMetrics
from status_radar.monitor.orchestrator import BatchResult, CheckOrchestrator
from status_radar.monitor.refresh import DEFAULT_REFRESH_INTERVAL_SECONDS, RefreshLoop
from status_radar.monitor.state import HISTORY_CAPACITY, HistoryLog, MonitorState
from status_radar.monitor.state_machine import (
    CheckState,
    CheckStateMachine,
    CheckStateTransitionError,
)


__all__ = [
    "BatchResult",
    "CheckOrchestrator",
    "CheckState",
    "CheckStateMachine",
    "CheckStateTransitionError",
    "DEFAULT_REFRESH_INTERVAL_SECONDS",
    "HISTORY_CAPACITY",
    "HistoryLog",
    "MonitorMetrics",
    "MonitorState",
    "NullHooks",
    "PresentationHooks",
    "RefreshLoop",
]
