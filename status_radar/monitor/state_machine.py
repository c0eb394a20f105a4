"""State machine for a single service check invocation.

A check fetches, then resolves to either a live or a simulated status, then
finishes. Live and simulated are mutually exclusive.
"""

from enum import Enum

import structlog


logger = structlog.get_logger()


class CheckState(str, Enum):
    """State of one check invocation."""

    CHECK_PENDING = "CHECK_PENDING"
    CHECK_FETCHING = "CHECK_FETCHING"
    CHECK_LIVE = "CHECK_LIVE"
    CHECK_SIMULATING = "CHECK_SIMULATING"
    CHECK_DONE = "CHECK_DONE"


_VALID_TRANSITIONS: dict[CheckState, frozenset[CheckState]] = {
    CheckState.CHECK_PENDING: frozenset({CheckState.CHECK_FETCHING}),
    CheckState.CHECK_FETCHING: frozenset(
        {CheckState.CHECK_LIVE, CheckState.CHECK_SIMULATING}
    ),
    CheckState.CHECK_LIVE: frozenset({CheckState.CHECK_DONE}),
    CheckState.CHECK_SIMULATING: frozenset({CheckState.CHECK_DONE}),
    CheckState.CHECK_DONE: frozenset(),
}


class CheckStateTransitionError(Exception):
    """Raised when a check moves out of order."""

    def __init__(
        self, service_id: str, from_state: CheckState, to_state: CheckState
    ) -> None:
        self.service_id = service_id
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Illegal state transition for service '{service_id}': "
            f"{from_state.value} -> {to_state.value}"
        )


class CheckStateMachine:
    """Tracks one check invocation from PENDING to DONE."""

    def __init__(self, service_id: str) -> None:
        self._service_id = service_id
        self._state = CheckState.CHECK_PENDING
        self._log = logger.bind(component="monitor", service_id=service_id)

    @property
    def service_id(self) -> str:
        return self._service_id

    @property
    def state(self) -> CheckState:
        return self._state

    def to_fetching(self) -> None:
        self._advance(CheckState.CHECK_FETCHING)

    def to_live(self) -> None:
        self._advance(CheckState.CHECK_LIVE)

    def to_simulating(self) -> None:
        self._advance(CheckState.CHECK_SIMULATING)

    def to_done(self) -> None:
        self._advance(CheckState.CHECK_DONE)

    def _advance(self, target: CheckState) -> None:
        if target not in _VALID_TRANSITIONS[self._state]:
            self._log.error(
                "illegal_state_transition",
                from_state=self._state.value,
                to_state=target.value,
            )
            raise CheckStateTransitionError(self._service_id, self._state, target)

        self._log.debug(
            "state_transition", from_state=self._state.value, to_state=target.value
        )
        self._state = target
