"""Archive outcome data models."""

from dataclasses import dataclass
from enum import Enum


class OutcomeState(Enum):
    """Lifecycle of one archive operation."""

    PENDING = "pending"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (OutcomeState.SUCCEEDED, OutcomeState.FAILED)


# Allowed forward moves; anything else is a bug.
_FORWARD = {
    OutcomeState.PENDING: {OutcomeState.IN_FLIGHT},
    OutcomeState.IN_FLIGHT: {OutcomeState.SUCCEEDED, OutcomeState.FAILED},
    OutcomeState.SUCCEEDED: set(),
    OutcomeState.FAILED: set(),
}


@dataclass
class ArchiveOutcome:
    """Progress of the archive operation for one selected repository."""

    index: int  # position in the inventory
    name: str
    state: OutcomeState = OutcomeState.PENDING
    reason: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal

    def can_advance(self, state: OutcomeState) -> bool:
        return state in _FORWARD[self.state]


@dataclass(frozen=True)
class OutcomeUpdate:
    """Message a worker posts when an outcome changes state."""

    position: int  # position in selection order
    state: OutcomeState
    reason: str | None = None
