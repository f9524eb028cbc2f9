"""State machine for credit-metered generation actions.

A run starts once credits are reserved and moves forward one step at a time:

    RESERVED -> ASSETS_UPLOADED -> RECORD_CREATED -> GENERATED -> FINALIZED

Any non-terminal state may move to FAILED. The compensation owed on failure
is read from the state the run had reached, see ``WorkflowRun.compensation``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from adgen.domain.errors import DomainError


class WorkflowState(str, Enum):
    RESERVED = "reserved"
    ASSETS_UPLOADED = "assets_uploaded"
    RECORD_CREATED = "record_created"
    GENERATED = "generated"
    FINALIZED = "finalized"
    FAILED = "failed"


TERMINAL_STATES: FrozenSet[WorkflowState] = frozenset({WorkflowState.FINALIZED, WorkflowState.FAILED})

# Video runs reuse an existing record, so RESERVED may jump to RECORD_CREATED.
TRANSITIONS: Dict[WorkflowState, FrozenSet[WorkflowState]] = {
    WorkflowState.RESERVED: frozenset({WorkflowState.ASSETS_UPLOADED, WorkflowState.RECORD_CREATED}),
    WorkflowState.ASSETS_UPLOADED: frozenset({WorkflowState.RECORD_CREATED}),
    WorkflowState.RECORD_CREATED: frozenset({WorkflowState.GENERATED}),
    WorkflowState.GENERATED: frozenset({WorkflowState.FINALIZED}),
}

_RECORD_STATES = frozenset({WorkflowState.RECORD_CREATED, WorkflowState.GENERATED})


class InvalidTransitionError(DomainError):
    """A workflow run was asked to move to a state it cannot reach."""


@dataclass(frozen=True)
class Compensation:
    """What has to be undone for a failed run."""
    mark_project_failed: bool
    refund_reservation: bool


@dataclass
class WorkflowRun:
    """One paid action in flight for one user."""
    action: str
    user_id: str
    cost: int
    reservation_id: str
    project_id: Optional[str] = None
    state: WorkflowState = WorkflowState.RESERVED
    error: Optional[str] = None
    failed_from: Optional[WorkflowState] = None
    history: List[WorkflowState] = field(default_factory=list)

    def __post_init__(self):
        if not self.history:
            self.history.append(self.state)

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def advance(self, target: WorkflowState) -> None:
        """Move to the next state, rejecting skips and moves out of terminal states."""
        if target == WorkflowState.FAILED:
            raise InvalidTransitionError("Use fail() to move a run to FAILED")
        allowed = TRANSITIONS.get(self.state, frozenset())
        if target not in allowed:
            raise InvalidTransitionError(
                f"{self.action} run cannot move from {self.state.value} to {target.value}"
            )
        if target == WorkflowState.RECORD_CREATED and not self.project_id:
            raise InvalidTransitionError("RECORD_CREATED requires a project id")
        self.state = target
        self.history.append(target)

    def fail(self, reason: str) -> Compensation:
        """Move to FAILED and return the compensation owed from the state reached."""
        if self.is_terminal:
            raise InvalidTransitionError(f"{self.action} run already {self.state.value}")
        self.failed_from = self.state
        self.error = reason
        self.state = WorkflowState.FAILED
        self.history.append(WorkflowState.FAILED)
        return self.compensation()

    def compensation(self) -> Compensation:
        if self.state != WorkflowState.FAILED:
            return Compensation(mark_project_failed=False, refund_reservation=False)
        return Compensation(
            mark_project_failed=self.failed_from in _RECORD_STATES and self.project_id is not None,
            refund_reservation=True,
        )
