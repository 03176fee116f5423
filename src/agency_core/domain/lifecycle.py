"""
agency_core.domain.lifecycle

Deal status state machine.

Responsibilities:
- Define the deal statuses and the allowed transitions between them.
- Validate a requested transition independently of who asks for it.

Terminal statuses (COMPLETED, CANCELLED) have no outgoing edges. There are
no automatic transitions: every change is requested by a caller and checked
here, including the ones a UI would never offer.
"""

from __future__ import annotations

import enum

from agency_core.errors import InvalidTransition


class DealStatus(enum.StrEnum):
    pending = "PENDING"
    negotiating = "NEGOTIATING"
    active = "ACTIVE"
    completed = "COMPLETED"
    cancelled = "CANCELLED"


INITIAL_STATUS = DealStatus.pending

# Maps each status to the set of statuses it can move TO.
VALID_TRANSITIONS: dict[DealStatus, frozenset[DealStatus]] = {
    DealStatus.pending: frozenset(
        {DealStatus.negotiating, DealStatus.active, DealStatus.cancelled}
    ),
    DealStatus.negotiating: frozenset({DealStatus.active, DealStatus.cancelled}),
    DealStatus.active: frozenset({DealStatus.completed, DealStatus.cancelled}),
    DealStatus.completed: frozenset(),
    DealStatus.cancelled: frozenset(),
}

TERMINAL_STATUSES = frozenset(s for s, targets in VALID_TRANSITIONS.items() if not targets)


def allowed_transitions(current: DealStatus) -> list[DealStatus]:
    """Next statuses reachable from `current`, in declaration order."""
    targets = VALID_TRANSITIONS[current]
    return [s for s in DealStatus if s in targets]


def is_terminal(status: DealStatus) -> bool:
    return status in TERMINAL_STATUSES


def validate_transition(current: DealStatus, target: DealStatus) -> None:
    """
    Raise `InvalidTransition` unless `current -> target` is an edge of the graph.

    A self-transition is not an edge and is rejected like any other.
    """
    if target not in VALID_TRANSITIONS[current]:
        raise InvalidTransition(
            current=current.value,
            target=target.value,
            allowed=[s.value for s in allowed_transitions(current)],
        )


# --- Module Notes -----------------------------------------------------------
# Status values are persisted; treat them as a stable API contract.
