"""
tests.test_lifecycle

The deal status graph, checked over every (current, target) pair.
"""

from __future__ import annotations

import itertools

import pytest

from agency_core.domain.lifecycle import (
    INITIAL_STATUS,
    TERMINAL_STATUSES,
    DealStatus,
    allowed_transitions,
    is_terminal,
    validate_transition,
)
from agency_core.errors import InvalidTransition

S = DealStatus

EDGES = {
    (S.pending, S.negotiating),
    (S.pending, S.active),
    (S.pending, S.cancelled),
    (S.negotiating, S.active),
    (S.negotiating, S.cancelled),
    (S.active, S.completed),
    (S.active, S.cancelled),
}


@pytest.mark.parametrize("current,target", sorted(itertools.product(S, S)))
def test_every_pair_matches_the_graph(current: DealStatus, target: DealStatus) -> None:
    if (current, target) in EDGES:
        validate_transition(current, target)
    else:
        with pytest.raises(InvalidTransition) as exc:
            validate_transition(current, target)
        assert exc.value.current == current.value
        assert exc.value.target == target.value


def test_initial_and_terminal_statuses() -> None:
    assert INITIAL_STATUS is S.pending
    assert TERMINAL_STATUSES == {S.completed, S.cancelled}
    assert is_terminal(S.completed)
    assert not is_terminal(S.active)


def test_allowed_transitions_are_ordered() -> None:
    assert allowed_transitions(S.pending) == [S.negotiating, S.active, S.cancelled]
    assert allowed_transitions(S.active) == [S.completed, S.cancelled]
    assert allowed_transitions(S.cancelled) == []


def test_invalid_transition_payload_lists_allowed_targets() -> None:
    with pytest.raises(InvalidTransition) as exc:
        validate_transition(S.negotiating, S.completed)
    body = exc.value.to_dict()
    assert body["error"] == "invalid_transition"
    assert body["allowed"] == ["ACTIVE", "CANCELLED"]
    assert exc.value.status_code == 409
