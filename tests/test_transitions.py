"""Tests for the request status transition map."""

from __future__ import annotations

import pytest

from reimburse.errors import InvalidTransitionError
from reimburse.models.enums import RequestStatus
from reimburse.workflow.transitions import TRANSITIONS, can_transition, validate_transition

S = RequestStatus


class TestTransitions:
    """Allowed and refused status moves."""

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (S.PENDING, S.APPROVED),
            (S.PENDING, S.REJECTED),
            (S.APPROVED, S.PROCESSED),
            (S.PROCESSED, S.PAID),
        ],
    )
    def test_allowed(self, current: RequestStatus, target: RequestStatus) -> None:
        assert can_transition(current, target)
        validate_transition(current, target)

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (S.PENDING, S.PROCESSED),
            (S.PENDING, S.PAID),
            (S.APPROVED, S.PENDING),
            (S.APPROVED, S.PAID),
            (S.PROCESSED, S.PROCESSED),
            (S.PROCESSED, S.APPROVED),
            (S.REJECTED, S.APPROVED),
            (S.PAID, S.PROCESSED),
        ],
    )
    def test_refused(self, current: RequestStatus, target: RequestStatus) -> None:
        assert not can_transition(current, target)
        with pytest.raises(InvalidTransitionError):
            validate_transition(current, target)

    def test_terminal_statuses(self) -> None:
        assert TRANSITIONS[S.REJECTED] == frozenset()
        assert TRANSITIONS[S.PAID] == frozenset()

    def test_every_status_mapped(self) -> None:
        assert set(TRANSITIONS) == set(RequestStatus)
