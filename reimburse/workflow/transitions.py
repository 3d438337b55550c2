"""Request status transition map.

    pending → approved → processed → paid
    pending → rejected

``rejected`` and ``paid`` are terminal. Calculation logic fires only on
entry to ``processed``.
"""

from __future__ import annotations

from reimburse.errors import InvalidTransitionError
from reimburse.models.enums import RequestStatus

# {current_status: allowed next statuses}
TRANSITIONS: dict[RequestStatus, frozenset[RequestStatus]] = {
    RequestStatus.PENDING: frozenset({RequestStatus.APPROVED, RequestStatus.REJECTED}),
    RequestStatus.APPROVED: frozenset({RequestStatus.PROCESSED}),
    RequestStatus.PROCESSED: frozenset({RequestStatus.PAID}),
    RequestStatus.REJECTED: frozenset(),
    RequestStatus.PAID: frozenset(),
}


def can_transition(current: RequestStatus, target: RequestStatus) -> bool:
    """Check if ``target`` is reachable from ``current`` in one step."""
    return target in TRANSITIONS.get(current, frozenset())


def validate_transition(current: RequestStatus, target: RequestStatus) -> None:
    """Raise ``InvalidTransitionError`` unless the move is allowed."""
    if not can_transition(current, target):
        allowed = sorted(s.value for s in TRANSITIONS.get(current, frozenset()))
        msg = f"Invalid transition: {current.value} → {target.value} (allowed: {allowed})"
        raise InvalidTransitionError(msg)
