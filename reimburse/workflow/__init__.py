"""Request workflow — status transitions and the orchestrating services."""

from reimburse.workflow.employees import EmployeeService
from reimburse.workflow.service import ReimbursementService
from reimburse.workflow.transitions import TRANSITIONS, can_transition, validate_transition

__all__ = [
    "EmployeeService",
    "ReimbursementService",
    "TRANSITIONS",
    "can_transition",
    "validate_transition",
]
