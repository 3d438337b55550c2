"""Domain exceptions for the reimbursement service.

Calculators raise ``InvalidInputError`` before computing anything; stores
raise ``NotFoundError``; the workflow services raise the rest. The HTTP
layer maps each class to a status code in ``reimburse.api.errors``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from reimburse.schemas.eligibility import EligibilityResult


class ReimbursementError(Exception):
    """Base class for all reimbursement domain errors."""


class InvalidInputError(ReimbursementError, ValueError):
    """Negative or non-finite amount, malformed date, or unknown category."""


class NotFoundError(ReimbursementError):
    """A request or employee id did not resolve to a stored record."""

    def __init__(self, entity: str, entity_id: object) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}")


class AlreadyProcessedError(ReimbursementError):
    """Processing was requested for a request that has already been processed."""


class InvalidTransitionError(ReimbursementError):
    """Requested status change is not allowed from the current status."""


class IneligibleError(ReimbursementError):
    """The employee may not submit a new request yet."""

    def __init__(self, result: EligibilityResult) -> None:
        self.result = result
        super().__init__(result.reason or "Employee is not eligible for reimbursement")


class DuplicateEmployeeError(ReimbursementError):
    """Employee code or email is already registered."""


class EmployeeHasRequestsError(ReimbursementError):
    """An employee with submitted requests cannot be deleted."""
