"""Storage interfaces the workflow services depend on.

The calculators never see these; the service loads records through a store,
hands value snapshots to the calculators, and writes the results back.
"""

from __future__ import annotations

import uuid
from typing import Protocol

from reimburse.models.employee import Employee
from reimburse.models.enums import RequestStatus
from reimburse.models.request import ReimbursementRequest


class EmployeeStore(Protocol):
    """Persistence for employees."""

    async def get(self, employee_id: uuid.UUID) -> Employee:
        """Return the employee or raise ``NotFoundError``."""
        ...

    async def find_by_code_or_email(self, employee_code: str, email: str) -> Employee | None:
        """An existing employee holding either identifier, if any."""
        ...

    async def list_all(self, active: bool | None = None) -> list[Employee]:
        """Employees ordered by code, optionally only active or inactive ones."""
        ...

    async def add(self, employee: Employee) -> Employee:
        """Persist a new employee."""
        ...

    async def set_active(self, employee_id: uuid.UUID, is_active: bool) -> Employee:
        """Enable or disable an account; raises ``NotFoundError``."""
        ...

    async def delete(self, employee: Employee) -> None:
        ...


class RequestStore(Protocol):
    """Persistence for reimbursement requests."""

    async def get(self, request_id: uuid.UUID) -> ReimbursementRequest:
        """Return the request or raise ``NotFoundError``."""
        ...

    async def get_for_update(self, request_id: uuid.UUID) -> ReimbursementRequest:
        """Like ``get`` but holds a write lock until the transaction ends."""
        ...

    async def list_for_employee(self, employee_id: uuid.UUID) -> list[ReimbursementRequest]:
        """All requests submitted by an employee, newest first."""
        ...

    async def list_all(self, status: RequestStatus | None = None) -> list[ReimbursementRequest]:
        """Every request, newest first, optionally in one status only."""
        ...

    async def add(self, request: ReimbursementRequest) -> ReimbursementRequest:
        """Persist a new request."""
        ...

    async def save(self, request: ReimbursementRequest) -> None:
        """Flush changes made to a loaded request."""
        ...

    async def count_by_status(self) -> dict[str, int]:
        """Number of requests per status value."""
        ...
