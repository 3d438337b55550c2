"""Shared fixtures: in-memory stores and a service wired to them."""

from __future__ import annotations

import uuid
from collections.abc import Iterator
from datetime import date
from unittest.mock import AsyncMock, patch

import pytest

from reimburse.errors import NotFoundError
from reimburse.models.employee import Employee
from reimburse.models.enums import Category, RequestStatus, UserRole
from reimburse.models.request import ReimbursementRequest
from reimburse.workflow.employees import EmployeeService
from reimburse.workflow.service import ReimbursementService


class InMemoryEmployeeStore:
    def __init__(self, *employees: Employee) -> None:
        self.items = {e.id: e for e in employees}

    async def get(self, employee_id: uuid.UUID) -> Employee:
        try:
            return self.items[employee_id]
        except KeyError:
            raise NotFoundError("Employee", employee_id) from None

    async def find_by_code_or_email(self, employee_code: str, email: str) -> Employee | None:
        for employee in self.items.values():
            if employee.employee_code == employee_code or employee.email == email:
                return employee
        return None

    async def list_all(self, active: bool | None = None) -> list[Employee]:
        found = [e for e in self.items.values() if active is None or e.is_active == active]
        return sorted(found, key=lambda e: e.employee_code)

    async def add(self, employee: Employee) -> Employee:
        self.items[employee.id] = employee
        return employee

    async def set_active(self, employee_id: uuid.UUID, is_active: bool) -> Employee:
        employee = await self.get(employee_id)
        employee.is_active = is_active
        return employee

    async def delete(self, employee: Employee) -> None:
        del self.items[employee.id]


class InMemoryRequestStore:
    def __init__(self) -> None:
        self.items: dict[uuid.UUID, ReimbursementRequest] = {}
        self.locked: list[uuid.UUID] = []
        self.saves = 0

    async def get(self, request_id: uuid.UUID) -> ReimbursementRequest:
        try:
            return self.items[request_id]
        except KeyError:
            raise NotFoundError("Request", request_id) from None

    async def get_for_update(self, request_id: uuid.UUID) -> ReimbursementRequest:
        request = await self.get(request_id)
        self.locked.append(request_id)
        return request

    async def list_for_employee(self, employee_id: uuid.UUID) -> list[ReimbursementRequest]:
        mine = [r for r in self.items.values() if r.employee_id == employee_id]
        return sorted(mine, key=lambda r: r.submitted_at, reverse=True)

    async def list_all(self, status: RequestStatus | None = None) -> list[ReimbursementRequest]:
        found = [r for r in self.items.values() if status is None or r.status == status.value]
        return sorted(found, key=lambda r: r.submitted_at, reverse=True)

    async def add(self, request: ReimbursementRequest) -> ReimbursementRequest:
        self.items[request.id] = request
        return request

    async def save(self, request: ReimbursementRequest) -> None:
        self.saves += 1

    async def count_by_status(self) -> dict[str, int]:
        counts = {status.value: 0 for status in RequestStatus}
        for request in self.items.values():
            counts[request.status] += 1
        return counts


def make_employee(
    category: Category = Category.DEVELOPER,
    joining_date: date = date(2024, 1, 1),
    is_active: bool = True,
) -> Employee:
    return Employee(
        id=uuid.uuid4(),
        employee_code="EMP003",
        email="dev@example.com",
        name="Dev Example",
        role=UserRole.EMPLOYEE.value,
        category=category.value,
        joining_date=joining_date,
        is_active=is_active,
    )


@pytest.fixture
def employee() -> Employee:
    return make_employee()


@pytest.fixture
def request_store() -> InMemoryRequestStore:
    return InMemoryRequestStore()


@pytest.fixture
def employee_store(employee: Employee) -> InMemoryEmployeeStore:
    return InMemoryEmployeeStore(employee)


@pytest.fixture
def service(request_store: InMemoryRequestStore, employee_store: InMemoryEmployeeStore) -> ReimbursementService:
    return ReimbursementService(request_store, employee_store)


@pytest.fixture
def employee_service(
    employee_store: InMemoryEmployeeStore, request_store: InMemoryRequestStore
) -> EmployeeService:
    return EmployeeService(employee_store, request_store)


@pytest.fixture
def mock_emit() -> Iterator[AsyncMock]:
    """Capture events emitted by the workflow service."""
    with patch("reimburse.workflow.service.emit", new_callable=AsyncMock) as mocked:
        yield mocked


@pytest.fixture
def mock_employee_emit() -> Iterator[AsyncMock]:
    """Capture events emitted by the employee service."""
    with patch("reimburse.workflow.employees.emit", new_callable=AsyncMock) as mocked:
        yield mocked


@pytest.fixture
def employee_factory():
    return make_employee


@pytest.fixture
def make_service(request_store: InMemoryRequestStore):
    """Build a service over the shared request store and the given employees."""

    def _make(*employees: Employee) -> ReimbursementService:
        return ReimbursementService(request_store, InMemoryEmployeeStore(*employees))

    return _make
