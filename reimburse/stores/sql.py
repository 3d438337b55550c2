"""SQLAlchemy-backed stores.

Each store wraps the caller's AsyncSession; the session (and so the
transaction) is owned by the caller, e.g. the FastAPI ``get_session``
dependency. ``get_for_update`` issues ``SELECT ... FOR UPDATE`` so two
operators processing the same request serialise on the row.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from reimburse.errors import NotFoundError
from reimburse.models.employee import Employee
from reimburse.models.enums import RequestStatus
from reimburse.models.request import ReimbursementRequest

logger = logging.getLogger(__name__)


class SqlEmployeeStore:
    """Employees table access."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def get(self, employee_id: uuid.UUID) -> Employee:
        result = await self._db.execute(select(Employee).where(Employee.id == employee_id))
        employee = result.scalar_one_or_none()
        if employee is None:
            raise NotFoundError("Employee", employee_id)
        return employee

    async def find_by_code_or_email(self, employee_code: str, email: str) -> Employee | None:
        result = await self._db.execute(
            select(Employee).where(or_(Employee.employee_code == employee_code, Employee.email == email))
        )
        return result.scalars().first()

    async def list_all(self, active: bool | None = None) -> list[Employee]:
        stmt = select(Employee).order_by(Employee.employee_code)
        if active is not None:
            stmt = stmt.where(Employee.is_active == active)
        result = await self._db.execute(stmt)
        return list(result.scalars().all())

    async def add(self, employee: Employee) -> Employee:
        self._db.add(employee)
        await self._db.flush()
        logger.debug("Employee stored: id=%s code=%s", employee.id, employee.employee_code)
        return employee

    async def set_active(self, employee_id: uuid.UUID, is_active: bool) -> Employee:
        employee = await self.get(employee_id)
        employee.is_active = is_active
        await self._db.flush()
        return employee

    async def delete(self, employee: Employee) -> None:
        await self._db.delete(employee)
        await self._db.flush()


class SqlRequestStore:
    """Reimbursement requests table access."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def get(self, request_id: uuid.UUID) -> ReimbursementRequest:
        result = await self._db.execute(
            select(ReimbursementRequest).where(ReimbursementRequest.id == request_id)
        )
        request = result.scalar_one_or_none()
        if request is None:
            raise NotFoundError("Request", request_id)
        return request

    async def get_for_update(self, request_id: uuid.UUID) -> ReimbursementRequest:
        result = await self._db.execute(
            select(ReimbursementRequest)
            .where(ReimbursementRequest.id == request_id)
            .with_for_update()
        )
        request = result.scalar_one_or_none()
        if request is None:
            raise NotFoundError("Request", request_id)
        return request

    async def list_for_employee(self, employee_id: uuid.UUID) -> list[ReimbursementRequest]:
        result = await self._db.execute(
            select(ReimbursementRequest)
            .where(ReimbursementRequest.employee_id == employee_id)
            .order_by(ReimbursementRequest.submitted_at.desc())
        )
        return list(result.scalars().all())

    async def list_all(self, status: RequestStatus | None = None) -> list[ReimbursementRequest]:
        stmt = select(ReimbursementRequest).order_by(ReimbursementRequest.submitted_at.desc())
        if status is not None:
            stmt = stmt.where(ReimbursementRequest.status == status.value)
        result = await self._db.execute(stmt)
        return list(result.scalars().all())

    async def add(self, request: ReimbursementRequest) -> ReimbursementRequest:
        self._db.add(request)
        await self._db.flush()
        logger.debug("Request stored: id=%s", request.id)
        return request

    async def save(self, request: ReimbursementRequest) -> None:
        await self._db.flush()

    async def count_by_status(self) -> dict[str, int]:
        result = await self._db.execute(
            select(ReimbursementRequest.status, func.count(ReimbursementRequest.id))
            .group_by(ReimbursementRequest.status)
        )
        counts = {status.value: 0 for status in RequestStatus}
        for status, count in result.all():
            counts[status] = count
        return counts
