"""Employee accounts — registration, activation, and removal.

IT admins register employees before they can submit requests. Deactivated
accounts keep their history but may not submit; an account can only be
deleted while it has no requests.
"""

from __future__ import annotations

import logging
import uuid

from reimburse.calculators.reimbursement import parse_category
from reimburse.dates import DateInput, to_date
from reimburse.errors import DuplicateEmployeeError, EmployeeHasRequestsError, InvalidInputError
from reimburse.events import emit
from reimburse.models.employee import Employee
from reimburse.models.enums import Category, UserRole
from reimburse.schemas.events import EventType, SystemEvent
from reimburse.stores.base import EmployeeStore, RequestStore

logger = logging.getLogger(__name__)


class EmployeeService:
    """Manages employee accounts."""

    def __init__(self, employees: EmployeeStore, requests: RequestStore) -> None:
        self._employees = employees
        self._requests = requests

    async def create_employee(
        self,
        employee_code: str,
        email: str,
        joining_date: DateInput,
        category: Category | str,
        role: UserRole | str = UserRole.EMPLOYEE,
        name: str | None = None,
        actor_id: str | None = None,
    ) -> Employee:
        """Register an active employee.

        Args:
            employee_code: Company identifier, e.g. ``EMP004``.
            email: Login email; stored lower-cased.
            joining_date: First working day.
            category: Selects the reimbursement cap.
            role: ``employee``, ``it_admin`` or ``finance``.
            name: Display name; defaults to the part of the email before ``@``.
            actor_id: Admin performing the registration.

        Raises:
            InvalidInputError: Blank code, malformed email, bad date, role, or category.
            DuplicateEmployeeError: Code or email already registered.
        """
        code = employee_code.strip()
        address = email.strip().lower()
        local, _, domain = address.partition("@")
        if not code:
            raise InvalidInputError("employee_code is required")
        if not local or not domain:
            raise InvalidInputError(f"Invalid email: {email!r}")
        try:
            resolved_role = UserRole(role)
        except ValueError as exc:
            raise InvalidInputError(f"Unknown role: {role!r}") from exc
        resolved_category = parse_category(category)
        joined = to_date(joining_date, "joining_date")

        existing = await self._employees.find_by_code_or_email(code, address)
        if existing is not None:
            field = "employee_code" if existing.employee_code == code else "email"
            raise DuplicateEmployeeError(f"An employee with this {field} already exists")

        employee = Employee(
            id=uuid.uuid4(),
            employee_code=code,
            email=address,
            name=(name or "").strip() or local,
            role=resolved_role.value,
            category=resolved_category.value,
            joining_date=joined,
            is_active=True,
        )
        await self._employees.add(employee)

        await emit(SystemEvent(
            event_type=EventType.EMPLOYEE_CREATED,
            employee_id=employee.id,
            actor_id=actor_id,
            actor_role=UserRole.IT_ADMIN.value if actor_id else None,
            data={"employee_code": code, "role": resolved_role.value, "category": resolved_category.value},
            source_module="workflow.employees",
        ))

        logger.info("Employee registered: id=%s code=%s role=%s", employee.id, code, resolved_role.value)
        return employee

    async def list_employees(self, active: bool | None = None) -> list[Employee]:
        return await self._employees.list_all(active)

    async def set_active(
        self,
        employee_id: uuid.UUID,
        is_active: bool,
        actor_id: str | None = None,
    ) -> Employee:
        """Enable or disable an account. Inactive employees cannot submit."""
        employee = await self._employees.get(employee_id)
        previous = employee.is_active
        employee = await self._employees.set_active(employee_id, is_active)

        if previous != is_active:
            await emit(SystemEvent(
                event_type=EventType.EMPLOYEE_STATUS_CHANGED,
                employee_id=employee.id,
                actor_id=actor_id,
                actor_role=UserRole.IT_ADMIN.value if actor_id else None,
                data={"is_active": is_active},
                source_module="workflow.employees",
            ))
            logger.info("Employee %s: id=%s", "activated" if is_active else "deactivated", employee.id)
        return employee

    async def delete_employee(self, employee_id: uuid.UUID, actor_id: str | None = None) -> None:
        """Remove an account that has never submitted a request.

        Raises:
            NotFoundError: Unknown employee.
            EmployeeHasRequestsError: The employee has requests on file.
        """
        employee = await self._employees.get(employee_id)
        if await self._requests.list_for_employee(employee_id):
            raise EmployeeHasRequestsError("Cannot delete an employee with existing requests")
        await self._employees.delete(employee)

        await emit(SystemEvent(
            event_type=EventType.EMPLOYEE_DELETED,
            employee_id=employee_id,
            actor_id=actor_id,
            actor_role=UserRole.IT_ADMIN.value if actor_id else None,
            data={"employee_code": employee.employee_code},
            source_module="workflow.employees",
        ))
        logger.info("Employee deleted: id=%s code=%s", employee_id, employee.employee_code)
