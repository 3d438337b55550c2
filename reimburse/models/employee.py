"""Employee model — anyone who can submit or act on a reimbursement request."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from reimburse.models.base import Base, TimestampMixin
from reimburse.models.enums import Category, UserRole

if TYPE_CHECKING:
    from reimburse.models.request import ReimbursementRequest


class Employee(TimestampMixin, Base):
    """An employee, IT admin, or finance operator."""

    __tablename__ = "employees"

    # Identifiers
    employee_code: Mapped[str] = mapped_column(String(50), unique=True, index=True, comment="e.g. EMP003")
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)

    # Profile
    name: Mapped[str] = mapped_column(String(200))
    role: Mapped[str] = mapped_column(String(20), default=UserRole.EMPLOYEE.value)
    category: Mapped[str] = mapped_column(String(20), default=Category.NON_DEVELOPER.value)
    joining_date: Mapped[date] = mapped_column(Date, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    # Relationships
    requests: Mapped[list[ReimbursementRequest]] = relationship(
        "ReimbursementRequest", back_populates="employee", lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<Employee code={self.employee_code} role={self.role} active={self.is_active}>"
