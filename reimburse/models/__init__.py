"""SQLAlchemy ORM models for the reimbursement service.

Import all models here so Alembic and Base.metadata.create_all() discover them.
"""

from __future__ import annotations

from reimburse.models.audit import AuditLog
from reimburse.models.base import Base
from reimburse.models.employee import Employee
from reimburse.models.enums import Category, DepreciationType, RequestStatus, UserRole
from reimburse.models.request import ReimbursementRequest

__all__ = [
    # Base
    "Base",
    # Models
    "Employee",
    "ReimbursementRequest",
    "AuditLog",
    # Enums
    "Category",
    "RequestStatus",
    "DepreciationType",
    "UserRole",
]
