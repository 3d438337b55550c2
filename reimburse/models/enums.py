"""Domain enums used across SQLAlchemy models and Pydantic schemas.

All enums use str mixin for JSON serialization and database storage as plain strings.
"""

from __future__ import annotations

from enum import Enum


class Category(str, Enum):
    """Employee category — selects the reimbursement cap."""

    DEVELOPER = "Developer"
    NON_DEVELOPER = "Non-Developer"


class RequestStatus(str, Enum):
    """Reimbursement request lifecycle states."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PROCESSED = "processed"
    PAID = "paid"


class DepreciationType(str, Enum):
    """How the depreciation value on a request is expressed."""

    MONTHLY = "monthly"
    YEARLY = "yearly"


class UserRole(str, Enum):
    """Who may act on a request."""

    EMPLOYEE = "employee"
    IT_ADMIN = "it_admin"
    FINANCE = "finance"
