"""Request and response bodies for the HTTP API."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from reimburse.models.enums import Category, RequestStatus, UserRole
from reimburse.schemas.calculators import CalendarDate


class BaseReimbursementIn(BaseModel):
    invoice_amount: Decimal = Field(ge=0)
    windows_pro_amount: Decimal = Field(default=Decimal("0"), ge=0)
    category: Category


class BaseReimbursementOut(BaseModel):
    reimbursement_amount: Decimal
    cap: Decimal
    formatted: str


class DepreciationIn(BaseModel):
    purchase_date: CalendarDate
    joining_date: CalendarDate
    original_amount: Decimal = Field(ge=0)
    include_monthly_breakdown: bool = False


class SubmitRequestIn(BaseModel):
    employee_id: uuid.UUID
    laptop_purchase_date: CalendarDate
    invoice_amount: Decimal = Field(ge=0)
    category: Category | None = None
    windows_pro_amount: Decimal = Field(default=Decimal("0"), ge=0)
    invoice_file: str | None = None


class StatusChangeIn(BaseModel):
    status: RequestStatus
    actor_id: str
    actor_role: str | None = None
    comments: str | None = None


class EmployeeIn(BaseModel):
    employee_code: str = Field(min_length=1, max_length=50)
    email: str = Field(min_length=3, max_length=255)
    joining_date: CalendarDate
    category: Category
    role: UserRole = UserRole.EMPLOYEE
    name: str | None = Field(default=None, max_length=200)
    actor_id: str | None = None


class ActiveIn(BaseModel):
    is_active: bool
    actor_id: str | None = None


class EmployeeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    employee_code: str
    email: str
    name: str
    role: UserRole
    category: Category
    joining_date: date
    is_active: bool


class RequestOut(BaseModel):
    """A stored request as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    employee_id: uuid.UUID
    email: str
    joining_date: date
    category: Category
    laptop_purchase_date: date
    invoice_amount: Decimal
    windows_pro_amount: Decimal
    invoice_file: str | None = None
    base_reimbursement_amount: Decimal
    reimbursement_amount: Decimal
    status: RequestStatus
    submitted_at: datetime
    comments: str | None = None
    updated_by: str | None = None
    depreciation_type: str | None = None
    depreciation_value: str | None = None
    processed_at: datetime | None = None
    monthly_installment: Decimal | None = None
    final_installment: Decimal | None = None
    installment_start_date: date | None = None
    installment_end_date: date | None = None
    next_eligible_date: date | None = None
