"""Pydantic schemas for calculator inputs and results.

Pure data classes with no business logic or DB dependencies. Used as inputs
and return types by the depreciation and installment calculators.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from reimburse.dates import to_date
from reimburse.models.enums import Category, DepreciationType, RequestStatus

# Accepts date, datetime, or ISO string; stored at day resolution.
CalendarDate = Annotated[date, BeforeValidator(to_date)]


# ---------------------------------------------------------------------------
# Depreciation
# ---------------------------------------------------------------------------


class MonthlyDepreciation(BaseModel):
    """One row of the informational month-by-month breakdown."""

    month: int                  # 1-based month after purchase
    label: str                  # e.g. "Feb 2022"
    value: Decimal              # running value at the end of the month
    depreciation: Decimal       # amount lost during the month


class DepreciationResult(BaseModel):
    """Age-based depreciation of a reimbursement amount."""

    depreciated_amount: Decimal
    depreciation_applied: bool
    months_old: int
    depreciation_percentage: int    # capped at 80
    monthly_breakdown: list[MonthlyDepreciation] | None = None


# ---------------------------------------------------------------------------
# Processing / installments
# ---------------------------------------------------------------------------


class RequestSnapshot(BaseModel):
    """Calculation-relevant subset of a stored reimbursement request."""

    model_config = ConfigDict(from_attributes=True)

    laptop_purchase_date: CalendarDate
    joining_date: CalendarDate
    category: Category
    invoice_amount: Decimal = Field(ge=0)
    windows_pro_amount: Decimal = Field(default=Decimal("0"), ge=0)
    base_reimbursement_amount: Decimal | None = Field(default=None, ge=0)
    reimbursement_amount: Decimal = Field(ge=0)
    status: RequestStatus = RequestStatus.APPROVED
    processed_at: datetime | None = None


class Installment(BaseModel):
    """A single monthly payout."""

    number: int                 # 1..24
    due_date: date              # first day of the payout month
    amount: Decimal


class InstallmentSchedule(BaseModel):
    """24-month payout plan for a processed request."""

    monthly_installment: Decimal
    final_installment: Decimal  # absorbs the rounding remainder
    installment_start_date: date
    installment_end_date: date
    next_eligible_date: date
    installments: list[Installment]


class ProcessingResult(BaseModel):
    """Fields written onto a request when it enters ``processed``."""

    reimbursement_amount: Decimal
    depreciation_type: DepreciationType | None = None
    depreciation_value: str | None = None
    depreciation: DepreciationResult
    processed_at: datetime
    schedule: InstallmentSchedule

    @property
    def monthly_installment(self) -> Decimal:
        return self.schedule.monthly_installment

    @property
    def installment_start_date(self) -> date:
        return self.schedule.installment_start_date

    @property
    def installment_end_date(self) -> date:
        return self.schedule.installment_end_date

    @property
    def next_eligible_date(self) -> date:
        return self.schedule.next_eligible_date

    def as_update(self) -> dict[str, object]:
        """Flatten into column values for the persisted request."""
        return {
            "reimbursement_amount": self.reimbursement_amount,
            "depreciation_type": self.depreciation_type.value if self.depreciation_type else None,
            "depreciation_value": self.depreciation_value,
            "processed_at": self.processed_at,
            "monthly_installment": self.schedule.monthly_installment,
            "final_installment": self.schedule.final_installment,
            "installment_start_date": self.schedule.installment_start_date,
            "installment_end_date": self.schedule.installment_end_date,
            "next_eligible_date": self.schedule.next_eligible_date,
        }
