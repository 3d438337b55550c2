"""Reimbursement request model — one laptop purchase claim and its payout plan.

All financial amounts use Numeric(12,2) / Decimal, never float.
`base_reimbursement_amount` is written once at submission and is the only
input to depreciation; `reimbursement_amount` is the payable figure and is
overwritten when the request is processed.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from reimburse.models.base import Base, TimestampMixin
from reimburse.models.enums import RequestStatus

if TYPE_CHECKING:
    from reimburse.models.employee import Employee


class ReimbursementRequest(TimestampMixin, Base):
    """A laptop reimbursement request."""

    __tablename__ = "reimbursement_requests"

    # Foreign keys
    employee_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("employees.id"), nullable=False, index=True
    )

    # Snapshot of the employee at submission
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    joining_date: Mapped[date] = mapped_column(Date, nullable=False)
    category: Mapped[str] = mapped_column(String(20), nullable=False)

    # Invoice
    laptop_purchase_date: Mapped[date] = mapped_column(Date, nullable=False)
    invoice_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    windows_pro_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    invoice_file: Mapped[str | None] = mapped_column(String(500), comment="Opaque storage key")

    # Amounts
    base_reimbursement_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, comment="Capped amount before depreciation"
    )
    reimbursement_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    # Workflow
    status: Mapped[str] = mapped_column(String(20), default=RequestStatus.PENDING.value, index=True)
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    comments: Mapped[str | None] = mapped_column(Text)
    updated_by: Mapped[str | None] = mapped_column(String(100))

    # Depreciation (set at processing)
    depreciation_type: Mapped[str | None] = mapped_column(String(20))
    depreciation_value: Mapped[str | None] = mapped_column(String(20), comment="Percentage as string, e.g. '40'")

    # Installment plan (set at processing)
    processed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), index=True)
    monthly_installment: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    final_installment: Mapped[Decimal | None] = mapped_column(
        Numeric(12, 2), comment="Last installment including rounding true-up"
    )
    installment_start_date: Mapped[date | None] = mapped_column(Date)
    installment_end_date: Mapped[date | None] = mapped_column(Date)
    next_eligible_date: Mapped[date | None] = mapped_column(Date)

    # Relationships
    employee: Mapped[Employee] = relationship("Employee", back_populates="requests")

    def __repr__(self) -> str:
        return f"<ReimbursementRequest id={self.id} status={self.status} amount={self.reimbursement_amount}>"
