"""Initial schema: employees, reimbursement requests, audit log.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from __future__ import annotations

from typing import Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, tuple[str, ...], None] = None
depends_on: Union[str, tuple[str, ...], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    # ── Standalone tables (no FKs) ─────────────────────────────────────

    op.create_table(
        "audit_log",
        sa.Column("event_type", sa.String(100), nullable=False, index=True),
        sa.Column("request_id", postgresql.UUID(as_uuid=True), index=True),
        sa.Column("actor_id", sa.String(100), comment="Employee ID or 'system'"),
        sa.Column("actor_role", sa.String(50), comment="employee, it_admin, finance, system"),
        sa.Column("data", postgresql.JSONB(astext_type=sa.Text())),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "employees",
        sa.Column("employee_code", sa.String(50), nullable=False, comment="e.g. EMP003"),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("joining_date", sa.Date(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_employees_employee_code", "employees", ["employee_code"], unique=True)
    op.create_index("ix_employees_email", "employees", ["email"], unique=True)
    op.create_index("ix_employees_is_active", "employees", ["is_active"])

    # ── Dependent tables ───────────────────────────────────────────────

    op.create_table(
        "reimbursement_requests",
        sa.Column(
            "employee_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("employees.id"),
            nullable=False,
            index=True,
        ),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("joining_date", sa.Date(), nullable=False),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("laptop_purchase_date", sa.Date(), nullable=False),
        sa.Column("invoice_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("windows_pro_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("invoice_file", sa.String(500), comment="Opaque storage key"),
        sa.Column(
            "base_reimbursement_amount", sa.Numeric(12, 2), nullable=False,
            comment="Capped amount before depreciation",
        ),
        sa.Column("reimbursement_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, index=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("comments", sa.Text()),
        sa.Column("updated_by", sa.String(100)),
        sa.Column("depreciation_type", sa.String(20)),
        sa.Column("depreciation_value", sa.String(20), comment="Percentage as string, e.g. '40'"),
        sa.Column("processed_at", sa.DateTime(timezone=True), index=True),
        sa.Column("monthly_installment", sa.Numeric(12, 2)),
        sa.Column("final_installment", sa.Numeric(12, 2), comment="Last installment including rounding true-up"),
        sa.Column("installment_start_date", sa.Date()),
        sa.Column("installment_end_date", sa.Date()),
        sa.Column("next_eligible_date", sa.Date()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    # Drop in reverse dependency order
    op.drop_table("reimbursement_requests")
    op.drop_index("ix_employees_is_active", table_name="employees")
    op.drop_index("ix_employees_email", table_name="employees")
    op.drop_index("ix_employees_employee_code", table_name="employees")
    op.drop_table("employees")
    op.drop_table("audit_log")
