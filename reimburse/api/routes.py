"""HTTP API — calculation previews, eligibility, employees, and the request workflow.

JSON only. Authentication is handled outside this service; the acting
user's id is passed in the body of status and account changes.
"""
# ruff: noqa: B008

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from reimburse.calculators.depreciation import calculate_depreciation
from reimburse.calculators.reimbursement import category_cap, compute_base_reimbursement
from reimburse.db.engine import get_session
from reimburse.formatters import format_currency
from reimburse.models.enums import RequestStatus
from reimburse.schemas.api import (
    ActiveIn,
    BaseReimbursementIn,
    BaseReimbursementOut,
    DepreciationIn,
    EmployeeIn,
    EmployeeOut,
    RequestOut,
    StatusChangeIn,
    SubmitRequestIn,
)
from reimburse.schemas.calculators import DepreciationResult
from reimburse.schemas.eligibility import EligibilityResult
from reimburse.stores.sql import SqlEmployeeStore, SqlRequestStore
from reimburse.workflow.employees import EmployeeService
from reimburse.workflow.service import ReimbursementService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["reimbursements"])


def get_service(db: AsyncSession = Depends(get_session)) -> ReimbursementService:
    """Build a service bound to the request-scoped DB session."""
    return ReimbursementService(SqlRequestStore(db), SqlEmployeeStore(db))


def get_employee_service(db: AsyncSession = Depends(get_session)) -> EmployeeService:
    return EmployeeService(SqlEmployeeStore(db), SqlRequestStore(db))


# ── Calculation previews ─────────────────────────────────────────────


@router.post("/calculations/base", response_model=BaseReimbursementOut)
async def preview_base_reimbursement(body: BaseReimbursementIn) -> BaseReimbursementOut:
    """Capped reimbursement for an invoice, before depreciation."""
    amount = compute_base_reimbursement(body.invoice_amount, body.windows_pro_amount, body.category)
    return BaseReimbursementOut(
        reimbursement_amount=amount,
        cap=category_cap(body.category),
        formatted=format_currency(amount),
    )


@router.post("/calculations/depreciation", response_model=DepreciationResult)
async def preview_depreciation(body: DepreciationIn) -> DepreciationResult:
    """Depreciation for a purchase/joining date pair, optionally month by month."""
    return calculate_depreciation(
        body.purchase_date,
        body.joining_date,
        body.original_amount,
        include_monthly_breakdown=body.include_monthly_breakdown,
    )


# ── Eligibility ──────────────────────────────────────────────────────


@router.get("/employees/{employee_id}/eligibility", response_model=EligibilityResult)
async def employee_eligibility(
    employee_id: uuid.UUID,
    service: ReimbursementService = Depends(get_service),
) -> EligibilityResult:
    """Can this employee submit a new request today?"""
    return await service.check_employee_eligibility(employee_id)


# ── Employees ────────────────────────────────────────────────────────


@router.post("/employees", response_model=EmployeeOut, status_code=201)
async def create_employee(
    body: EmployeeIn,
    service: EmployeeService = Depends(get_employee_service),
) -> EmployeeOut:
    """Register an employee; the account starts active."""
    employee = await service.create_employee(
        body.employee_code,
        body.email,
        body.joining_date,
        body.category,
        role=body.role,
        name=body.name,
        actor_id=body.actor_id,
    )
    return EmployeeOut.model_validate(employee)


@router.get("/employees", response_model=list[EmployeeOut])
async def list_employees(
    active: bool | None = None,
    service: EmployeeService = Depends(get_employee_service),
) -> list[EmployeeOut]:
    return [EmployeeOut.model_validate(e) for e in await service.list_employees(active)]


@router.post("/employees/{employee_id}/active", response_model=EmployeeOut)
async def set_employee_active(
    employee_id: uuid.UUID,
    body: ActiveIn,
    service: EmployeeService = Depends(get_employee_service),
) -> EmployeeOut:
    """Enable or disable an account."""
    employee = await service.set_active(employee_id, body.is_active, actor_id=body.actor_id)
    return EmployeeOut.model_validate(employee)


@router.delete("/employees/{employee_id}", status_code=204)
async def delete_employee(
    employee_id: uuid.UUID,
    service: EmployeeService = Depends(get_employee_service),
) -> None:
    """Delete an account that has no requests."""
    await service.delete_employee(employee_id)


# ── Requests ─────────────────────────────────────────────────────────


@router.post("/requests", response_model=RequestOut, status_code=201)
async def submit_request(
    body: SubmitRequestIn,
    service: ReimbursementService = Depends(get_service),
) -> RequestOut:
    """Submit a new reimbursement request."""
    request = await service.submit_request(
        body.employee_id,
        body.laptop_purchase_date,
        body.invoice_amount,
        category=body.category,
        windows_pro_amount=body.windows_pro_amount,
        invoice_file=body.invoice_file,
    )
    return RequestOut.model_validate(request)


@router.get("/requests", response_model=list[RequestOut])
async def list_requests(
    status: RequestStatus | None = None,
    service: ReimbursementService = Depends(get_service),
) -> list[RequestOut]:
    """All requests, newest first, optionally filtered by status."""
    return [RequestOut.model_validate(r) for r in await service.list_requests(status)]


# Declared before /requests/{request_id} so "stats" is not parsed as an id
@router.get("/requests/stats")
async def request_stats(service: ReimbursementService = Depends(get_service)) -> dict[str, int]:
    """Number of requests per status."""
    return await service.status_counts()


@router.get("/requests/{request_id}", response_model=RequestOut)
async def get_request(
    request_id: uuid.UUID,
    service: ReimbursementService = Depends(get_service),
) -> RequestOut:
    """Fetch a single request."""
    return RequestOut.model_validate(await service.get_request(request_id))


@router.post("/requests/{request_id}/status", response_model=RequestOut)
async def change_status(
    request_id: uuid.UUID,
    body: StatusChangeIn,
    service: ReimbursementService = Depends(get_service),
) -> RequestOut:
    """Approve, reject, process, or mark a request as paid."""
    request = await service.update_status(
        request_id,
        body.status,
        actor_id=body.actor_id,
        comments=body.comments,
        actor_role=body.actor_role,
    )
    return RequestOut.model_validate(request)
