"""Reimbursement workflow service — submission, status changes, processing.

Orchestrates the pure calculators around injected stores:
- Submission checks eligibility, caps the invoice, and stores a pending request
- Status changes follow the transition map
- Entering ``processed`` applies depreciation and the installment plan

The caller owns the transaction; ``update_status`` loads the request with
``get_for_update`` so concurrent processing of one request serialises.
"""

from __future__ import annotations

import logging
import uuid
from datetime import timedelta
from decimal import Decimal

from reimburse.calculators.installments import apply_processing
from reimburse.calculators.reimbursement import compute_base_reimbursement, parse_category, to_amount
from reimburse.dates import DateInput, to_date, to_datetime
from reimburse.eligibility.engine import check_eligibility
from reimburse.errors import IneligibleError, InvalidInputError
from reimburse.events import emit
from reimburse.models.enums import Category, RequestStatus
from reimburse.models.request import ReimbursementRequest
from reimburse.schemas.calculators import RequestSnapshot
from reimburse.schemas.eligibility import EligibilityResult
from reimburse.schemas.events import EventType, SystemEvent
from reimburse.stores.base import EmployeeStore, RequestStore
from reimburse.workflow.transitions import validate_transition

logger = logging.getLogger(__name__)

# Submission time is UTC; an invoice dated "today" in a timezone ahead of
# UTC may fall on the next UTC day.
PURCHASE_DATE_SLACK = timedelta(days=1)


class ReimbursementService:
    """Moves reimbursement requests through their lifecycle."""

    def __init__(self, requests: RequestStore, employees: EmployeeStore) -> None:
        self._requests = requests
        self._employees = employees

    async def check_employee_eligibility(
        self,
        employee_id: uuid.UUID,
        now: DateInput | None = None,
    ) -> EligibilityResult:
        """Run the tenure and cooldown gates for an employee."""
        employee = await self._employees.get(employee_id)
        history = await self._requests.list_for_employee(employee_id)
        result = check_eligibility(employee.joining_date, history, now)

        await emit(SystemEvent(
            event_type=EventType.ELIGIBILITY_CHECKED,
            employee_id=employee.id,
            data={
                "eligible": result.eligible,
                "rule": result.rule.value if result.rule else None,
                "next_eligible_date": str(result.next_eligible_date) if result.next_eligible_date else None,
            },
            source_module="workflow.service",
        ))
        return result

    async def submit_request(
        self,
        employee_id: uuid.UUID,
        laptop_purchase_date: DateInput,
        invoice_amount: Decimal | int | float | str,
        category: Category | str | None = None,
        windows_pro_amount: Decimal | int | float | str = Decimal("0"),
        invoice_file: str | None = None,
        now: DateInput | None = None,
    ) -> ReimbursementRequest:
        """Create a pending request with its capped base reimbursement.

        Args:
            employee_id: Submitting employee.
            laptop_purchase_date: Invoice date of the laptop.
            invoice_amount: Laptop invoice total.
            category: Cap category; defaults to the employee's category.
            windows_pro_amount: Optional OS upgrade invoice.
            invoice_file: Opaque storage key of the uploaded invoice.
            now: Submission time (defaults to current UTC time).

        Raises:
            NotFoundError: Unknown employee.
            IneligibleError: Inactive employee, tenure, or cooldown.
            InvalidInputError: Bad amounts, dates, or category.
        """
        submitted_at = to_datetime(now)
        employee = await self._employees.get(employee_id)

        if not employee.is_active:
            raise IneligibleError(EligibilityResult(eligible=False, reason="Employee account is inactive"))

        purchased = to_date(laptop_purchase_date, "laptop_purchase_date")
        if purchased > submitted_at.date() + PURCHASE_DATE_SLACK:
            raise InvalidInputError(f"laptop_purchase_date {purchased} is in the future")

        resolved_category = parse_category(category if category is not None else employee.category)
        invoice = to_amount(invoice_amount, "invoice_amount")
        windows_pro = to_amount(windows_pro_amount, "windows_pro_amount")

        history = await self._requests.list_for_employee(employee_id)
        eligibility = check_eligibility(employee.joining_date, history, submitted_at)
        if not eligibility.eligible:
            await emit(SystemEvent(
                event_type=EventType.SUBMISSION_REFUSED,
                employee_id=employee.id,
                actor_id=str(employee.id),
                actor_role=employee.role,
                data={"reason": eligibility.reason, "rule": eligibility.rule.value if eligibility.rule else None},
                source_module="workflow.service",
            ))
            raise IneligibleError(eligibility)

        base = compute_base_reimbursement(invoice, windows_pro, resolved_category)

        request = ReimbursementRequest(
            id=uuid.uuid4(),
            employee_id=employee.id,
            email=employee.email,
            joining_date=employee.joining_date,
            category=resolved_category.value,
            laptop_purchase_date=purchased,
            invoice_amount=invoice,
            windows_pro_amount=windows_pro,
            invoice_file=invoice_file,
            base_reimbursement_amount=base,
            reimbursement_amount=base,
            status=RequestStatus.PENDING.value,
            submitted_at=submitted_at,
        )
        await self._requests.add(request)

        await emit(SystemEvent(
            event_type=EventType.REQUEST_SUBMITTED,
            request_id=request.id,
            employee_id=employee.id,
            actor_id=str(employee.id),
            actor_role=employee.role,
            data={
                "category": resolved_category.value,
                "invoice_amount": str(invoice),
                "windows_pro_amount": str(windows_pro),
                "reimbursement_amount": str(base),
            },
            source_module="workflow.service",
        ))

        logger.info(
            "Request submitted: id=%s employee=%s category=%s base=%s",
            request.id,
            employee.id,
            resolved_category.value,
            base,
        )
        return request

    async def update_status(
        self,
        request_id: uuid.UUID,
        status: RequestStatus | str,
        actor_id: str,
        comments: str | None = None,
        actor_role: str | None = None,
        now: DateInput | None = None,
    ) -> ReimbursementRequest:
        """Move a request to a new status; entering ``processed`` computes the payout plan.

        Raises:
            NotFoundError: Unknown request.
            InvalidTransitionError: Move not allowed from the current status.
            AlreadyProcessedError: Request already carries processing results.
        """
        try:
            target = RequestStatus(status)
        except ValueError as exc:
            raise InvalidInputError(f"Unknown status: {status!r}") from exc

        request = await self._requests.get_for_update(request_id)
        current = RequestStatus(request.status)
        validate_transition(current, target)

        if target == RequestStatus.PROCESSED:
            result = apply_processing(RequestSnapshot.model_validate(request), now)
            for field, value in result.as_update().items():
                setattr(request, field, value)

        request.status = target.value
        request.comments = comments
        request.updated_by = actor_id
        await self._requests.save(request)

        await emit(SystemEvent(
            event_type=EventType.REQUEST_STATUS_CHANGED,
            request_id=request.id,
            employee_id=request.employee_id,
            actor_id=actor_id,
            actor_role=actor_role,
            data={"from": current.value, "to": target.value, "comments": comments},
            source_module="workflow.service",
        ))

        if target == RequestStatus.PROCESSED:
            await emit(SystemEvent(
                event_type=EventType.REQUEST_PROCESSED,
                request_id=request.id,
                employee_id=request.employee_id,
                actor_id=actor_id,
                actor_role=actor_role,
                data={
                    "reimbursement_amount": str(request.reimbursement_amount),
                    "monthly_installment": str(request.monthly_installment),
                    "installment_start_date": str(request.installment_start_date),
                    "installment_end_date": str(request.installment_end_date),
                    "next_eligible_date": str(request.next_eligible_date),
                },
                source_module="workflow.service",
            ))

        logger.info(
            "Request status changed: id=%s %s -> %s by=%s",
            request.id,
            current.value,
            target.value,
            actor_id,
        )
        return request

    async def get_request(self, request_id: uuid.UUID) -> ReimbursementRequest:
        """Load a request by id."""
        return await self._requests.get(request_id)

    async def list_requests(self, status: RequestStatus | str | None = None) -> list[ReimbursementRequest]:
        """All requests, newest first; ``status`` narrows to one queue."""
        if status is None:
            return await self._requests.list_all()
        try:
            target = RequestStatus(status)
        except ValueError as exc:
            raise InvalidInputError(f"Unknown status: {status!r}") from exc
        return await self._requests.list_all(target)

    async def status_counts(self) -> dict[str, int]:
        """Number of requests per status, plus ``total``."""
        counts = await self._requests.count_by_status()
        return {"total": sum(counts.values()), **counts}
