"""Installment schedule calculator — runs when a request enters ``processed``.

Pure Python, Decimal arithmetic. Implements:
- Final amount: depreciation re-derived from the stored base reimbursement
- 24 monthly installments, the last one absorbing the rounding remainder
- Payout window: 1st of next month → last day of the 24th month
- Re-eligibility: 36 calendar months after processing

Business rules:
- Depreciation is always computed from ``base_reimbursement_amount`` (the
  capped amount written at submission), never from the payable amount, so
  it can never compound.
- A request that already carries ``processed_at`` (or is processed/paid)
  is rejected instead of being recomputed.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import ROUND_FLOOR, Decimal

from reimburse.calculators.depreciation import calculate_depreciation
from reimburse.calculators.reimbursement import to_amount, to_unit
from reimburse.dates import DateInput, add_months, first_day_of_next_month, last_day_of_month, to_datetime
from reimburse.errors import AlreadyProcessedError
from reimburse.models.enums import DepreciationType, RequestStatus
from reimburse.schemas.calculators import (
    Installment,
    InstallmentSchedule,
    ProcessingResult,
    RequestSnapshot,
)

logger = logging.getLogger(__name__)

INSTALLMENT_COUNT = 24
ELIGIBILITY_COOLDOWN_MONTHS = 36

_ALREADY_PROCESSED = {RequestStatus.PROCESSED, RequestStatus.PAID}


def split_installments(amount: Decimal | int | str) -> tuple[Decimal, Decimal]:
    """Split an amount into 23 equal installments plus a true-up.

    The regular installment is ``round(amount / 24)``; the final one is
    whatever remains so the 24 parts sum exactly to ``amount``. If rounding
    up would leave a negative final part (tiny amounts), the regular part
    rounds down instead.

    Returns:
        (monthly_installment, final_installment)
    """
    total = to_amount(amount, "reimbursement_amount")
    monthly = to_unit(total / INSTALLMENT_COUNT)
    if monthly * (INSTALLMENT_COUNT - 1) > total:
        monthly = (total / INSTALLMENT_COUNT).quantize(Decimal("1"), rounding=ROUND_FLOOR)
    final = total - monthly * (INSTALLMENT_COUNT - 1)
    return monthly, final


def build_installment_schedule(amount: Decimal | int | str, now: DateInput) -> InstallmentSchedule:
    """Build the 24-month payout plan for ``amount`` processed at ``now``."""
    processed_on: date = to_datetime(now).date()
    monthly, final = split_installments(amount)

    start = first_day_of_next_month(processed_on)
    end = last_day_of_month(add_months(start, INSTALLMENT_COUNT - 1))

    installments = [
        Installment(
            number=n,
            due_date=add_months(start, n - 1),
            amount=final if n == INSTALLMENT_COUNT else monthly,
        )
        for n in range(1, INSTALLMENT_COUNT + 1)
    ]

    return InstallmentSchedule(
        monthly_installment=monthly,
        final_installment=final,
        installment_start_date=start,
        installment_end_date=end,
        next_eligible_date=add_months(processed_on, ELIGIBILITY_COOLDOWN_MONTHS),
        installments=installments,
    )


def apply_processing(request: RequestSnapshot, now: DateInput | None = None) -> ProcessingResult:
    """Compute the fields a request receives on entering ``processed``.

    Args:
        request: Calculation subset of the stored request.
        now: Processing timestamp (defaults to current UTC time).

    Returns:
        ProcessingResult with the final amount, depreciation marker, and schedule.

    Raises:
        AlreadyProcessedError: If the request was processed before.
    """
    if request.processed_at is not None or request.status in _ALREADY_PROCESSED:
        msg = f"Request already processed (status={request.status.value}, processed_at={request.processed_at})"
        raise AlreadyProcessedError(msg)

    processed_at = to_datetime(now)

    # Older records have no base field; their payable amount is still undepreciated
    base = (
        request.base_reimbursement_amount
        if request.base_reimbursement_amount is not None
        else request.reimbursement_amount
    )

    depreciation = calculate_depreciation(
        request.laptop_purchase_date,
        request.joining_date,
        base,
    )
    final_amount = depreciation.depreciated_amount
    schedule = build_installment_schedule(final_amount, processed_at)

    logger.info(
        "Processed reimbursement: base=%s final=%s depreciation=%s%% monthly=%s start=%s end=%s next_eligible=%s",
        base,
        final_amount,
        depreciation.depreciation_percentage,
        schedule.monthly_installment,
        schedule.installment_start_date,
        schedule.installment_end_date,
        schedule.next_eligible_date,
    )

    return ProcessingResult(
        reimbursement_amount=final_amount,
        depreciation_type=DepreciationType.YEARLY if depreciation.depreciation_applied else None,
        depreciation_value=str(depreciation.depreciation_percentage) if depreciation.depreciation_applied else None,
        depreciation=depreciation,
        processed_at=processed_at,
        schedule=schedule,
    )
