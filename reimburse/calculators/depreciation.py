"""Age-based depreciation calculator.

Pure Python, Decimal arithmetic. A laptop bought before the employee joined
is worth less than its invoice by the time the company reimburses it:

- Age = whole calendar months from purchase to joining date
- Straight-line 20% per year (20% / 12 per month)
- Total depreciation capped at 80%, so at least 20% is always reimbursed

Purchases on or after the joining date, and purchases less than one full
month before it, are not depreciated.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import ROUND_CEILING, Decimal

from reimburse.calculators.reimbursement import to_amount, to_unit
from reimburse.dates import DateInput, add_months, to_date, whole_months_between
from reimburse.schemas.calculators import DepreciationResult, MonthlyDepreciation

logger = logging.getLogger(__name__)

ANNUAL_DEPRECIATION_RATE = Decimal("0.20")
MONTHLY_DEPRECIATION_RATE = ANNUAL_DEPRECIATION_RATE / 12
MAX_DEPRECIATION_RATE = Decimal("0.80")
BREAKDOWN_MAX_MONTHS = 48


def _residual_floor(original: Decimal) -> Decimal:
    """Smallest amount depreciation may leave, in whole units."""
    floor = (original * (1 - MAX_DEPRECIATION_RATE)).quantize(Decimal("1"), rounding=ROUND_CEILING)
    return min(floor, original)


def total_depreciation_rate(months_old: int) -> Decimal:
    """Straight-line rate for an asset ``months_old`` months old, capped at 80%."""
    rate = Decimal(months_old) * ANNUAL_DEPRECIATION_RATE / 12
    return min(rate, MAX_DEPRECIATION_RATE)


def _monthly_breakdown(
    purchased: date,
    original: Decimal,
    months_old: int,
) -> list[MonthlyDepreciation]:
    """Month-by-month running value, reducing by the monthly rate each step."""
    floor = original * (1 - MAX_DEPRECIATION_RATE)
    rows: list[MonthlyDepreciation] = []
    value = original
    for month in range(1, min(months_old, BREAKDOWN_MAX_MONTHS) + 1):
        next_value = max(value * (1 - MONTHLY_DEPRECIATION_RATE), floor)
        rows.append(MonthlyDepreciation(
            month=month,
            label=add_months(purchased, month).strftime("%b %Y"),
            value=to_unit(next_value),
            depreciation=to_unit(value - next_value),
        ))
        value = next_value
    return rows


def calculate_depreciation(
    purchase_date: DateInput,
    joining_date: DateInput,
    original_amount: Decimal | int | float | str,
    include_monthly_breakdown: bool = False,
) -> DepreciationResult:
    """Depreciate a reimbursement amount by the asset's age at joining.

    Args:
        purchase_date: Date the laptop was bought.
        joining_date: Date the employee joined.
        original_amount: Amount before depreciation.
        include_monthly_breakdown: Attach up to 48 informational monthly rows.

    Returns:
        DepreciationResult with the final amount, age in months, and rate.

    Raises:
        InvalidInputError: On malformed dates or an invalid amount.
    """
    purchased = to_date(purchase_date, "purchase_date")
    joined = to_date(joining_date, "joining_date")
    original = to_amount(original_amount, "original_amount")

    months_old = whole_months_between(purchased, joined)

    # Bought on/after joining, or less than a full month before
    if months_old == 0:
        return DepreciationResult(
            depreciated_amount=original,
            depreciation_applied=False,
            months_old=0,
            depreciation_percentage=0,
            monthly_breakdown=[] if include_monthly_breakdown else None,
        )

    rate = total_depreciation_rate(months_old)
    percentage = int(to_unit(rate * 100))
    depreciated = max(to_unit(original * (1 - rate)), _residual_floor(original))

    logger.debug(
        "Depreciation: purchase=%s joining=%s months=%d rate=%s%% %s -> %s",
        purchased,
        joined,
        months_old,
        percentage,
        original,
        depreciated,
    )

    return DepreciationResult(
        depreciated_amount=depreciated,
        depreciation_applied=True,
        months_old=months_old,
        depreciation_percentage=percentage,
        monthly_breakdown=(
            _monthly_breakdown(purchased, original, months_old) if include_monthly_breakdown else None
        ),
    )
