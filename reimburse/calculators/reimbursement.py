"""Base reimbursement calculator.

Pure Python, Decimal arithmetic. Implements:
- Eligible share of the invoice total (75%)
- Per-category cap

Caps:
  Developer      → 82,000
  Non-Developer  → 72,000

The optional Windows Pro upgrade is added to the invoice before the share
and the cap are applied.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from reimburse.errors import InvalidInputError
from reimburse.models.enums import Category

logger = logging.getLogger(__name__)

REIMBURSABLE_SHARE = Decimal("0.75")

CATEGORY_CAPS: dict[Category, Decimal] = {
    Category.DEVELOPER: Decimal("82000"),
    Category.NON_DEVELOPER: Decimal("72000"),
}

# Largest amount a request column (Numeric(12, 2)) can hold, exclusive
MAX_AMOUNT = Decimal("1e10")


def to_unit(value: Decimal) -> Decimal:
    """Round to a whole currency unit, half up."""
    return value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def to_amount(value: Decimal | int | float | str, field: str = "amount") -> Decimal:
    """Coerce a monetary input to a finite, non-negative Decimal.

    Raises:
        InvalidInputError: On NaN, infinity, negative or oversized values, or
            unparseable input.
    """
    if isinstance(value, bool):
        raise InvalidInputError(f"Invalid {field}: {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise InvalidInputError(f"Invalid {field}: {value!r}") from exc
    if not amount.is_finite():
        raise InvalidInputError(f"Invalid {field}: {value!r}")
    if amount < 0:
        raise InvalidInputError(f"{field} must be >= 0, got {amount}")
    if amount >= MAX_AMOUNT:
        raise InvalidInputError(f"{field} must be below {MAX_AMOUNT:,f}, got {amount}")
    return amount


def parse_category(value: Category | str) -> Category:
    """Resolve a category name; unknown values are rejected rather than defaulted."""
    if isinstance(value, Category):
        return value
    try:
        return Category(value)
    except ValueError as exc:
        valid = [c.value for c in Category]
        raise InvalidInputError(f"Unknown category: {value!r}. Must be one of {valid}") from exc


def category_cap(category: Category | str) -> Decimal:
    """Maximum reimbursement for a category."""
    return CATEGORY_CAPS[parse_category(category)]


def compute_base_reimbursement(
    invoice_amount: Decimal | int | float | str,
    windows_pro_amount: Decimal | int | float | str = Decimal("0"),
    category: Category | str | None = None,
) -> Decimal:
    """Calculate the capped reimbursement for an invoice.

    Args:
        invoice_amount: Laptop invoice total.
        windows_pro_amount: Optional OS upgrade invoice, added before capping.
        category: Employee category selecting the cap. Required.

    Returns:
        ``round(min((invoice + windows_pro) * 0.75, cap))`` in whole units.

    Raises:
        InvalidInputError: Missing or unknown category, or an invalid amount.
    """
    if category is None:
        raise InvalidInputError("category is required")
    resolved = parse_category(category)
    invoice = to_amount(invoice_amount, "invoice_amount")
    windows_pro = to_amount(windows_pro_amount, "windows_pro_amount")
    cap = CATEGORY_CAPS[resolved]

    eligible = (invoice + windows_pro) * REIMBURSABLE_SHARE
    result = to_unit(min(eligible, cap))

    logger.debug(
        "Base reimbursement: invoice=%s windows_pro=%s category=%s -> %s (cap=%s)",
        invoice,
        windows_pro,
        resolved.value,
        result,
        cap,
    )
    return result
