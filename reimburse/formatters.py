"""Display formatting for amounts and dates in messages and API payloads."""

from __future__ import annotations

from datetime import date
from decimal import Decimal


def format_currency(value: Decimal | float | int | None) -> str:
    """Grouped thousands, decimals only when present: 82000 -> "82,000"."""
    if value is None:
        return "-"
    d = Decimal(str(value))
    if d == d.to_integral_value():
        return f"{d:,.0f}"
    return f"{d:,.2f}"


def format_date(value: date | None) -> str:
    """Format as DD/MM/YYYY."""
    if value is None:
        return "-"
    return value.strftime("%d/%m/%Y")


def format_percentage(value: int | Decimal | None) -> str:
    """Whole-number percentage: 40 -> "40%"."""
    if value is None:
        return "-"
    return f"{value}%"
