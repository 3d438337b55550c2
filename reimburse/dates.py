"""Calendar helpers shared by the calculators.

Every date input is normalised to a ``datetime.date`` so comparisons happen
at day resolution regardless of whether the caller passed a date, a
datetime, or an ISO-8601 string.

Month arithmetic clamps to the end of short months. A laptop bought on
Jan 31 is therefore one whole month old on Feb 28 (Feb 29 in a leap year),
so month-end purchases cross the one-month depreciation threshold a few
days before a mid-month purchase would.
"""

from __future__ import annotations

import calendar
from datetime import UTC, date, datetime, time

from reimburse.errors import InvalidInputError

DateInput = date | datetime | str


def to_date(value: DateInput, field: str = "date") -> date:
    """Normalise a date, datetime, or ISO-8601 string to a ``date``.

    Raises:
        InvalidInputError: If the value is not a recognisable calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text).date()
        except ValueError as exc:
            raise InvalidInputError(f"Invalid {field}: {value!r}") from exc
    raise InvalidInputError(f"Invalid {field}: {value!r}")


def to_datetime(value: DateInput | None) -> datetime:
    """Normalise a timestamp input; ``None`` means now (UTC).

    Date-only inputs become midnight UTC of that day.
    """
    if value is None:
        return datetime.now(UTC)
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            pass
    return datetime.combine(to_date(value, "timestamp"), time.min, tzinfo=UTC)


def add_months(dt: date, months: int) -> date:
    """Shift ``dt`` by ``months`` calendar months (negative goes back).

    Keeps the day of month where the target month has it, otherwise lands
    on that month's last day: 2024-01-31 + 1 is 2024-02-29.
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def first_day_of_next_month(dt: date) -> date:
    """1st of the month following ``dt``."""
    return add_months(dt.replace(day=1), 1)


def last_day_of_month(dt: date) -> date:
    """Last calendar day of the month containing ``dt``."""
    return dt.replace(day=calendar.monthrange(dt.year, dt.month)[1])


def whole_months_between(start: date, end: date) -> int:
    """Number of complete calendar months from ``start`` to ``end``.

    A month counts once the same day-of-month is reached (clamped for short
    months). Returns 0 when ``end`` is not after ``start``.
    """
    if end <= start:
        return 0
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if add_months(start, months) > end:
        months -= 1
    return months
