"""Per-rule eligibility checks.

Each function returns an ``EligibilityResult`` when its rule blocks a new
request, or ``None`` when the rule passes. Pure Python, deterministic.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, date, datetime, timedelta

from reimburse.formatters import format_date
from reimburse.models.enums import RequestStatus
from reimburse.schemas.eligibility import EligibilityResult, EligibilityRule, PriorRequest

MIN_TENURE_DAYS = 15

# Paid requests went through processing, so they count for the cooldown too
_COOLDOWN_STATUSES = {RequestStatus.PROCESSED, RequestStatus.PAID}


def _as_aware(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so mixed histories sort."""
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def check_tenure(joining_date: date, today: date) -> EligibilityResult | None:
    """Employees must have been with the company for at least 15 days."""
    if (today - joining_date).days >= MIN_TENURE_DAYS:
        return None

    eligible_from = joining_date + timedelta(days=MIN_TENURE_DAYS)
    return EligibilityResult(
        eligible=False,
        next_eligible_date=eligible_from,
        reason=(
            f"Reimbursement can be requested {MIN_TENURE_DAYS} days after joining. "
            f"You can apply from {format_date(eligible_from)}"
        ),
        rule=EligibilityRule.TENURE,
    )


def latest_processed(prior_requests: Iterable[PriorRequest]) -> PriorRequest | None:
    """The processed request with the most recent ``processed_at``."""
    processed = [
        r for r in prior_requests
        if r.status in _COOLDOWN_STATUSES and r.processed_at is not None
    ]
    if not processed:
        return None
    return max(processed, key=lambda r: _as_aware(r.processed_at))  # type: ignore[arg-type]


def check_cooldown(prior_requests: Iterable[PriorRequest], today: date) -> EligibilityResult | None:
    """A new request waits until the last reimbursement's next-eligible date."""
    latest = latest_processed(prior_requests)
    if latest is None or latest.next_eligible_date is None:
        return None
    if today >= latest.next_eligible_date:
        return None

    return EligibilityResult(
        eligible=False,
        next_eligible_date=latest.next_eligible_date,
        reason=f"You can apply for next reimbursement after {format_date(latest.next_eligible_date)}",
        rule=EligibilityRule.COOLDOWN,
    )
