"""Eligibility engine — may this employee submit a new reimbursement request?

Rules are evaluated in order; the first one that blocks wins:
1. Tenure: at least 15 days since joining.
2. Cooldown: the latest processed request's next-eligible date has passed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from reimburse.dates import DateInput, to_date, to_datetime
from reimburse.eligibility.rules import check_cooldown, check_tenure
from reimburse.schemas.eligibility import EligibilityResult, PriorRequest

logger = logging.getLogger(__name__)


def check_eligibility(
    joining_date: DateInput,
    prior_requests: Iterable[PriorRequest] | None = None,
    now: DateInput | None = None,
) -> EligibilityResult:
    """Decide whether an employee may submit a new request.

    Args:
        joining_date: The employee's joining date.
        prior_requests: The employee's request history (any statuses).
        now: Reference time (defaults to current UTC time).

    Returns:
        EligibilityResult; ``next_eligible_date`` and ``reason`` are set
        only when ineligible.
    """
    joined = to_date(joining_date, "joining_date")
    today = to_datetime(now).date()
    history = [PriorRequest.model_validate(r) for r in (prior_requests or [])]

    blocked = check_tenure(joined, today) or check_cooldown(history, today)
    if blocked is not None:
        logger.debug(
            "Ineligible (%s) until %s",
            blocked.rule.value if blocked.rule else "-",
            blocked.next_eligible_date,
        )
        return blocked

    return EligibilityResult(eligible=True)
