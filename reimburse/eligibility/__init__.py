"""Eligibility engine — tenure and cooldown gates for new requests."""

from reimburse.eligibility.engine import check_eligibility
from reimburse.schemas.eligibility import EligibilityResult, EligibilityRule, PriorRequest

__all__ = [
    "check_eligibility",
    "EligibilityResult",
    "EligibilityRule",
    "PriorRequest",
]
