"""Pydantic schemas for the eligibility check.

Pure data classes. Inputs are plain snapshots of the employee's request
history so the check never touches storage.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict

from reimburse.models.enums import RequestStatus


class EligibilityRule(str, Enum):
    """Which rule blocked a new request."""

    TENURE = "tenure"        # joined less than 15 days ago
    COOLDOWN = "cooldown"    # previous reimbursement still within 36 months


class PriorRequest(BaseModel):
    """The parts of a past request the cooldown rule looks at."""

    model_config = ConfigDict(from_attributes=True)

    status: RequestStatus
    processed_at: datetime | None = None
    next_eligible_date: date | None = None


class EligibilityResult(BaseModel):
    """Outcome of an eligibility check."""

    eligible: bool
    next_eligible_date: date | None = None
    reason: str | None = None
    rule: EligibilityRule | None = None
