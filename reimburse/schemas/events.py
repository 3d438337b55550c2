"""Lifecycle events published by the workflow services and the app.

One ``SystemEvent`` per submission, refusal, status change, processing
run, employee account change, and app startup or shutdown. The audit
subscriber stores each of them; other subscribers (e.g. a mailer) may
filter by ``EventType``.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    REQUEST_SUBMITTED = "request.submitted"
    REQUEST_STATUS_CHANGED = "request.status_changed"
    REQUEST_PROCESSED = "request.processed"       # payout plan computed

    ELIGIBILITY_CHECKED = "eligibility.checked"
    SUBMISSION_REFUSED = "eligibility.submission_refused"

    EMPLOYEE_CREATED = "employee.created"
    EMPLOYEE_STATUS_CHANGED = "employee.status_changed"
    EMPLOYEE_DELETED = "employee.deleted"

    SYSTEM_STARTUP = "system.startup"
    SYSTEM_SHUTDOWN = "system.shutdown"


class SystemEvent(BaseModel):
    """Immutable record of something that happened to a request or employee."""

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    event_type: EventType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    request_id: uuid.UUID | None = None
    employee_id: uuid.UUID | None = None
    actor_id: str | None = None         # employee id, or None for the system
    actor_role: str | None = None       # employee, it_admin, finance

    data: dict[str, Any] = Field(default_factory=dict)
    source_module: str | None = None
