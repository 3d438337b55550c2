"""Audit trail: every SystemEvent becomes an ``audit_log`` row.

Subscribed to all events at startup. A failed write is logged and dropped;
it never reaches the workflow that emitted the event.
"""

from __future__ import annotations

import logging

from reimburse.db.engine import session_scope
from reimburse.models.audit import AuditLog
from reimburse.schemas.events import SystemEvent

logger = logging.getLogger(__name__)


def to_audit_row(event: SystemEvent) -> AuditLog:
    data = dict(event.data)
    if event.employee_id is not None:
        data.setdefault("employee_id", str(event.employee_id))
    return AuditLog(
        event_type=event.event_type.value,
        request_id=event.request_id,
        actor_id=event.actor_id or "system",
        actor_role=event.actor_role if event.actor_id else "system",
        data=data,
    )


async def audit_on_event(event: SystemEvent) -> None:
    try:
        async with session_scope() as db:
            db.add(to_audit_row(event))
    except Exception:
        logger.exception("Audit write failed for %s (request=%s)", event.event_type.value, event.request_id)
