"""Append-only audit trail of request lifecycle events.

Rows are written by ``reimburse.audit.audit_on_event`` and never updated.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import String
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from reimburse.models.base import Base, TimestampMixin


class AuditLog(TimestampMixin, Base):
    __tablename__ = "audit_log"

    event_type: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    request_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), index=True)
    actor_id: Mapped[str | None] = mapped_column(String(100), comment="Employee ID or 'system'")
    actor_role: Mapped[str | None] = mapped_column(String(50), comment="employee, it_admin, finance, system")
    data: Mapped[dict[str, Any] | None] = mapped_column(JSONB, comment="Event payload")

    def __repr__(self) -> str:
        return f"<AuditLog {self.event_type} request={self.request_id} actor={self.actor_id}>"
