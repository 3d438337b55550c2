"""Tests for the event bus and the audit subscriber.

Covers:
- Global and typed subscribers
- Handler failures isolated from each other
- Queue drained on shutdown
- Audit subscriber persists events and never raises
- App lifespan publishes startup and shutdown events
"""

from __future__ import annotations

import contextlib
import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from reimburse import events
from reimburse.audit import audit_on_event, to_audit_row
from reimburse.schemas.events import EventType, SystemEvent


@pytest.fixture(autouse=True)
def _clean_subscribers():
    events.bus.clear()
    yield
    events.bus.clear()


def _event(event_type: EventType = EventType.REQUEST_SUBMITTED) -> SystemEvent:
    return SystemEvent(event_type=event_type, request_id=uuid.uuid4(), data={"reimbursement_amount": "75000"})


class TestDispatch:
    @pytest.mark.asyncio()
    async def test_global_subscriber_receives_all(self):
        handler = AsyncMock(__name__="handler")
        events.subscribe(handler)
        await events.bus.dispatch(_event(EventType.REQUEST_SUBMITTED))
        await events.bus.dispatch(_event(EventType.REQUEST_PROCESSED))
        assert handler.await_count == 2

    @pytest.mark.asyncio()
    async def test_typed_subscriber_filters(self):
        handler = AsyncMock(__name__="on_processed")
        events.subscribe(handler, [EventType.REQUEST_PROCESSED])
        await events.bus.dispatch(_event(EventType.REQUEST_SUBMITTED))
        handler.assert_not_awaited()
        await events.bus.dispatch(_event(EventType.REQUEST_PROCESSED))
        handler.assert_awaited_once()

    @pytest.mark.asyncio()
    async def test_failing_handler_isolated(self):
        failing = AsyncMock(__name__="failing", side_effect=RuntimeError("boom"))
        healthy = AsyncMock(__name__="healthy")
        events.subscribe(failing)
        events.subscribe(healthy)
        await events.bus.dispatch(_event())
        healthy.assert_awaited_once()

    @pytest.mark.asyncio()
    async def test_unsubscribe(self):
        handler = AsyncMock(__name__="handler")
        events.subscribe(handler)
        events.subscribe(handler, [EventType.REQUEST_SUBMITTED])
        events.unsubscribe(handler)
        await events.bus.dispatch(_event())
        handler.assert_not_awaited()


class TestQueue:
    @pytest.mark.asyncio()
    async def test_emit_delivered_before_shutdown(self):
        handler = AsyncMock(__name__="handler")
        events.subscribe(handler)
        await events.start_event_system()
        event = _event()
        await events.emit(event)
        await events.stop_event_system()
        handler.assert_awaited_once_with(event)


class TestAuditSubscriber:
    def test_row_from_system_event(self):
        event = SystemEvent(event_type=EventType.SYSTEM_STARTUP)
        row = to_audit_row(event)
        assert row.event_type == "system.startup"
        assert row.actor_id == "system"
        assert row.actor_role == "system"

    def test_row_keeps_actor_and_employee(self):
        employee_id = uuid.uuid4()
        event = SystemEvent(
            event_type=EventType.REQUEST_STATUS_CHANGED,
            request_id=uuid.uuid4(),
            employee_id=employee_id,
            actor_id="finance-1",
            actor_role="finance",
            data={"from": "approved", "to": "processed"},
        )
        row = to_audit_row(event)
        assert row.actor_id == "finance-1"
        assert row.actor_role == "finance"
        assert row.request_id == event.request_id
        assert row.data == {"from": "approved", "to": "processed", "employee_id": str(employee_id)}

    @pytest.mark.asyncio()
    async def test_persists_event(self):
        session = MagicMock()

        @contextlib.asynccontextmanager
        async def fake_scope():
            yield session

        event = _event(EventType.REQUEST_STATUS_CHANGED)
        with patch("reimburse.audit.session_scope", fake_scope):
            await audit_on_event(event)

        row = session.add.call_args.args[0]
        assert row.event_type == "request.status_changed"
        assert row.request_id == event.request_id
        assert row.data == {"reimbursement_amount": "75000"}

    @pytest.mark.asyncio()
    async def test_db_failure_swallowed(self):
        with patch("reimburse.audit.session_scope", MagicMock(side_effect=RuntimeError("db down"))):
            await audit_on_event(_event())


class TestEventBusInstance:
    @pytest.mark.asyncio()
    async def test_publish_starts_worker_lazily(self):
        bus = events.EventBus()
        handler = AsyncMock(__name__="handler")
        bus.subscribe(handler, [EventType.REQUEST_PROCESSED])
        assert not bus.running

        await bus.publish(_event(EventType.REQUEST_PROCESSED))
        assert bus.running
        await bus.stop()

        handler.assert_awaited_once()
        assert not bus.running

    def test_handlers_for_combines_global_and_typed(self):
        bus = events.EventBus()
        everything = AsyncMock(__name__="everything")
        processed = AsyncMock(__name__="processed")
        bus.subscribe(everything)
        bus.subscribe(processed, [EventType.REQUEST_PROCESSED])
        assert bus.handlers_for(EventType.REQUEST_PROCESSED) == [everything, processed]
        assert bus.handlers_for(EventType.REQUEST_SUBMITTED) == [everything]


class TestLifespan:
    @pytest.mark.asyncio()
    async def test_startup_and_shutdown_events_audited(self):
        from reimburse import main

        @contextlib.asynccontextmanager
        async def no_db():
            yield

        audit = AsyncMock(__name__="audit_on_event")
        with patch.object(main, "db_lifespan", no_db), patch.object(main, "audit_on_event", audit):
            async with main.lifespan(main.app):
                pass

        delivered = [c.args[0] for c in audit.await_args_list]
        assert [e.event_type for e in delivered] == [EventType.SYSTEM_STARTUP, EventType.SYSTEM_SHUTDOWN]
        assert delivered[0].data == {"environment": main.settings.environment}
        assert all(e.source_module == "main" for e in delivered)
        assert events.bus.handlers_for(EventType.SYSTEM_STARTUP) == []
        assert not events.bus.running
