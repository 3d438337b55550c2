"""In-process event bus for request lifecycle events.

The workflow service publishes a ``SystemEvent`` for every submission,
status change, and processing run. Subscribers (the audit logger, and a
notifier if one is configured) receive them from a background worker so a
slow subscriber never holds up a status change.

    from reimburse.events import emit, subscribe

    subscribe(audit_on_event)                                   # every event
    subscribe(notify_finance, [EventType.REQUEST_PROCESSED])    # one type

    await emit(SystemEvent(event_type=EventType.REQUEST_SUBMITTED, request_id=rid))
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Callable, Coroutine, Iterable
from typing import Any

from reimburse.schemas.events import EventType, SystemEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[SystemEvent], Coroutine[Any, Any, None]]


class EventBus:
    """Queue-backed pub/sub with per-type routing and isolated handler failures."""

    def __init__(self) -> None:
        self._all: list[EventHandler] = []
        self._by_type: defaultdict[EventType, list[EventHandler]] = defaultdict(list)
        self._queue: asyncio.Queue[SystemEvent] | None = None
        self._worker: asyncio.Task[None] | None = None

    # ── Registration ─────────────────────────────────────────────────

    def subscribe(self, handler: EventHandler, event_types: Iterable[EventType] | None = None) -> None:
        """Register ``handler`` for ``event_types``, or for every event when omitted."""
        if event_types is None:
            self._all.append(handler)
            logger.info("Subscribed %s to all events", handler.__name__)
            return
        types = list(event_types)
        for event_type in types:
            self._by_type[event_type].append(handler)
        logger.info("Subscribed %s to %s", handler.__name__, [t.value for t in types])

    def unsubscribe(self, handler: EventHandler) -> None:
        """Remove every registration of ``handler``."""
        self._all = [h for h in self._all if h is not handler]
        for event_type, handlers in self._by_type.items():
            self._by_type[event_type] = [h for h in handlers if h is not handler]

    def clear(self) -> None:
        """Drop all subscribers."""
        self._all.clear()
        self._by_type.clear()

    def handlers_for(self, event_type: EventType) -> list[EventHandler]:
        return [*self._all, *self._by_type.get(event_type, [])]

    # ── Delivery ─────────────────────────────────────────────────────

    async def dispatch(self, event: SystemEvent) -> None:
        """Deliver one event to its subscribers now, bypassing the queue."""
        handlers = self.handlers_for(event.event_type)
        if not handlers:
            return
        outcomes = await asyncio.gather(*(h(event) for h in handlers), return_exceptions=True)
        for handler, outcome in zip(handlers, outcomes):
            if isinstance(outcome, Exception):
                logger.error(
                    "Subscriber %s failed on %s (request=%s): %s",
                    handler.__name__,
                    event.event_type.value,
                    event.request_id,
                    outcome,
                )

    async def publish(self, event: SystemEvent) -> None:
        """Queue an event for background delivery, starting the worker on first use."""
        queue = self._queue if self._queue is not None else self.start()
        await queue.put(event)
        logger.debug("Queued %s (request=%s)", event.event_type.value, event.request_id)

    async def _drain_forever(self, queue: asyncio.Queue[SystemEvent]) -> None:
        while True:
            event = await queue.get()
            try:
                await self.dispatch(event)
            except Exception:
                logger.exception("Event worker failed on %s", event.event_type.value)
            finally:
                queue.task_done()

    # ── Lifecycle ────────────────────────────────────────────────────

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def start(self) -> asyncio.Queue[SystemEvent]:
        """Create the queue and its worker on the running loop."""
        if self._queue is None:
            self._queue = asyncio.Queue()
        if not self.running:
            self._worker = asyncio.create_task(self._drain_forever(self._queue))
            logger.info("Event worker started")
        return self._queue

    async def stop(self) -> None:
        """Deliver what is queued, then stop the worker."""
        if self._queue is not None:
            await self._queue.join()
        if self._worker is not None and not self._worker.done():
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
        self._worker = None
        self._queue = None


# Process-wide bus used by the module-level helpers below.
bus = EventBus()


def subscribe(handler: EventHandler, event_types: Iterable[EventType] | None = None) -> None:
    bus.subscribe(handler, event_types)


def unsubscribe(handler: EventHandler) -> None:
    bus.unsubscribe(handler)


async def emit(event: SystemEvent) -> None:
    """Publish a SystemEvent; delivery happens on the background worker."""
    await bus.publish(event)


async def start_event_system() -> None:
    """Start delivery. Called from the FastAPI lifespan."""
    bus.start()
    logger.info("Event system started")


async def stop_event_system() -> None:
    """Flush pending events and stop delivery. Called from the FastAPI lifespan."""
    await bus.stop()
    logger.info("Event system stopped")
