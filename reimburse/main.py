"""ASGI entry point for the reimbursement service.

    uvicorn reimburse.main:app
    python -m reimburse.main
"""

from __future__ import annotations

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI

from reimburse.api.errors import register_exception_handlers
from reimburse.api.routes import router
from reimburse.audit import audit_on_event
from reimburse.config import settings
from reimburse.db.engine import db_lifespan
from reimburse.events import emit, start_event_system, stop_event_system, subscribe, unsubscribe
from reimburse.schemas.events import EventType, SystemEvent

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Route stdlib and structlog output through one stdout handler."""
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        stream=sys.stdout,
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("Reimbursement service starting (env=%s)", settings.environment)
    async with db_lifespan():
        subscribe(audit_on_event)
        await start_event_system()
        await emit(SystemEvent(
            event_type=EventType.SYSTEM_STARTUP,
            data={"environment": settings.environment},
            source_module="main",
        ))
        try:
            yield
        finally:
            await emit(SystemEvent(event_type=EventType.SYSTEM_SHUTDOWN, source_module="main"))
            await stop_event_system()
            unsubscribe(audit_on_event)
    logger.info("Reimbursement service stopped")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Laptop Reimbursement API",
        description="Laptop purchase reimbursement: approval, depreciation, and installment plans",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    register_exception_handlers(app)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "ok", "environment": settings.environment}

    return app


configure_logging(settings.log_level)
app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "reimburse.main:app",
        host=settings.api.api_host,
        port=settings.api.api_port,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )
