"""Map domain exceptions to HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from reimburse.errors import (
    AlreadyProcessedError,
    DuplicateEmployeeError,
    EmployeeHasRequestsError,
    IneligibleError,
    InvalidInputError,
    InvalidTransitionError,
    NotFoundError,
    ReimbursementError,
)

logger = logging.getLogger(__name__)

STATUS_CODES: dict[type[ReimbursementError], int] = {
    InvalidInputError: 422,
    NotFoundError: 404,
    AlreadyProcessedError: 409,
    InvalidTransitionError: 409,
    IneligibleError: 409,
    DuplicateEmployeeError: 409,
    EmployeeHasRequestsError: 409,
}


async def handle_domain_error(request: Request, exc: Exception) -> JSONResponse:
    """Render a ReimbursementError as ``{"detail": ..., "error": ...}``."""
    code = STATUS_CODES.get(type(exc), 400)
    body: dict[str, object] = {"detail": str(exc), "error": type(exc).__name__}
    if isinstance(exc, IneligibleError):
        body["eligibility"] = exc.result.model_dump(mode="json")
    logger.info("%s %s -> %d %s", request.method, request.url.path, code, type(exc).__name__)
    return JSONResponse(status_code=code, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the domain error handler on an app."""
    app.add_exception_handler(ReimbursementError, handle_domain_error)
