"""Maps scheduling errors onto HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.domain.errors import (
    AssignmentNotFoundError,
    ConflictError,
    InvalidTransitionError,
    SchedulingError,
    ValidationError,
)
from app.domain.policies.conflict_detection import summarize
from app.infrastructure.api.serializers import serialize_assignment, serialize_conflict

logger = logging.getLogger(__name__)

_STATUS_CODES: dict[type[SchedulingError], int] = {
    ValidationError: 400,
    AssignmentNotFoundError: 404,
    ConflictError: 409,
    InvalidTransitionError: 409,
}


async def scheduling_error_handler(request: Request, exc: SchedulingError) -> JSONResponse:
    status_code = next(
        (code for cls, code in _STATUS_CODES.items() if isinstance(exc, cls)), 400
    )
    body = exc.to_dict()
    if isinstance(exc, ConflictError):
        body["conflicts"] = [serialize_assignment(a) for a in exc.conflicts]
        body["summary"] = [serialize_conflict(summarize(a)) for a in exc.conflicts]
    logger.info("%s %s → %d %s", request.method, request.url.path, status_code, exc.code)
    return JSONResponse(status_code=status_code, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SchedulingError, scheduling_error_handler)
