"""Problem+JSON utilities and exception handlers.

Defines the RFC7807 media type and handler callables that produce
application/problem+json responses for the diagnostic API.
"""

from __future__ import annotations

import logging
from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

PROBLEM_MEDIA_TYPE = "application/problem+json"

logger = logging.getLogger(__name__)


def problem_response(title: str, status: int, detail: str | None = None, **extra) -> JSONResponse:
    body: dict = {"title": title, "status": status}
    if detail is not None:
        body["detail"] = detail
    body.update(extra)
    return JSONResponse(body, status_code=status, media_type=PROBLEM_MEDIA_TYPE)


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:  # noqa: D401
    if isinstance(exc.detail, dict):
        body = dict(exc.detail)
        body.setdefault("status", exc.status_code)
        return JSONResponse(body, status_code=exc.status_code, media_type=PROBLEM_MEDIA_TYPE, headers=exc.headers)
    return problem_response("Error", exc.status_code, str(exc.detail))


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: D401
    return problem_response(
        "Invalid Request",
        422,
        "Request validation failed",
        errors=[{"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")} for e in exc.errors()],
    )


async def handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:  # noqa: D401
    # The scenario's unit of work has already been rolled back by the session scope
    logger.warning("integrity_error path=%s error=%s", request.url.path, exc.orig)
    return problem_response("Persistence Conflict", 409, str(exc.orig))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
    logger.error("unexpected_error", exc_info=True)
    return problem_response("Internal Server Error", 500)


__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "problem_response",
    "handle_http_exception",
    "handle_request_validation_error",
    "handle_integrity_error",
    "handle_unexpected_error",
]
