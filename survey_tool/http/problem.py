"""Problem+JSON utilities and global exception handlers.

Defines the RFC7807 media type and handler callables that render domain
errors, request validation failures and unexpected exceptions as
application/problem+json responses.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from survey_tool.http.error_mapping import lookup
from survey_tool.logic.errors import SurveyToolError

PROBLEM_MEDIA_TYPE = "application/problem+json"

logger = logging.getLogger(__name__)


def problem(kind: str, detail: str) -> Dict[str, Any]:
    """Build a problem+json body for a domain error kind."""
    mapped = lookup(kind)
    return {
        "title": mapped["title"],
        "status": mapped["status"],
        "detail": detail,
        "message": detail,
        "code": mapped["code"],
    }


async def handle_domain_error(request: Request, exc: SurveyToolError) -> JSONResponse:  # noqa: D401
    body = problem(exc.kind, exc.message)
    logger.info(
        "error_handler.handle",
        extra={"code": body["code"], "path": request.url.path, "reason": exc.message},
    )
    return JSONResponse(body, status_code=body["status"], media_type=PROBLEM_MEDIA_TYPE)


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:  # noqa: D401
    status_code = int(exc.status_code or 500)
    if isinstance(exc.detail, dict):
        body = dict(exc.detail)
    else:
        body = {"title": "Error", "status": status_code, "detail": str(exc.detail or "")}
    return JSONResponse(
        body,
        status_code=status_code,
        media_type=PROBLEM_MEDIA_TYPE,
        headers=dict(exc.headers) if exc.headers else None,
    )


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: D401
    problem_body = {
        "title": "Invalid Request",
        "status": 422,
        "detail": "Request validation failed",
        "code": "REQUEST_SCHEMA_INVALID",
        "errors": jsonable_encoder(exc.errors()),
    }
    return JSONResponse(problem_body, status_code=422, media_type=PROBLEM_MEDIA_TYPE)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
    logger.error("unexpected_error path=%s", request.url.path, exc_info=exc)
    return JSONResponse(problem("error", "Unexpected server error"), status_code=500, media_type=PROBLEM_MEDIA_TYPE)


__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "problem",
    "handle_domain_error",
    "handle_http_exception",
    "handle_request_validation_error",
    "handle_unexpected_error",
]
