"""Exception handlers that answer with RFC 7807 problem documents.

Every error body has the standard problem members and a flat ``message``
equal to ``detail``, so clients that only show one line can read it
without knowing about problem types. The ``type`` URI ends in the error
code, e.g. ``.../errors/unauthorized_action`` for a permission denial.

See: https://tools.ietf.org/html/rfc7807
"""

from typing import TYPE_CHECKING, Any, cast

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from bookshelf.config import settings
from bookshelf.core.errors.exceptions import AppException


if TYPE_CHECKING:
    from starlette.types import ExceptionHandler


logger = structlog.get_logger()

PROBLEM_MEDIA_TYPE = "application/problem+json"

# Location prefixes FastAPI puts in front of a field path
_REQUEST_PARTS = frozenset({"body", "path", "query", "header", "cookie"})


def problem_type(error_code: str) -> str:
    """URI identifying an error code."""
    return f"{settings.api_docs_base_url}/errors/{error_code}"


def problem_response(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    title: str | None = None,
    **members: Any,
) -> JSONResponse:
    """Build a problem document response.

    Args:
        request: Request being answered; its path becomes ``instance``
        status_code: HTTP status
        error_code: Machine-readable code, used for ``type``
        message: Human-readable text for ``detail`` and ``message``
        title: Summary; defaults to the code in words
        **members: Extension members added to the body as-is

    Returns:
        JSON response with the problem media type
    """
    body = {
        "type": problem_type(error_code),
        "title": title or error_code.replace("_", " ").capitalize(),
        "status": status_code,
        "detail": message,
        "message": message,
        "instance": request.url.path,
        **members,
    }
    return JSONResponse(body, status_code=status_code, media_type=PROBLEM_MEDIA_TYPE)


def _field_path(loc: tuple[Any, ...]) -> str:
    parts = [str(part) for part in loc]
    if parts and parts[0] in _REQUEST_PARTS:
        parts = parts[1:]
    return ".".join(parts) or "request"


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    logger.warning(
        "request_rejected",
        error_code=exc.error_code,
        status_code=exc.status_code,
        path=request.url.path,
    )
    return problem_response(
        request,
        exc.status_code,
        exc.error_code,
        exc.message,
        title=exc.title,
        **exc.problem_members(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Answer 422 with one entry per invalid field."""
    errors = [
        {
            "field": _field_path(tuple(error.get("loc", ()))),
            "message": error.get("msg", "Invalid value"),
            "type": error.get("type"),
        }
        for error in exc.errors()
    ]
    logger.warning(
        "request_invalid",
        path=request.url.path,
        fields=[e["field"] for e in errors],
    )
    return problem_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "validation_error",
        "Request validation failed",
        errors=errors,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Answer 500 without exposing the exception; the traceback goes to the log."""
    logger.exception(
        "unhandled_exception",
        path=request.url.path,
        error_type=type(exc).__name__,
    )
    return problem_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        AppException.error_code,
        AppException.message,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the problem document handlers on ``app``."""
    app.add_exception_handler(AppException, cast("ExceptionHandler", app_exception_handler))
    app.add_exception_handler(
        RequestValidationError, cast("ExceptionHandler", validation_exception_handler)
    )
    app.add_exception_handler(Exception, unhandled_exception_handler)
