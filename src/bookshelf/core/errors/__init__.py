"""Client-facing errors and their RFC 7807 rendering."""

from bookshelf.core.errors.exceptions import (
    AppException,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)
from bookshelf.core.errors.handlers import (
    problem_response,
    problem_type,
    register_exception_handlers,
)


__all__ = [
    "AppException",
    "ConflictError",
    "ForbiddenError",
    "NotFoundError",
    "UnauthorizedError",
    "problem_response",
    "problem_type",
    "register_exception_handlers",
]
