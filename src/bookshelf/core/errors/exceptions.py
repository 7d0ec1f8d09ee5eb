"""Errors the API reports to its clients.

Request code raises these and never builds a response itself; the
handlers in ``bookshelf.core.errors.handlers`` render every one of them as
a problem document.
"""

from typing import Any


class AppException(Exception):
    """Base class for client-facing errors.

    Subclasses fix the HTTP status and a default code. A raise site may
    override the message and the code, never the status.

    Attributes:
        message: Text returned in ``detail`` and ``message``
        error_code: Stable machine-readable code, also the last segment of
            the problem ``type`` URI
        status_code: HTTP status of the response
    """

    status_code: int = 500
    error_code: str = "internal_error"
    message: str = "An unexpected error occurred"

    def __init__(self, message: str | None = None, *, error_code: str | None = None) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        super().__init__(self.message)

    @property
    def title(self) -> str:
        """Short summary derived from the code, e.g. "Unauthorized action"."""
        return self.error_code.replace("_", " ").capitalize()

    def problem_members(self) -> dict[str, Any]:
        """Extra members to add to the problem document."""
        return {}


class NotFoundError(AppException):
    """A resource addressed by id does not exist.

    Example:
        raise NotFoundError("book", 42)
    """

    status_code = 404
    error_code = "not_found"

    def __init__(self, resource: str, resource_id: int | str) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource.capitalize()} not found")

    def problem_members(self) -> dict[str, Any]:
        return {"resource": self.resource, "resource_id": self.resource_id}


class ConflictError(AppException):
    status_code = 409
    error_code = "conflict"
    message = "Resource conflict"


class UnauthorizedError(AppException):
    """The caller is not authenticated; answered with 401."""

    status_code = 401
    error_code = "unauthorized"
    message = "Authentication required"


class ForbiddenError(AppException):
    """The caller is authenticated but may not do this; answered with 403."""

    status_code = 403
    error_code = "forbidden"
    message = "Access forbidden"
