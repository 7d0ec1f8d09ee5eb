"""FastAPI dependencies for permission checks.

Usage:
    @router.delete(
        "/books/{book_id}",
        dependencies=[Depends(require_permission("books.delete"))],
    )
    async def delete_book(book_id: int, ...):
        ...

The permission dependency authenticates the caller first (401 on a missing
or bad token), then asks the gate (403 on denial). FastAPI resolves route
dependencies before the handler body runs, so nothing is read or written
for a denied caller.
"""

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, Request

from bookshelf.api.dependencies import DBSession
from bookshelf.core.auth.dependencies import CurrentUser
from bookshelf.core.permissions.engine import AuthorizationEngine
from bookshelf.core.permissions.gate import AuthorizationGate


def get_authorization_engine(request: Request) -> AuthorizationEngine:
    """Return the engine the application built at startup.

    Raises:
        RuntimeError: If the application was started without one
    """
    engine = getattr(request.app.state, "authorization_engine", None)
    if engine is None:
        raise RuntimeError("Authorization engine has not been configured")
    return engine


AuthzEngine = Annotated[AuthorizationEngine, Depends(get_authorization_engine)]


def get_authorization_gate(engine: AuthzEngine, db: DBSession) -> AuthorizationGate:
    """Build a gate bound to the request's database session."""
    return AuthorizationGate(engine, db)


Gate = Annotated[AuthorizationGate, Depends(get_authorization_gate)]


def require_permission(permission_name: str) -> Callable[..., Awaitable[None]]:
    """Create a dependency that requires a named permission.

    Args:
        permission_name: Permission name, e.g. "books.create"

    Returns:
        Dependency that raises ``AuthorizationDenied`` on denial
    """

    async def permission_checker(current_user: CurrentUser, gate: Gate) -> None:
        await gate.require(current_user.id, permission_name)

    return permission_checker
