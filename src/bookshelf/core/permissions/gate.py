"""Authorization gate used by request handlers."""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.core.constants import UNAUTHORIZED_ACTION_MESSAGE
from bookshelf.core.errors import ForbiddenError
from bookshelf.core.permissions.engine import AuthorizationEngine


logger = structlog.get_logger()


class AuthorizationDenied(ForbiddenError):
    """Raised when an actor lacks the permission for an action.

    The message is fixed and never says which role or permission would
    have succeeded.
    """

    message = UNAUTHORIZED_ACTION_MESSAGE
    error_code = "unauthorized_action"

    def __init__(self) -> None:
        super().__init__()


class AuthorizationGate:
    """Per-request facade over an ``AuthorizationEngine``.

    Holds the request's session so callers only pass the actor and the
    permission name. Every call is a fresh evaluation.
    """

    def __init__(self, engine: AuthorizationEngine, session: AsyncSession) -> None:
        self.engine = engine
        self.session = session

    async def allow(self, actor_id: int, permission_name: str) -> bool:
        """Return whether the actor holds the permission."""
        return await self.engine.evaluate(self.session, actor_id, permission_name)

    async def require(self, actor_id: int, permission_name: str) -> None:
        """Ensure the actor holds the permission.

        Raises:
            AuthorizationDenied: If the actor does not hold it
        """
        if not await self.allow(actor_id, permission_name):
            logger.warning(
                "authorization_denied",
                actor_id=actor_id,
                permission=permission_name,
            )
            raise AuthorizationDenied()
