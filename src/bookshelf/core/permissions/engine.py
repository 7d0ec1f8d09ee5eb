"""Authorization engine.

The engine answers "may actor X do P?" in three steps:

1. The system actor (id 1) is always allowed. This is checked before any
   lookup and cannot be changed by editing role or permission data.
2. A permission name missing from the loaded catalog snapshot is denied.
3. Otherwise the actor's roles are queried live for the permission.

Only the set of permission names is held in memory. It is rebuilt by
``initialize()`` and published as one immutable frozenset, so a reader
sees either the old snapshot or the new one and never a partial build.
Role and permission assignments are never cached.
"""

import asyncio
from collections.abc import Callable

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.core.constants import SYSTEM_ACTOR_ID
from bookshelf.core.permissions.assignments import RoleAssignmentRepository
from bookshelf.core.permissions.catalog import PermissionCatalog


logger = structlog.get_logger()

SessionFactory = Callable[[], AsyncSession]


def is_system_actor(actor_id: int) -> bool:
    """Whether ``actor_id`` is the reserved system actor.

    Only the integer itself matches; ``True`` and ``1.0`` compare equal to 1
    but are not actor ids.
    """
    return type(actor_id) is int and actor_id == SYSTEM_ACTOR_ID


class AuthorizationEngine:
    """Evaluates permission checks for actors.

    Build one instance at startup, ``await initialize()`` it, and hand it to
    whatever serves requests. Until the first ``initialize()`` the engine is
    uninitialized and denies every non-system actor.

    Attributes:
        session_factory: Opens sessions for catalog loads when the caller
            does not supply one
    """

    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        self.session_factory = session_factory
        self._permission_names: frozenset[str] | None = None
        self._lock = asyncio.Lock()

    @property
    def is_ready(self) -> bool:
        """True once a catalog snapshot has been loaded."""
        return self._permission_names is not None

    @property
    def permission_names(self) -> frozenset[str]:
        """The current snapshot of registered permission names."""
        return self._permission_names or frozenset()

    def is_registered(self, permission_name: str) -> bool:
        """Whether the permission name is in the current snapshot."""
        return permission_name in self.permission_names

    async def initialize(self, session: AsyncSession | None = None) -> None:
        """Load the permission catalog and replace the current snapshot.

        Safe to call repeatedly; each call fully replaces the previous
        snapshot. Concurrent calls are serialized.

        Args:
            session: Session to read the catalog with. When omitted a
                short-lived session is opened from ``session_factory``.

        Raises:
            RuntimeError: If no session is given and no factory is configured
        """
        async with self._lock:
            if session is not None:
                names = await PermissionCatalog(session).list_names()
            elif self.session_factory is not None:
                async with self.session_factory() as own_session:
                    names = await PermissionCatalog(own_session).list_names()
            else:
                raise RuntimeError(
                    "AuthorizationEngine.initialize() needs a session or a session factory"
                )

            self._permission_names = frozenset(names)

        logger.info(
            "authorization_catalog_loaded",
            permission_count=len(names),
        )

    async def evaluate(
        self,
        session: AsyncSession,
        actor_id: int,
        permission_name: str,
    ) -> bool:
        """Decide whether an actor holds a permission.

        Never raises for authorization reasons (unknown permission, no
        roles, empty catalog). Storage faults during the role lookup
        propagate to the caller.

        Args:
            session: Session used for the live role lookup
            actor_id: The actor's integer id
            permission_name: Permission name, e.g. "books.delete"

        Returns:
            True if the actor may perform the action
        """
        if is_system_actor(actor_id):
            logger.info(
                "system_actor_bypass",
                actor_id=actor_id,
                permission=permission_name,
            )
            return True

        if not self.is_registered(permission_name):
            return False

        return await RoleAssignmentRepository(session).actor_has_permission(
            actor_id, permission_name
        )
