"""Role assignment data access.

Answers "does this actor hold this permission through any of its roles"
and carries the attach/detach/sync operations administrators and seeding
use to change the two many-to-many relations.
"""

from collections.abc import Iterable

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.core.permissions.models import (
    Permission,
    Role,
    UserRole,
    role_permissions,
)


class RoleAssignmentRepository:
    """Repository over ``user_roles`` and ``role_permissions``.

    Membership is always read live; nothing here is cached.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def actor_has_permission(self, actor_id: int, permission_name: str) -> bool:
        """Check whether any role of the actor carries the named permission.

        Runs a single EXISTS query across the join tables so the cost does
        not grow with the number of permissions the actor holds. Unknown
        actors simply have no rows and get False.

        Args:
            actor_id: The actor's integer id
            permission_name: Permission name, e.g. "books.create"

        Returns:
            True if at least one role grants the permission
        """
        membership = (
            select(UserRole.user_id)
            .join(role_permissions, role_permissions.c.role_id == UserRole.role_id)
            .join(Permission, Permission.id == role_permissions.c.permission_id)
            .where(
                UserRole.user_id == actor_id,
                Permission.name == permission_name,
            )
            .exists()
        )
        result = await self.session.execute(select(membership))
        return bool(result.scalar())

    async def role_names_for(self, actor_id: int) -> list[str]:
        """List the names of the roles attached to an actor."""
        stmt = (
            select(Role.name)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == actor_id)
            .order_by(Role.name)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    # ------------------------------------------------------------
    # Actor <-> Role
    # ------------------------------------------------------------

    async def _role_ids_for(self, actor_id: int) -> set[int]:
        result = await self.session.execute(
            select(UserRole.role_id).where(UserRole.user_id == actor_id)
        )
        return set(result.scalars().all())

    async def attach_role(self, actor_id: int, role_id: int) -> None:
        """Attach a role to an actor. Attaching twice is a no-op."""
        if role_id in await self._role_ids_for(actor_id):
            return
        await self.session.execute(
            insert(UserRole).values(user_id=actor_id, role_id=role_id)
        )
        await self.session.flush()

    async def detach_role(self, actor_id: int, role_id: int) -> None:
        """Detach a role from an actor."""
        await self.session.execute(
            delete(UserRole).where(
                UserRole.user_id == actor_id,
                UserRole.role_id == role_id,
            )
        )
        await self.session.flush()

    async def sync_roles(self, actor_id: int, role_ids: Iterable[int]) -> None:
        """Make the actor's role set exactly ``role_ids``."""
        wanted = set(role_ids)
        current = await self._role_ids_for(actor_id)

        stale = current - wanted
        if stale:
            await self.session.execute(
                delete(UserRole).where(
                    UserRole.user_id == actor_id,
                    UserRole.role_id.in_(stale),
                )
            )
        missing = wanted - current
        if missing:
            await self.session.execute(
                insert(UserRole),
                [{"user_id": actor_id, "role_id": role_id} for role_id in sorted(missing)],
            )
        await self.session.flush()

    # ------------------------------------------------------------
    # Role <-> Permission
    # ------------------------------------------------------------

    async def _permission_ids_for(self, role_id: int) -> set[int]:
        result = await self.session.execute(
            select(role_permissions.c.permission_id).where(
                role_permissions.c.role_id == role_id
            )
        )
        return set(result.scalars().all())

    async def attach_permission(self, role_id: int, permission_id: int) -> None:
        """Attach a permission to a role. Attaching twice is a no-op."""
        if permission_id in await self._permission_ids_for(role_id):
            return
        await self.session.execute(
            insert(role_permissions).values(role_id=role_id, permission_id=permission_id)
        )
        await self.session.flush()

    async def detach_permission(self, role_id: int, permission_id: int) -> None:
        """Detach a permission from a role."""
        await self.session.execute(
            delete(role_permissions).where(
                role_permissions.c.role_id == role_id,
                role_permissions.c.permission_id == permission_id,
            )
        )
        await self.session.flush()

    async def sync_permissions(self, role_id: int, permission_ids: Iterable[int]) -> None:
        """Make the role's permission set exactly ``permission_ids``."""
        wanted = set(permission_ids)
        current = await self._permission_ids_for(role_id)

        stale = current - wanted
        if stale:
            await self.session.execute(
                delete(role_permissions).where(
                    role_permissions.c.role_id == role_id,
                    role_permissions.c.permission_id.in_(stale),
                )
            )
        missing = wanted - current
        if missing:
            await self.session.execute(
                insert(role_permissions),
                [
                    {"role_id": role_id, "permission_id": permission_id}
                    for permission_id in sorted(missing)
                ],
            )
        await self.session.flush()
