"""Idempotent seeders for the permission catalog, roles and users.

Every seeder only creates what is missing, so running one twice is safe.
The running service reads the permission catalog at startup; restart it
(or re-initialize its authorization engine) after seeding new permissions.
"""

import secrets
from collections.abc import Iterable
from dataclasses import dataclass

import structlog
from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.core.auth.backend import hash_password
from bookshelf.core.constants import SYSTEM_ACTOR_ID
from bookshelf.core.permissions.assignments import RoleAssignmentRepository
from bookshelf.core.permissions.models import Permission, Role
from bookshelf.modules.books.permissions import BOOK_PERMISSIONS, BOOKS_LIST, BOOKS_VIEW
from bookshelf.modules.users.models import User


logger = structlog.get_logger()

SYSTEM_USER_EMAIL = "system@example.com"

# Role name -> permission names
DEFAULT_ROLES: dict[str, tuple[str, ...]] = {
    "librarian": BOOK_PERMISSIONS,
    "reader": (BOOKS_LIST, BOOKS_VIEW),
}


@dataclass(frozen=True)
class DemoUser:
    email: str
    name: str
    role: str


DEMO_USERS: tuple[DemoUser, ...] = (
    DemoUser(email="librarian@example.com", name="Demo Librarian", role="librarian"),
    DemoUser(email="reader@example.com", name="Demo Reader", role="reader"),
)

DEMO_PASSWORD = "password"


async def seed_permissions(
    session: AsyncSession,
    names: Iterable[str] = BOOK_PERMISSIONS,
) -> list[Permission]:
    """Ensure a Permission row exists for every name.

    Returns:
        The Permission rows for ``names``, in the order given
    """
    wanted = list(dict.fromkeys(names))
    result = await session.execute(select(Permission).where(Permission.name.in_(wanted)))
    existing = {p.name: p for p in result.scalars().all()}

    created = 0
    for name in wanted:
        if name not in existing:
            permission = Permission(name=name)
            session.add(permission)
            existing[name] = permission
            created += 1

    await session.flush()
    logger.info("permissions_seeded", created=created, total=len(wanted))
    return [existing[name] for name in wanted]


async def seed_system_user(session: AsyncSession, password: str | None = None) -> User:
    """Create the system actor (id 1) if it does not exist yet.

    Args:
        session: Database session
        password: Login password; a random one is used when omitted

    Returns:
        The system user
    """
    system_user = await session.get(User, SYSTEM_ACTOR_ID)
    if system_user is not None:
        return system_user

    system_user = User(
        id=SYSTEM_ACTOR_ID,
        email=SYSTEM_USER_EMAIL,
        name="System",
        password_hash=hash_password(password or secrets.token_urlsafe(32)),
        is_active=True,
    )
    session.add(system_user)
    await session.flush()

    # An explicit id does not advance the PostgreSQL sequence
    if session.get_bind().dialect.name == "postgresql":
        await session.execute(
            text(
                "SELECT setval(pg_get_serial_sequence('users', 'id'), "
                "(SELECT MAX(id) FROM users))"
            )
        )

    logger.info("system_user_seeded", user_id=system_user.id)
    return system_user


async def seed_roles(
    session: AsyncSession,
    roles: dict[str, tuple[str, ...]] = DEFAULT_ROLES,
) -> dict[str, Role]:
    """Create roles and attach their permissions.

    Permissions a role needs are seeded too. Existing roles get any missing
    permissions attached; nothing is ever detached here.

    Returns:
        Mapping of role name to Role
    """
    assignments = RoleAssignmentRepository(session)
    seeded: dict[str, Role] = {}

    for role_name, permission_names in roles.items():
        result = await session.execute(select(Role).where(Role.name == role_name))
        role = result.scalar_one_or_none()
        if role is None:
            role = Role(name=role_name)
            session.add(role)
            await session.flush()

        for permission in await seed_permissions(session, permission_names):
            await assignments.attach_permission(role.id, permission.id)

        seeded[role_name] = role

    logger.info("roles_seeded", roles=sorted(seeded))
    return seeded


async def seed_demo_users(
    session: AsyncSession,
    roles: dict[str, Role],
    password: str = DEMO_PASSWORD,
) -> list[User]:
    """Create the demo users and attach their role."""
    assignments = RoleAssignmentRepository(session)
    users: list[User] = []

    for demo in DEMO_USERS:
        result = await session.execute(select(User).where(User.email == demo.email))
        user = result.scalar_one_or_none()
        if user is None:
            user = User(
                email=demo.email,
                name=demo.name,
                password_hash=hash_password(password),
                is_active=True,
            )
            session.add(user)
            await session.flush()

        await assignments.attach_role(user.id, roles[demo.role].id)
        users.append(user)

    logger.info("demo_users_seeded", count=len(users))
    return users


async def seed_default(session: AsyncSession, system_password: str | None = None) -> None:
    """Seed the permission catalog and the system user."""
    await seed_permissions(session)
    await seed_system_user(session, system_password)


async def seed_demo(session: AsyncSession, system_password: str | None = None) -> None:
    """Seed everything in ``seed_default`` plus demo roles and users."""
    await seed_default(session, system_password)
    roles = await seed_roles(session)
    await seed_demo_users(session, roles)


SCENARIOS = {
    "default": seed_default,
    "demo": seed_demo,
}
