"""Integration tests for seeding scenarios.

These tests verify that the seeders create the permission catalog,
the system user, roles, and demo users, and that they are idempotent.
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.core.auth.backend import verify_password
from bookshelf.core.constants import SYSTEM_ACTOR_ID
from bookshelf.core.permissions import AuthorizationEngine, RoleAssignmentRepository
from bookshelf.core.permissions.models import Permission, Role
from bookshelf.core.seeding import (
    DEMO_PASSWORD,
    SCENARIOS,
    SYSTEM_USER_EMAIL,
    seed_default,
    seed_demo,
    seed_permissions,
    seed_system_user,
)
from bookshelf.modules.books.permissions import BOOK_PERMISSIONS
from bookshelf.modules.users.models import User


pytestmark = pytest.mark.integration


async def count(db: AsyncSession, model) -> int:
    result = await db.execute(select(func.count()).select_from(model))
    return result.scalar_one()


# ============================================================
# Seed Default Scenario Tests
# ============================================================


class TestSeedDefault:
    """Tests for the default seeding scenario."""

    async def test_creates_book_permissions(self, db: AsyncSession):
        """All five book permissions exist after seeding."""
        await seed_default(db)

        result = await db.execute(select(Permission.name).order_by(Permission.name))
        assert result.scalars().all() == sorted(BOOK_PERMISSIONS)

    async def test_creates_system_user(self, db: AsyncSession):
        """The system user gets id 1 and the given password."""
        await seed_default(db, "system-password")

        system_user = await db.get(User, SYSTEM_ACTOR_ID)
        assert system_user is not None
        assert system_user.email == SYSTEM_USER_EMAIL
        assert system_user.is_system is True
        assert verify_password("system-password", system_user.password_hash)

    async def test_is_idempotent(self, db: AsyncSession):
        """Running default seed twice creates nothing new."""
        await seed_default(db)
        await seed_default(db)

        assert await count(db, Permission) == len(BOOK_PERMISSIONS)
        assert await count(db, User) == 1

    async def test_keeps_existing_permissions(self, db: AsyncSession):
        """Only missing names are inserted."""
        db.add(Permission(name="books.view"))
        await db.flush()

        permissions = await seed_permissions(db)

        assert [p.name for p in permissions] == list(BOOK_PERMISSIONS)
        assert await count(db, Permission) == len(BOOK_PERMISSIONS)

    async def test_system_user_not_replaced(self, db: AsyncSession):
        """An existing system user keeps its password."""
        await seed_system_user(db, "first-password")
        await seed_system_user(db, "second-password")

        system_user = await db.get(User, SYSTEM_ACTOR_ID)
        assert verify_password("first-password", system_user.password_hash)


# ============================================================
# Seed Demo Scenario Tests
# ============================================================


class TestSeedDemo:
    """Tests for the demo seeding scenario."""

    async def test_creates_roles(self, db: AsyncSession):
        """Librarian and reader roles are created."""
        await seed_demo(db)

        result = await db.execute(select(Role.name).order_by(Role.name))
        assert result.scalars().all() == ["librarian", "reader"]

    async def test_demo_users_get_their_roles(self, db: AsyncSession):
        """Demo users can log in and hold their role's permissions."""
        await seed_demo(db)
        repo = RoleAssignmentRepository(db)

        result = await db.execute(select(User).where(User.email == "librarian@example.com"))
        librarian = result.scalar_one()
        result = await db.execute(select(User).where(User.email == "reader@example.com"))
        reader = result.scalar_one()

        assert librarian.id != SYSTEM_ACTOR_ID
        assert reader.id != SYSTEM_ACTOR_ID
        assert verify_password(DEMO_PASSWORD, reader.password_hash)
        assert await repo.role_names_for(librarian.id) == ["librarian"]
        assert await repo.role_names_for(reader.id) == ["reader"]

    async def test_engine_decisions_after_demo_seed(self, db: AsyncSession):
        """The seeded data produces the expected decisions."""
        await seed_demo(db)
        authz = AuthorizationEngine()
        await authz.initialize(db)

        result = await db.execute(select(User.id).where(User.email == "reader@example.com"))
        reader_id = result.scalar_one()
        result = await db.execute(select(User.id).where(User.email == "librarian@example.com"))
        librarian_id = result.scalar_one()

        assert await authz.evaluate(db, reader_id, "books.view") is True
        assert await authz.evaluate(db, reader_id, "books.create") is False
        assert await authz.evaluate(db, librarian_id, "books.delete") is True

    async def test_is_idempotent(self, db: AsyncSession):
        """Running demo seed twice creates nothing new."""
        await seed_demo(db)
        await seed_demo(db)

        assert await count(db, Role) == 2
        assert await count(db, User) == 3
        assert await count(db, Permission) == len(BOOK_PERMISSIONS)


def test_scenarios_registered():
    """The seed script offers the default and demo scenarios."""
    assert set(SCENARIOS) == {"default", "demo"}
