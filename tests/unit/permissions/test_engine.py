"""Unit tests for the authorization engine.

These tests verify:
- The system actor bypass
- Fail-closed handling of unregistered permission names
- Union semantics over roles
- Catalog snapshot lifecycle (uninitialized, ready, re-initialized)
"""

import asyncio

import pytest
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from bookshelf.core.auth import hash_password
from bookshelf.core.database import Base
from bookshelf.core.permissions import AuthorizationEngine, RoleAssignmentRepository
from bookshelf.core.permissions.engine import is_system_actor
from bookshelf.core.permissions.models import Permission, Role, UserRole
from bookshelf.modules.users.models import User


pytestmark = pytest.mark.unit


async def make_permission(db: AsyncSession, name: str) -> Permission:
    permission = Permission(name=name)
    db.add(permission)
    await db.flush()
    return permission


async def make_role(db: AsyncSession, name: str, *granted: Permission) -> Role:
    role = Role(name=name)
    db.add(role)
    await db.flush()
    assignments = RoleAssignmentRepository(db)
    for permission in granted:
        await assignments.attach_permission(role.id, permission.id)
    return role


async def make_actor(db: AsyncSession, actor_id: int, *roles: Role) -> User:
    user = User(
        id=actor_id,
        email=f"actor{actor_id}@example.com",
        password_hash=hash_password("password123"),
        name=f"Actor {actor_id}",
    )
    db.add(user)
    await db.flush()
    for role in roles:
        db.add(UserRole(user_id=actor_id, role_id=role.id))
    await db.flush()
    return user


class TestEditorScenario:
    """Catalog {books.create, books.delete}, editor -> books.create, actor 7 -> editor."""

    @pytest.fixture
    async def create_permission(self, db: AsyncSession) -> Permission:
        await make_permission(db, "books.delete")
        return await make_permission(db, "books.create")

    @pytest.fixture
    async def editor(self, db: AsyncSession, create_permission: Permission) -> Role:
        return await make_role(db, "editor", create_permission)

    @pytest.fixture
    async def actor(self, db: AsyncSession, editor: Role) -> User:
        await make_actor(db, 1)
        return await make_actor(db, 7, editor)

    @pytest.fixture
    async def authz(self, db: AsyncSession, actor: User) -> AuthorizationEngine:
        authz = AuthorizationEngine()
        await authz.initialize(db)
        return authz

    async def test_editor_can_create(self, db: AsyncSession, authz: AuthorizationEngine):
        """Actor 7 holds books.create through the editor role."""
        assert await authz.evaluate(db, 7, "books.create") is True

    async def test_editor_cannot_delete(self, db: AsyncSession, authz: AuthorizationEngine):
        """books.delete is registered but no role of actor 7 carries it."""
        assert await authz.evaluate(db, 7, "books.delete") is False

    async def test_system_actor_can_delete(self, db: AsyncSession, authz: AuthorizationEngine):
        """The system actor is allowed without any role."""
        assert await authz.evaluate(db, 1, "books.delete") is True

    async def test_actor_without_roles_denied(
        self, db: AsyncSession, authz: AuthorizationEngine
    ):
        """Actor 99 does not exist and has no roles."""
        assert await authz.evaluate(db, 99, "books.create") is False

    async def test_detach_takes_effect_on_next_call(
        self, db: AsyncSession, authz: AuthorizationEngine, editor: Role
    ):
        """Role membership is read live, never cached."""
        assert await authz.evaluate(db, 7, "books.create") is True

        await RoleAssignmentRepository(db).detach_role(7, editor.id)

        assert await authz.evaluate(db, 7, "books.create") is False

    async def test_permission_detached_from_role_takes_effect(
        self,
        db: AsyncSession,
        authz: AuthorizationEngine,
        editor: Role,
        create_permission: Permission,
    ):
        """Role to permission links are read live as well."""
        await RoleAssignmentRepository(db).detach_permission(
            editor.id, create_permission.id
        )

        assert await authz.evaluate(db, 7, "books.create") is False

    async def test_reinitialize_is_idempotent(
        self, db: AsyncSession, authz: AuthorizationEngine
    ):
        """Re-initializing over unchanged data yields the same decisions."""
        pairs = [
            (actor_id, name)
            for actor_id in (1, 7, 99)
            for name in ("books.create", "books.delete", "books.unknown")
        ]
        before = [await authz.evaluate(db, a, n) for a, n in pairs]

        await authz.initialize(db)

        after = [await authz.evaluate(db, a, n) for a, n in pairs]
        assert before == after


class TestSystemActor:
    """The system actor bypass is evaluated before any lookup."""

    @pytest.mark.parametrize(
        "permission_name",
        ["books.create", "never.registered", "", "books.*"],
    )
    async def test_system_actor_always_allowed(
        self, db: AsyncSession, permission_name: str
    ):
        """evaluate(1, name) is true for any name, registered or not."""
        authz = AuthorizationEngine()
        await authz.initialize(db)

        assert await authz.evaluate(db, 1, permission_name) is True

    async def test_system_actor_allowed_before_initialize(self, db: AsyncSession):
        """An uninitialized engine still lets the system actor through."""
        authz = AuthorizationEngine()

        assert authz.is_ready is False
        assert await authz.evaluate(db, 1, "books.delete") is True

    @pytest.mark.parametrize("actor_id", [True, 1.0, "1"])
    def test_values_equal_to_one_are_not_the_system_actor(self, actor_id):
        """Only the integer 1 is the system actor."""
        assert is_system_actor(actor_id) is False
        assert is_system_actor(1) is True

    @pytest.mark.parametrize("actor_id", [True, 1.0])
    async def test_lookalike_actor_gets_no_bypass(self, db: AsyncSession, actor_id):
        """A lookalike id goes through the normal role lookup and is denied."""
        await make_permission(db, "books.delete")
        authz = AuthorizationEngine()
        await authz.initialize(db)

        assert await authz.evaluate(db, actor_id, "books.delete") is False



class TestUnregisteredPermission:
    """Names missing from the snapshot are denied for everyone else."""

    async def test_unregistered_name_denied_even_if_granted_later(self, db: AsyncSession):
        """A permission added after initialize is unknown until re-initialize."""
        authz = AuthorizationEngine()
        await authz.initialize(db)

        late = await make_permission(db, "books.archive")
        role = await make_role(db, "archivist", late)
        await make_actor(db, 1)
        await make_actor(db, 2, role)

        assert await authz.evaluate(db, 2, "books.archive") is False

        await authz.initialize(db)

        assert await authz.evaluate(db, 2, "books.archive") is True

    async def test_unknown_name_is_not_registered(self, db: AsyncSession):
        """is_registered reports names outside the snapshot."""
        await make_permission(db, "books.view")
        authz = AuthorizationEngine()
        await authz.initialize(db)

        assert authz.is_registered("books.view") is True
        assert authz.is_registered("books.publish") is False


class TestUnionSemantics:
    """An actor's permissions are the union over all of its roles."""

    async def test_any_role_with_permission_grants(self, db: AsyncSession):
        """Roles R1 (no P) and R2 (has P) together grant P."""
        edit = await make_permission(db, "books.edit")
        view = await make_permission(db, "books.view")
        r1 = await make_role(db, "viewer", view)
        r2 = await make_role(db, "editor", edit)
        await make_actor(db, 1)
        await make_actor(db, 5, r1, r2)

        authz = AuthorizationEngine()
        await authz.initialize(db)

        assert await authz.evaluate(db, 5, "books.edit") is True
        assert await authz.evaluate(db, 5, "books.view") is True

    async def test_other_actor_holding_permission_does_not_leak(self, db: AsyncSession):
        """Actor 3 is denied even though actor 2 holds the permission."""
        delete = await make_permission(db, "books.delete")
        role = await make_role(db, "remover", delete)
        await make_actor(db, 1)
        await make_actor(db, 2, role)
        await make_actor(db, 3)

        authz = AuthorizationEngine()
        await authz.initialize(db)

        assert await authz.evaluate(db, 2, "books.delete") is True
        assert await authz.evaluate(db, 3, "books.delete") is False


class TestCatalogLifecycle:
    """Snapshot states: uninitialized, ready, and full replacement."""

    async def test_uninitialized_engine_denies(self, db: AsyncSession):
        """Before initialize every non-system check is denied."""
        view = await make_permission(db, "books.view")
        role = await make_role(db, "reader", view)
        await make_actor(db, 1)
        await make_actor(db, 2, role)

        authz = AuthorizationEngine()

        assert authz.is_ready is False
        assert authz.permission_names == frozenset()
        assert await authz.evaluate(db, 2, "books.view") is False

    async def test_empty_catalog(self, db: AsyncSession):
        """Zero permission rows is a valid, ready state."""
        authz = AuthorizationEngine()
        await authz.initialize(db)

        assert authz.is_ready is True
        assert await authz.evaluate(db, 2, "anything") is False
        assert await authz.evaluate(db, 1, "anything") is True

    async def test_reinitialize_replaces_snapshot(self, db: AsyncSession):
        """Removed names disappear; the snapshot is not merged."""
        await make_permission(db, "books.old")
        await make_permission(db, "books.view")
        authz = AuthorizationEngine()
        await authz.initialize(db)
        assert authz.permission_names == {"books.old", "books.view"}

        await db.execute(delete(Permission).where(Permission.name == "books.old"))
        await authz.initialize(db)

        assert authz.permission_names == {"books.view"}

    async def test_concurrent_initialize_publishes_complete_snapshot(
        self, db: AsyncSession
    ):
        """Serialized rebuilds always leave a full snapshot behind."""
        for name in ("books.create", "books.edit", "books.view"):
            await make_permission(db, name)
        authz = AuthorizationEngine()

        await asyncio.gather(*(authz.initialize(db) for _ in range(5)))

        assert authz.permission_names == {"books.create", "books.edit", "books.view"}

    async def test_initialize_without_session_or_factory_fails(self):
        """The engine needs somewhere to read the catalog from."""
        authz = AuthorizationEngine()

        with pytest.raises(RuntimeError):
            await authz.initialize()

    async def test_initialize_with_session_factory(self):
        """Without an explicit session the factory opens its own."""
        database = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
        async with database.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        session_factory = async_sessionmaker(bind=database, expire_on_commit=False)

        async with session_factory() as session:
            session.add(Permission(name="books.list"))
            await session.commit()

        authz = AuthorizationEngine(session_factory)
        await authz.initialize()

        assert authz.permission_names == {"books.list"}
        await database.dispose()
