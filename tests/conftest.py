"""Pytest configuration and shared fixtures."""

import os


# Settings are read at import time, so the test environment must be in
# place before anything from bookshelf is imported.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "testing"
os.environ["SECRET_KEY"] = "test-secret-key-that-is-at-least-32-characters"
os.environ["BCRYPT_ROUNDS"] = "4"

from collections.abc import AsyncGenerator, Callable  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from bookshelf.core.auth.backend import create_access_token  # noqa: E402
from bookshelf.core.database import Base, get_db  # noqa: E402
from bookshelf.core.permissions import AuthorizationEngine  # noqa: E402

# Import all models to ensure they're registered with Base.metadata
from bookshelf.core.permissions.models import Permission, Role, UserRole  # noqa: E402, F401
from bookshelf.core.seeding import seed_permissions, seed_roles, seed_system_user  # noqa: E402
from bookshelf.main import create_app  # noqa: E402
from bookshelf.modules.books.models import Book  # noqa: E402, F401
from bookshelf.modules.users.models import User  # noqa: E402
from tests.factories.user import UserFactory  # noqa: E402


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a transactional database session for tests.

    Each test runs in its own transaction that is rolled back
    after the test completes.
    """
    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with engine.connect() as conn:
        await conn.begin()

        async with session_factory(bind=conn) as session:
            yield session

        await conn.rollback()


# ============================================================
# Catalog and User Fixtures
# ============================================================


@pytest.fixture
async def system_user(db: AsyncSession) -> User:
    """Create the system actor (id 1).

    Every other user fixture depends on this one so that id 1 is never
    handed out to an ordinary user by autoincrement.
    """
    return await seed_system_user(db, "system-password")


@pytest.fixture
async def permissions(db: AsyncSession) -> list[Permission]:
    """Seed the five book permissions."""
    return await seed_permissions(db)


@pytest.fixture
async def roles(db: AsyncSession, permissions: list[Permission]) -> dict[str, Role]:
    """Seed the librarian and reader roles."""
    return await seed_roles(db)


@pytest.fixture
def make_user(db: AsyncSession, system_user: User) -> Callable:
    """Return a coroutine function that persists a user with the given roles."""

    async def _make_user(*role_list: Role, **overrides) -> User:
        user = UserFactory.build(**overrides)
        db.add(user)
        await db.flush()
        for role in role_list:
            db.add(UserRole(user_id=user.id, role_id=role.id))
        await db.flush()
        return user

    return _make_user


@pytest.fixture
async def librarian(make_user: Callable, roles: dict[str, Role]) -> User:
    """User holding the librarian role (all book permissions)."""
    return await make_user(roles["librarian"], email="librarian@example.com")


@pytest.fixture
async def reader(make_user: Callable, roles: dict[str, Role]) -> User:
    """User holding the reader role (list and view only)."""
    return await make_user(roles["reader"], email="reader@example.com")


@pytest.fixture
async def stranger(make_user: Callable) -> User:
    """User with no roles at all."""
    return await make_user(email="stranger@example.com")


@pytest.fixture
def auth_headers() -> Callable[[User], dict[str, str]]:
    """Return a helper that builds bearer headers for a user."""

    def _auth_headers(user: User) -> dict[str, str]:
        token = create_access_token(user_id=user.id)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


# ============================================================
# Application Fixtures
# ============================================================


@pytest.fixture
async def authorization_engine(
    db: AsyncSession, permissions: list[Permission]
) -> AuthorizationEngine:
    """Authorization engine loaded from the seeded catalog."""
    engine = AuthorizationEngine()
    await engine.initialize(db)
    return engine


@pytest.fixture
async def app(db: AsyncSession, authorization_engine: AuthorizationEngine):
    """Create test application instance.

    The test transport does not run the lifespan, so the engine the
    lifespan would build is installed here.
    """
    application = create_app()
    application.state.authorization_engine = authorization_engine

    # Override database dependency
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    application.dependency_overrides[get_db] = override_get_db

    yield application

    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
