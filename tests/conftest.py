"""
Test infrastructure for the Article Hub API.

Strategy
--------
- SQLite in-memory via aiosqlite replaces Postgres; StaticPool makes every
  session share the single in-memory connection (a new connection would see
  an empty database).
- The app's get_db dependency is overridden with the test session factory.
- All tables are created fresh before each test and dropped after.
- The cache handle is a fresh ``MemoryCache`` per test, injected through the
  get_cache dependency override, so cache hits/misses and invalidation are
  exercised for real without a Redis server.
- bcrypt runs at its minimum cost factor to keep registration fast.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("CACHE_BACKEND", "memory")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from articlehub.cache import MemoryCache  # noqa: E402
from articlehub.database import Base, get_db  # noqa: E402
from articlehub.dependencies import get_cache  # noqa: E402
from articlehub.main import app  # noqa: E402
from articlehub.models import User  # noqa: E402

# ---------------------------------------------------------------------------
# Test database engine: SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ---------------------------------------------------------------------------
# Dependency override: replace production get_db with the test session factory
# ---------------------------------------------------------------------------

async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def cache() -> MemoryCache:
    return MemoryCache()


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """
    Yield a live AsyncSession for tests that call services and
    repositories directly.
    """
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def make_user(db_session: AsyncSession):
    """Factory inserting a user straight into the database."""

    async def _make_user(email: str = "owner@example.com", first_name: str = "Olive", last_name: str = "Owner") -> User:
        user = User(
            email=email,
            first_name=first_name,
            last_name=last_name,
            password_hash="not-a-real-hash",
        )
        db_session.add(user)
        await db_session.flush()
        return user

    return _make_user


@pytest_asyncio.fixture
async def async_client(cache: MemoryCache) -> AsyncClient:
    """
    Yield an httpx.AsyncClient wired to the FastAPI app via ASGITransport.

    The lifespan does not run under ASGITransport, so the cache handle is
    supplied through a dependency override instead of ``app.state``.
    """
    app.dependency_overrides[get_cache] = lambda: cache
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_cache, None)


@pytest_asyncio.fixture
async def register_user(async_client: AsyncClient):
    """
    Factory registering a user through the API.

    Returns ``(user_summary, auth_headers)``.
    """

    async def _register(
        email: str = "author@example.com",
        first_name: str = "Jane",
        last_name: str = "Doe",
        password: str = "Password123",
    ):
        resp = await async_client.post("/auth/register", json={
            "email": email,
            "firstName": first_name,
            "lastName": last_name,
            "password": password,
        })
        assert resp.status_code == 201, resp.text
        body = resp.json()
        return body["user"], {"Authorization": f"Bearer {body['accessToken']}"}

    return _register
