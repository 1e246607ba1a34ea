"""
Test infrastructure for the Article Admin API.

Strategy
--------
- SQLite in-memory via aiosqlite; StaticPool forces every session onto the
  same connection, since an in-memory database is connection-scoped.
- The app's get_db dependency is overridden so every request uses the
  test session factory.
- Tables are created fresh before each test and dropped after.  Fixture
  data is then loaded explicitly by the ``users`` / ``articles`` fixtures,
  so no state leaks from one test to the next.
- The Redis cache is disabled (``cache._redis = None``); PageCache treats
  that as a no-op, so the real database path is exercised.  Cache tests in
  test_repositories.py swap in a fakeredis client for their duration.
- bcrypt runs at its minimum cost to keep fixture loading fast.
"""
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from article_admin.cache import cache
from article_admin.config import settings
from article_admin.database import Base, get_db
from article_admin.fixtures import ADMIN_USERNAME, USER_USERNAME, load_articles, load_users, reset_database
from article_admin.main import app
from article_admin.middleware import install_query_counter
from article_admin.models import User
from article_admin.security import create_access_token

settings.BCRYPT_ROUNDS = 4

# ---------------------------------------------------------------------------
# Test database engine — SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

install_query_counter(engine_test)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ---------------------------------------------------------------------------
# Dependency override — replace production get_db with the test session factory
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
    """Start every test from an empty schema and drop it afterwards."""
    await reset_database(engine_test)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """A live AsyncSession for seeding data and asserting ORM state."""
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def users(db_session: AsyncSession) -> dict[str, User]:
    """The ``admin`` and ``user`` accounts, committed."""
    loaded = await load_users(db_session)
    await db_session.commit()
    return loaded


@pytest_asyncio.fixture
async def articles(db_session: AsyncSession, users: dict[str, User]):
    """Twelve articles ("Article 1" ... "Article 12") written by the admin."""
    loaded = await load_articles(db_session, users[ADMIN_USERNAME])
    await db_session.commit()
    return loaded


@pytest.fixture
def admin_headers(users: dict[str, User]) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(users[ADMIN_USERNAME])}"}


@pytest.fixture
def user_headers(users: dict[str, User]) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(users[USER_USERNAME])}"}


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    """An httpx.AsyncClient wired to the FastAPI app via ASGITransport."""
    cache._redis = None
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
