"""
Test infrastructure for the Blog Articles API.

Strategy
--------
- SQLite in-memory via aiosqlite eliminates the need for a running Postgres
  instance in CI, keeping the suite fast and self-contained.
- StaticPool forces all async tasks to share the same in-memory database
  connection, which is required because SQLite in-memory databases are
  connection-scoped; a new connection would see an empty database.
- Foreign keys are switched on for the test engine so ON DELETE CASCADE
  behaves the way it does on Postgres.
- The app's get_db dependency is overridden so every test-time request uses
  the test session factory rather than the production one.
- All tables are created fresh before each test and dropped after, giving
  each test a clean isolated state without needing transactions or truncation.
- bcrypt runs at its minimum cost factor; the setting must be in the
  environment before ``app.config`` is first imported.
"""
import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DEBUG", "false")

from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.database import Base, enable_sqlite_foreign_keys, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.middleware import install_query_counter  # noqa: E402
from app.models import Article, ArticleStatus, User  # noqa: E402
from app.security import password_hasher, token_service  # noqa: E402

# ---------------------------------------------------------------------------
# Test database engine: SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

install_query_counter(engine_test)
enable_sqlite_foreign_keys(engine_test)

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
# Seeding helpers (used directly by tests that need fixed timestamps)
# ---------------------------------------------------------------------------

_user_seq = 0


async def make_user(db: AsyncSession, name: str | None = None, password: str = "password123") -> User:
    global _user_seq
    _user_seq += 1
    name = name or f"user{_user_seq}"
    user = User(
        name=name,
        email=f"{name}_{_user_seq}@example.com",
        hashed_password=password_hasher.hash(password),
    )
    db.add(user)
    await db.flush()
    return user


async def make_article(
    db: AsyncSession,
    user: User,
    status: ArticleStatus = ArticleStatus.PUBLISHED,
    title: str = "A title",
    body: str = "Some body text",
    updated_ago: timedelta | None = None,
) -> Article:
    now = datetime.now(timezone.utc)
    updated_at = now - updated_ago if updated_ago is not None else now
    article = Article(
        title=title,
        body=body,
        status=status,
        user_id=user.id,
        created_at=updated_at,
        updated_at=updated_at,
    )
    db.add(article)
    await db.flush()
    return article


def auth_headers_for(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {token_service.create_access_token(user.id)}"}


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
async def db_session() -> AsyncSession:
    """
    Yield a live AsyncSession for tests that need to interact with the
    database directly (e.g. seeding data, asserting ORM state).
    """
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    """Yield an httpx.AsyncClient wired to the FastAPI app via ASGITransport."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def current_user(db_session: AsyncSession) -> User:
    user = await make_user(db_session, "current")
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    user = await make_user(db_session, "other")
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def auth_headers(current_user: User) -> dict[str, str]:
    return auth_headers_for(current_user)
