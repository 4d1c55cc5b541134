"""
MarkNotes Backend - Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment variables are set before anything from `marknotes` is
       imported, so the settings singleton sees test values. Each test gets
       its own SQLite file (aiosqlite) and a fresh app whose
       `get_db_session` dependency points at it.

Fixture Hierarchy:
    Function-scoped:
    ├── mock_db_session: AsyncMock session for pure service unit tests
    ├── db_engine:       per-test SQLite engine with all tables created
    ├── db_session:      session on db_engine for service tests
    ├── owner / other_owner: persisted users
    ├── app:             fresh FastAPI app bound to db_engine
    ├── test_client:     HTTPX AsyncClient over ASGITransport
    └── auth_headers / other_auth_headers: bearer headers for two accounts
"""

import os
import tempfile
import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

# Must run before any marknotes import
os.environ["DATABASE_URL"] = (
    "sqlite+aiosqlite:///" + os.path.join(tempfile.mkdtemp(prefix="marknotes_test_"), "app.db")
)
os.environ["JWT_SECRET"] = "test-secret-with-enough-length-for-hs256-signing"
os.environ["GRAMMAR_API_KEY"] = "test-key-not-real"
os.environ["RATE_LIMIT_REQUESTS"] = "10000"
os.environ["RETRY_MAX_ATTEMPTS"] = "1"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402

from marknotes.database import create_tables, get_db_session  # noqa: E402
from marknotes.models.user import User  # noqa: E402
from marknotes.security import create_access_token  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Unit-test doubles
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession for tests that only care how a service reacts to
    database results or failures.
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Real database (SQLite per test)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


async def _make_user(session_factory, username: str) -> User:
    user = User(
        id=uuid.uuid4(),
        username=username,
        hashed_password="not-a-real-hash",
        created_at=datetime.now(timezone.utc),
    )
    async with session_factory() as session:
        session.add(user)
        await session.commit()
    return user


@pytest_asyncio.fixture
async def owner(session_factory):
    return await _make_user(session_factory, "alice")


@pytest_asyncio.fixture
async def other_owner(session_factory):
    return await _make_user(session_factory, "mallory")


# ══════════════════════════════════════════════════════════════════════════
# Application and HTTP client
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app(session_factory):
    """
    A fresh app per test. ASGITransport does not run the lifespan, so
    tables come from db_engine and no startup validation happens here.
    """
    from marknotes.main import create_app

    application = create_app()

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db_session] = override_get_db_session
    return application


@pytest_asyncio.fixture
async def test_client(app):
    """
    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def auth_headers(owner):
    return {"Authorization": f"Bearer {create_access_token(str(owner.id))}"}


@pytest.fixture
def other_auth_headers(other_owner):
    return {"Authorization": f"Bearer {create_access_token(str(other_owner.id))}"}
