"""
Test fixtures for Parlor tests.
"""

import os

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Set test database before importing app
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

from parlor.admins import AdminStore
from parlor.clock import now_millis
from parlor.db import Base, get_db, make_engine
from parlor.hashing import hash_password
from parlor.main import app
from parlor.rooms import RoomStore
from parlor.sessions import SessionStore

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin-password"

# One shared in-memory SQLite connection, with foreign keys enabled
test_engine = make_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)

TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def override_get_db():
    """Override database dependency for tests."""
    async with TestSessionLocal() as session:
        yield session


# Override the dependency
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables before each test, drop after."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client():
    """Async HTTP client for testing FastAPI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_session():
    """Direct database session for test setup/assertions."""
    async with TestSessionLocal() as session:
        yield session


@pytest.fixture
def session_factory():
    return TestSessionLocal


@pytest.fixture
def session_store(db_session):
    return SessionStore(db_session)


@pytest.fixture
def room_store(db_session):
    return RoomStore(db_session)


@pytest.fixture
def make_room(room_store):
    """Create a room, by default one created a minute ago."""

    async def _make_room(name="lobby", password="secret", created_at=None):
        if created_at is None:
            created_at = now_millis() - 60_000
        return await room_store.create(name, hash_password(password), created_at=created_at)

    return _make_room


@pytest.fixture
def admin_credentials():
    return {"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD}


@pytest.fixture
async def admin_client(client, db_session):
    """HTTP client whose session has been elevated to admin."""
    await AdminStore(db_session).add(ADMIN_USERNAME, ADMIN_PASSWORD)
    response = await client.post(
        "/admin_login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return client
