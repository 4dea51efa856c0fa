"""
Pytest fixtures for test database, client, and authentication.

Tables are created and dropped around every test. The database defaults to
a SQLite file under the test's tmp_path so the suite runs anywhere and
leaves nothing behind; point TEST_DATABASE_URL at PostgreSQL
(postgresql+asyncpg://...) to run against the real engine.
"""

import os

os.environ.setdefault("REDIS_ENABLED", "false")

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker

from hotel_booking.main import app
from hotel_booking.db.base import Base
from hotel_booking.db import session as db_session_module
from hotel_booking.db.session import get_db
from hotel_booking.models import Hotel, Room, User

from tests import factories

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL")


@pytest_asyncio.fixture(scope="function")
async def test_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    url = TEST_DATABASE_URL or f"sqlite+aiosqlite:///{tmp_path / 'hotel_booking.db'}"
    engine = create_async_engine(url, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker:
    """Opens sessions on the test database, independent of the test's own session."""
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def transactional_client(
    session_factory: async_sessionmaker, monkeypatch
) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTP client served through the real `get_db`: each request gets its own
    session on the test database and is committed or rolled back as a unit.
    Fixture data must be committed before it is visible to requests.
    """
    monkeypatch.setattr(db_session_module, "AsyncSessionLocal", session_factory)
    app.dependency_overrides.clear()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Registered user with no enrollment."""
    return await factories.create_user(db_session, email="test@example.com")


@pytest_asyncio.fixture
async def eligible_user(db_session: AsyncSession) -> User:
    """User whose paid ticket includes an in-person stay with hotel."""
    return await factories.create_eligible_user(db_session)


async def _bearer(db_session: AsyncSession, user: User) -> dict:
    token = await factories.generate_valid_token(db_session, user)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def auth_headers(db_session: AsyncSession, test_user: User) -> dict:
    return await _bearer(db_session, test_user)


@pytest_asyncio.fixture
async def eligible_headers(db_session: AsyncSession, eligible_user: User) -> dict:
    return await _bearer(db_session, eligible_user)


@pytest_asyncio.fixture
async def hotel(db_session: AsyncSession) -> Hotel:
    return await factories.create_hotel(db_session)


@pytest_asyncio.fixture
async def room(db_session: AsyncSession, hotel: Hotel) -> Room:
    """Room for three guests."""
    return await factories.create_room(db_session, hotel.id, capacity=3)


@pytest_asyncio.fixture
async def single_bed_room(db_session: AsyncSession, hotel: Hotel) -> Room:
    return await factories.create_room(db_session, hotel.id, capacity=1)
