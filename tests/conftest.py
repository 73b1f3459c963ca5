"""
Pytest fixtures for test database, client, and authentication.

Each test gets a fresh schema. Requests run in their own session, like
production get_db, so a rolled-back request never touches fixture objects.
TEST_DATABASE_URL defaults to in-memory SQLite; point it at PostgreSQL to
run against the real dialect.
"""

import os

os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "test")

from typing import AsyncGenerator

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

import hotel_booking.models  # noqa: F401
from hotel_booking.main import app
from hotel_booking.db.base import Base
from hotel_booking.db.session import get_db
from hotel_booking.core.security import create_access_token
from hotel_booking.models import Hotel, Room, Ticket, TicketStatus, User

import factories

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # One shared connection so every session sees the same in-memory database
        return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    return {}


@pytest_asyncio.fixture(scope="function")
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Create tables, yield a session factory, then drop tables for isolation."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, **_engine_kwargs(TEST_DATABASE_URL))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging data and asserting on it."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests use the test database."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    return await factories.create_user(db_session)


@pytest_asyncio.fixture
async def auth_headers(test_user: User) -> dict:
    """Authorization headers with Bearer token for test_user."""
    token = create_access_token(data={"sub": str(test_user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def paid_hotel_ticket(db_session: AsyncSession, test_user: User) -> Ticket:
    """test_user holds a PAID, in-person, hotel-inclusive ticket."""
    enrollment = await factories.create_enrollment(db_session, test_user)
    ticket_type = await factories.create_ticket_type(db_session, is_remote=False, includes_hotel=True)
    return await factories.create_ticket(db_session, enrollment, ticket_type, TicketStatus.PAID)


@pytest_asyncio.fixture
async def hotel(db_session: AsyncSession) -> Hotel:
    return await factories.create_hotel(db_session)


@pytest_asyncio.fixture
async def room(db_session: AsyncSession, hotel: Hotel) -> Room:
    """A room with 4 slots and no bookings."""
    return await factories.create_room(db_session, hotel, capacity=4)


@pytest_asyncio.fixture
async def other_room(db_session: AsyncSession, hotel: Hotel) -> Room:
    return await factories.create_room(db_session, hotel, capacity=3, name="Double")
