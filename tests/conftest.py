"""
Pytest fixtures for test database, client, and authentication.

Tables are created and dropped around every test. TEST_DATABASE_URL selects
the database; it defaults to a local SQLite file so the suite runs without a
server, and can point at PostgreSQL to exercise the production dialect.
"""

import os
from typing import AsyncGenerator

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from hotel_booking.main import app
from hotel_booking.db.base import Base
from hotel_booking.db.session import get_db
from hotel_booking.models import Enrollment, Hotel, TicketStatus, User
from tests import factories

TEST_DATABASE_URL = os.environ.get(
    "TEST_DATABASE_URL", "sqlite+aiosqlite:///./test_hotel_booking.db"
)


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield session, then drop tables for isolation."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


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


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    return await factories.create_user(db_session, email="test@example.com", password="testpassword123")


@pytest_asyncio.fixture
async def auth_token(db_session: AsyncSession, test_user: User) -> str:
    """JWT with a matching session row for the test user."""
    return await factories.create_session(db_session, test_user)


@pytest_asyncio.fixture
async def auth_headers(auth_token: str) -> dict:
    """Authorization headers with Bearer token."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest_asyncio.fixture
async def hotel(db_session: AsyncSession) -> Hotel:
    return await factories.create_hotel(db_session)


@pytest_asyncio.fixture
async def enrollment(db_session: AsyncSession, test_user: User) -> Enrollment:
    return await factories.create_enrollment_with_address(db_session, test_user)


@pytest_asyncio.fixture
async def eligible_user(db_session: AsyncSession, test_user: User, enrollment: Enrollment) -> User:
    """Test user holding a paid, in-person, hotel-inclusive ticket."""
    ticket_type = await factories.create_ticket_type(db_session, is_remote=False, includes_hotel=True)
    await factories.create_ticket(db_session, enrollment, ticket_type, TicketStatus.PAID)
    return test_user
