import os
from typing import AsyncGenerator
from unittest.mock import patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel.pool import StaticPool

# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Set test database URL before importing app
os.environ["DATABASE_URL"] = TEST_DATABASE_URL

PARENT_ID = "parent-1"
PARENT_EMAIL = "parent@example.com"


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database for each test."""
    from early_autism_detector.core.database import create_all

    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_maker = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session


@pytest.fixture
def parent_user():
    from early_autism_detector.integrations.supabase_auth import SupabaseUser

    return SupabaseUser(id=PARENT_ID, email=PARENT_EMAIL, identities=[{"provider": "email"}])


@pytest.fixture
def app(session: AsyncSession):
    """The application with the database session overridden."""
    from early_autism_detector.core.database import get_session
    from early_autism_detector.server.main import app
    from early_autism_detector.server.services.rate_limit import limiter

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override
    limiter.reset()

    yield app

    app.dependency_overrides.clear()
    limiter.reset()


@pytest_asyncio.fixture(name="anon_client")
async def anon_client_fixture(app) -> AsyncGenerator[AsyncClient, None]:
    """Client without a signed-in parent."""

    # Mock the lifespan to prevent database initialization during tests
    async def mock_lifespan(app):
        yield

    with patch("early_autism_detector.server.main.lifespan", mock_lifespan):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            yield client


@pytest_asyncio.fixture(name="client")
async def client_fixture(app, anon_client: AsyncClient, parent_user) -> AsyncGenerator[AsyncClient, None]:
    """Client signed in as ``parent_user``."""
    from early_autism_detector.server.services.auth import get_current_user

    async def get_current_user_override():
        return parent_user

    app.dependency_overrides[get_current_user] = get_current_user_override
    yield anon_client
