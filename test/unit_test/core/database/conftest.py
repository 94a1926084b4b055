"""Test configuration for database unit tests.

This module provides an in-memory SQLite engine and session for testing the
repositories, plus sample rows shared across test modules.
"""

from __future__ import annotations

from datetime import date
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlmodel.pool import StaticPool

from early_autism_detector.core.database import create_all, create_sessionmaker
from early_autism_detector.core.database.entities.children import Child


@pytest_asyncio.fixture(scope="function")
async def in_memory_engine() -> AsyncGenerator:
    """Create in-memory SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def in_memory_session(in_memory_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create in-memory SQLite session for testing."""
    async with create_sessionmaker(in_memory_engine)() as session:
        yield session


@pytest.fixture(scope="function")
def sample_child_data() -> dict:
    return {
        "parent_id": "parent-1",
        "name": "Sam",
        "date_of_birth": date(2023, 1, 15),
        "gender": "male",
    }


@pytest.fixture(scope="function")
def sample_center_data() -> dict:
    return {
        "name": "Sunrise Therapy",
        "type": "therapy",
        "address": "10 Main St, Springfield",
        "latitude": 40.1,
        "longitude": -89.6,
        "services": ["ABA Therapy"],
    }


@pytest_asyncio.fixture(scope="function")
async def child(in_memory_session: AsyncSession, sample_child_data: dict) -> Child:
    entity = Child(**sample_child_data)
    in_memory_session.add(entity)
    await in_memory_session.commit()
    return entity
