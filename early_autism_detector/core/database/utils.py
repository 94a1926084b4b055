"""
Engine and session helpers.

The hosted database is Postgres reached through asyncpg; tests and local runs
may use ``sqlite+aiosqlite`` instead.
"""

from __future__ import annotations

import re
from typing import Any, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .base import Base

POSTGRES_SCHEME = re.compile(r"^postgres(?:ql)?(?:\+[a-z0-9_]+)?://")
# Supabase's transaction pooler listens on 6543 and cannot hold prepared statements
POOLER_PORT = ":6543/"


def normalize_database_url(db_url: str) -> str:
    """Force the asyncpg driver on any Postgres URL (``postgres://``, ``postgresql+psycopg://`` ...)."""
    return POSTGRES_SCHEME.sub("postgresql+asyncpg://", db_url, count=1)


def engine_options(db_url: str) -> Dict[str, Any]:
    if db_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    options: Dict[str, Any] = {"pool_pre_ping": True}
    if POOLER_PORT in db_url:
        options["connect_args"] = {"statement_cache_size": 0}
    return options


def create_engine(db_url: str) -> AsyncEngine:
    """Create the async engine for ``db_url``.

    Args:
        db_url: Database connection URL

    Returns:
        Configured AsyncEngine instance
    """
    url = normalize_database_url(db_url)
    return create_async_engine(url, **engine_options(url))


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Entities are returned from handlers after commit
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_all(engine: AsyncEngine) -> None:
    """Create any missing tables for the registered entities."""
    from . import entities  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
