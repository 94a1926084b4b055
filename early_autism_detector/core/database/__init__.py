"""
Persistence for the Early Autism Detector.

``entities`` holds the SQLModel tables (families, children, screenings, chat,
centers, saved locations and the center portal accounts), ``repositories``
wraps them in async data access classes, and ``session`` owns the engine the
API uses.
"""

from .base import Base
from .session import async_session_maker, dispose_db, engine, get_session, init_db
from .utils import create_all, create_engine, create_sessionmaker, normalize_database_url

__all__ = [
    "Base",
    "async_session_maker",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "dispose_db",
    "engine",
    "get_session",
    "init_db",
    "normalize_database_url",
]
