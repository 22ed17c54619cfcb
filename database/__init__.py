"""Database package: engine, session factory and declarative base."""
from database.base import Base, async_session_maker, engine, init_db, close_db

__all__ = [
    "Base",
    "async_session_maker",
    "engine",
    "init_db",
    "close_db",
]
