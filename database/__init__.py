"""Database module."""
from database.connection import (
    Base,
    engine,
    async_session_maker,
    init_db,
    close_db,
)

__all__ = [
    "Base", "engine", "async_session_maker",
    "init_db", "close_db",
]
