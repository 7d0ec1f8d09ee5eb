"""Database layer - session management, base models, and mixins."""

from bookshelf.core.database.base import Base, IntIdMixin, TimestampMixin
from bookshelf.core.database.session import (
    async_engine,
    async_session_factory,
    get_db,
)


__all__ = [
    "Base",
    "IntIdMixin",
    "TimestampMixin",
    "async_engine",
    "async_session_factory",
    "get_db",
]
