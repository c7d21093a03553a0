"""Database engine, session dependency and shared model mixins."""

from .models import TimestampMixin
from .session import Base, async_session, create_tables, enable_sqlite_foreign_keys, engine, local_session

__all__ = [
    "Base",
    "TimestampMixin",
    "async_session",
    "create_tables",
    "enable_sqlite_foreign_keys",
    "engine",
    "local_session",
]
