from typing import Any, AsyncGenerator, Dict

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, MappedAsDataclass

from ..config.settings import DatabaseBackend, settings


def _engine_options() -> Dict[str, Any]:
    if settings.DATABASE_BACKEND == DatabaseBackend.SQLITE:
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": settings.POSTGRES_POOL_SIZE,
        "max_overflow": settings.POSTGRES_MAX_OVERFLOW,
    }


def enable_sqlite_foreign_keys(async_engine: AsyncEngine) -> None:
    """Turn on foreign key enforcement for every SQLite connection.

    SQLite ships with it disabled, which would silently skip the
    ``ON DELETE CASCADE`` from chunks to documents.
    """

    @event.listens_for(async_engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_async_engine(settings.DATABASE_URL, echo=False, future=True, **_engine_options())

if engine.dialect.name == "sqlite":
    enable_sqlite_foreign_keys(engine)

local_session = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase, MappedAsDataclass):
    """Declarative base for every table in the knowledge base.

    ``MappedAsDataclass`` generates ``__init__``/``__repr__``/``__eq__`` from
    the mapped columns, so models are built with keyword arguments and
    columns marked ``init=False`` are filled by their defaults.
    """

    pass


async def async_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request.

    Example:
        ```python
        @router.get("/documents")
        async def list_documents(db: AsyncSession = Depends(async_session)):
            ...
        ```
    """
    async with local_session() as db:
        yield db


async def create_tables(bind: AsyncEngine | None = None) -> None:
    """Create any missing tables. Existing tables are left untouched."""
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


__all__ = [
    "Base",
    "async_session",
    "create_tables",
    "enable_sqlite_foreign_keys",
    "engine",
    "local_session",
]
