"""Database configuration with async SQLAlchemy support."""

from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from show_cache.config import get_settings


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine.

    SQLite connections get foreign key enforcement switched on, so child
    rows can never outlive their show.
    """
    new_engine = create_async_engine(database_url, echo=echo)

    if new_engine.dialect.name == "sqlite":

        @event.listens_for(new_engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return new_engine


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to the given engine."""
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_models(bind: AsyncEngine) -> None:
    """Create all tables. Intended for development and tests; use Alembic otherwise."""
    # Import models so they register on Base.metadata
    import show_cache.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


settings = get_settings()

# Create async engine
engine = create_engine(settings.database_url, echo=settings.debug)

# Create async session factory
async_session = create_session_factory(engine)
