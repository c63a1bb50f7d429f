"""Persistent cache store for shows and their child collections.

Every operation runs in its own transaction, so a failed write to one child
collection never rolls back the show row or another collection.
"""

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy import delete, func, insert, or_, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from show_cache.models import Show, ShowCast, ShowImage, ShowSeason, ShowVideo
from show_cache.schemas.show import (
    CastItem,
    ChildCollections,
    ChildItem,
    ChildKind,
    ImageItem,
    SeasonItem,
    ShowFields,
    VideoItem,
)

logger = logging.getLogger(__name__)

_CHILD_MODELS = {
    ChildKind.CAST: ShowCast,
    ChildKind.VIDEOS: ShowVideo,
    ChildKind.SEASONS: ShowSeason,
    ChildKind.IMAGES: ShowImage,
}

_ITEM_SCHEMAS: dict[ChildKind, type[ChildItem]] = {
    ChildKind.CAST: CastItem,
    ChildKind.VIDEOS: VideoItem,
    ChildKind.SEASONS: SeasonItem,
    ChildKind.IMAGES: ImageItem,
}

# Second key of the Postgres advisory lock taken while replacing a collection
_LOCK_KEYS = {
    ChildKind.CAST: 1,
    ChildKind.VIDEOS: 2,
    ChildKind.SEASONS: 3,
    ChildKind.IMAGES: 4,
}


class StorageError(Exception):
    """Raised when the store is unreachable or rejects an operation."""


class CacheStore:
    """Relational storage for cached shows, keyed by TMDB id.

    Works on SQLite (aiosqlite) and PostgreSQL (asyncpg). Upserts rely on
    ``INSERT ... ON CONFLICT`` so concurrent writers for the same TMDB id
    converge on a single row.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session, session.begin():
                yield session
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to {operation}: {e}") from e

    @staticmethod
    def _dialect(session: AsyncSession) -> str:
        return session.get_bind().dialect.name

    def _upsert_statement(self, session: AsyncSession, values: dict[str, Any]) -> Any:
        dialect = self._dialect(session)
        if dialect == "postgresql":
            stmt = pg_insert(Show).values(**values)
        elif dialect == "sqlite":
            stmt = sqlite_insert(Show).values(**values)
        else:
            raise StorageError(f"Unsupported database dialect: {dialect}")

        # Last write wins on every column the caller provided
        update_columns = {key: stmt.excluded[key] for key in values if key != "tmdb_id"}
        return stmt.on_conflict_do_update(
            index_elements=[Show.tmdb_id],
            set_=update_columns,
        ).returning(Show.id)

    async def read_entity(self, tmdb_id: int) -> Show | None:
        """Return the cached show with this TMDB id, or None."""
        async with self._transaction("read show") as session:
            result = await session.execute(select(Show).where(Show.tmdb_id == tmdb_id))
            return result.scalar_one_or_none()

    async def resolve_internal_id(self, tmdb_id: int) -> int | None:
        """Return the store-assigned id of the show with this TMDB id, or None."""
        async with self._transaction("resolve show id") as session:
            result = await session.execute(select(Show.id).where(Show.tmdb_id == tmdb_id))
            return result.scalar_one_or_none()

    async def read_child_collections(self, show_id: int) -> ChildCollections:
        """Return every child collection of a show, each in origin order."""
        collections: dict[str, list[Any]] = {}
        async with self._transaction("read child collections") as session:
            for kind, model in _CHILD_MODELS.items():
                result = await session.execute(
                    select(model)
                    .where(model.show_id == show_id)
                    .order_by(model.position, model.id)
                )
                schema = _ITEM_SCHEMAS[kind]
                collections[kind.value] = [
                    schema.model_validate(row) for row in result.scalars().all()
                ]
        return ChildCollections(**collections)

    async def upsert_entity(
        self,
        tmdb_id: int,
        fields: ShowFields,
        refreshed_at: datetime | None = None,
    ) -> int | None:
        """Insert or update the show with this TMDB id.

        Args:
            tmdb_id: TMDB show ID.
            fields: Column values; only explicitly set fields are written.
            refreshed_at: Written to ``last_refreshed_at`` when given. Left
                untouched otherwise.

        Returns:
            The store-assigned id, or None when the database did not report it.
        """
        values = fields.to_values()
        values["tmdb_id"] = tmdb_id
        if refreshed_at is not None:
            values["last_refreshed_at"] = refreshed_at

        async with self._transaction("upsert show") as session:
            result = await session.execute(self._upsert_statement(session, values))
            return result.scalar_one_or_none()

    async def replace_child_collection(
        self,
        show_id: int,
        kind: ChildKind,
        items: Sequence[ChildItem],
    ) -> None:
        """Replace one child collection of a show in a single transaction.

        Raises:
            StorageError: If the write fails, including when the show does not exist.
        """
        schema = _ITEM_SCHEMAS[kind]
        for item in items:
            if not isinstance(item, schema):
                raise TypeError(f"Expected {schema.__name__} items for {kind.value}")

        model = _CHILD_MODELS[kind]
        rows = [{**item.model_dump(), "show_id": show_id} for item in items]

        async with self._transaction(f"replace {kind.value}") as session:
            if self._dialect(session) == "postgresql":
                # Serialise replacements of the same (show, kind) across transactions
                await session.execute(select(func.pg_advisory_xact_lock(show_id, _LOCK_KEYS[kind])))
            await session.execute(
                delete(model)
                .where(model.show_id == show_id)
                .execution_options(synchronize_session=False)
            )
            if rows:
                await session.execute(insert(model), rows)

        logger.debug("Replaced %s for show %s with %d items", kind.value, show_id, len(rows))

    async def list_popular(self, page: int, page_size: int) -> tuple[list[Show], int]:
        """Return one page of cached shows by descending popularity, and the total count."""
        offset = (page - 1) * page_size
        async with self._transaction("list popular shows") as session:
            total = (await session.execute(select(func.count(Show.id)))).scalar_one()
            result = await session.execute(
                select(Show)
                .order_by(Show.popularity.desc(), Show.id)
                .offset(offset)
                .limit(page_size)
            )
            return list(result.scalars().all()), total

    async def list_stale(
        self,
        max_age: timedelta,
        limit: int,
        now: datetime | None = None,
    ) -> list[int]:
        """Return up to ``limit`` TMDB ids of stale shows, least recently refreshed first."""
        cutoff = (now or datetime.now(UTC)) - max_age
        async with self._transaction("list stale shows") as session:
            result = await session.execute(
                select(Show.tmdb_id)
                .where(or_(Show.last_refreshed_at.is_(None), Show.last_refreshed_at < cutoff))
                .order_by(Show.last_refreshed_at.asc().nulls_first(), Show.id)
                .limit(limit)
            )
            return list(result.scalars().all())

    async def delete_older_than(self, max_age: timedelta, now: datetime | None = None) -> int:
        """Hard delete shows not refreshed within ``max_age``; children cascade.

        Shows that were never refreshed are aged by when they were first cached.
        """
        cutoff = (now or datetime.now(UTC)) - max_age
        async with self._transaction("delete old shows") as session:
            result = await session.execute(
                delete(Show)
                .where(func.coalesce(Show.last_refreshed_at, Show.cached_at) < cutoff)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount or 0
