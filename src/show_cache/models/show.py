"""Show ORM model."""

from __future__ import annotations

from datetime import UTC, date, datetime

from sqlalchemy import JSON, Date, DateTime, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from show_cache.database import Base


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


class Show(Base):
    """Cached TV show data from TMDB.

    ``id`` is assigned by the store on first insert and never reused, even
    after the row is pruned.
    """

    __tablename__ = "shows"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    tmdb_id: Mapped[int] = mapped_column(unique=True, index=True)
    title: Mapped[str] = mapped_column(String(255))
    original_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    overview: Mapped[str | None] = mapped_column(Text, nullable=True)
    poster_path: Mapped[str | None] = mapped_column(String(255), nullable=True)
    backdrop_path: Mapped[str | None] = mapped_column(String(255), nullable=True)
    first_air_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    last_air_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    vote_average: Mapped[float] = mapped_column(Float, default=0.0)
    vote_count: Mapped[int] = mapped_column(default=0)
    popularity: Mapped[float] = mapped_column(Float, default=0.0, index=True)
    status: Mapped[str] = mapped_column(String(50), default="Unknown")
    number_of_episodes: Mapped[int | None] = mapped_column(nullable=True)
    number_of_seasons: Mapped[int | None] = mapped_column(nullable=True)
    genre_ids: Mapped[list[int]] = mapped_column(JSON, default=list)
    origin_country: Mapped[list[str]] = mapped_column(JSON, default=list)
    original_language: Mapped[str | None] = mapped_column(String(10), nullable=True)
    episode_run_time: Mapped[int | None] = mapped_column(nullable=True)
    homepage: Mapped[str | None] = mapped_column(String(500), nullable=True)
    tagline: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Only written by a successful full refresh from TMDB
    last_refreshed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    cached_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
