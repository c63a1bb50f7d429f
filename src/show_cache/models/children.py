"""Child collection ORM models owned by a show.

Every row references ``shows.id`` with ``ON DELETE CASCADE``. Collections are
replaced wholesale on each refresh, so ``position`` keeps the order TMDB
returned them in.
"""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from show_cache.database import Base


class ShowCast(Base):
    """A cast member of a show."""

    __tablename__ = "show_cast"

    id: Mapped[int] = mapped_column(primary_key=True)
    show_id: Mapped[int] = mapped_column(ForeignKey("shows.id", ondelete="CASCADE"), index=True)
    tmdb_person_id: Mapped[int]
    name: Mapped[str] = mapped_column(String(255))
    character: Mapped[str | None] = mapped_column(Text, nullable=True)
    profile_path: Mapped[str | None] = mapped_column(String(255), nullable=True)
    position: Mapped[int] = mapped_column(default=0)  # Display order in credits


class ShowVideo(Base):
    """A video (trailer, teaser, ...) of a show."""

    __tablename__ = "show_videos"

    id: Mapped[int] = mapped_column(primary_key=True)
    show_id: Mapped[int] = mapped_column(ForeignKey("shows.id", ondelete="CASCADE"), index=True)
    tmdb_video_id: Mapped[str] = mapped_column(String(64))
    key: Mapped[str | None] = mapped_column(String(100), nullable=True)
    site: Mapped[str | None] = mapped_column(String(50), nullable=True)
    video_type: Mapped[str] = mapped_column(String(20))
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    size: Mapped[int | None] = mapped_column(nullable=True)
    official: Mapped[bool] = mapped_column(default=False)
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    position: Mapped[int] = mapped_column(default=0)


class ShowSeason(Base):
    """A season of a show."""

    __tablename__ = "show_seasons"

    id: Mapped[int] = mapped_column(primary_key=True)
    show_id: Mapped[int] = mapped_column(ForeignKey("shows.id", ondelete="CASCADE"), index=True)
    tmdb_season_id: Mapped[int | None] = mapped_column(nullable=True)
    season_number: Mapped[int]
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    overview: Mapped[str | None] = mapped_column(Text, nullable=True)
    episode_count: Mapped[int] = mapped_column(default=0)
    air_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    poster_path: Mapped[str | None] = mapped_column(String(255), nullable=True)
    position: Mapped[int] = mapped_column(default=0)


class ShowImage(Base):
    """A backdrop, poster or logo image of a show."""

    __tablename__ = "show_images"

    id: Mapped[int] = mapped_column(primary_key=True)
    show_id: Mapped[int] = mapped_column(ForeignKey("shows.id", ondelete="CASCADE"), index=True)
    image_type: Mapped[str] = mapped_column(String(20))
    file_path: Mapped[str] = mapped_column(String(255))
    width: Mapped[int] = mapped_column(default=0)
    height: Mapped[int] = mapped_column(default=0)
    aspect_ratio: Mapped[float] = mapped_column(Float, default=0.0)
    vote_average: Mapped[float] = mapped_column(Float, default=0.0)
    position: Mapped[int] = mapped_column(default=0)
