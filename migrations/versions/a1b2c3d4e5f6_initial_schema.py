"""Initial schema

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "a1b2c3d4e5f6"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    # Internal ids are never reused, hence AUTOINCREMENT on SQLite
    op.create_table(
        "shows",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("tmdb_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("original_title", sa.String(length=255), nullable=True),
        sa.Column("overview", sa.Text(), nullable=True),
        sa.Column("poster_path", sa.String(length=255), nullable=True),
        sa.Column("backdrop_path", sa.String(length=255), nullable=True),
        sa.Column("first_air_date", sa.Date(), nullable=True),
        sa.Column("last_air_date", sa.Date(), nullable=True),
        sa.Column("vote_average", sa.Float(), nullable=False),
        sa.Column("vote_count", sa.Integer(), nullable=False),
        sa.Column("popularity", sa.Float(), nullable=False),
        sa.Column("status", sa.String(length=50), nullable=False),
        sa.Column("number_of_episodes", sa.Integer(), nullable=True),
        sa.Column("number_of_seasons", sa.Integer(), nullable=True),
        sa.Column("genre_ids", sa.JSON(), nullable=False),
        sa.Column("origin_country", sa.JSON(), nullable=False),
        sa.Column("original_language", sa.String(length=10), nullable=True),
        sa.Column("episode_run_time", sa.Integer(), nullable=True),
        sa.Column("homepage", sa.String(length=500), nullable=True),
        sa.Column("tagline", sa.Text(), nullable=True),
        sa.Column("last_refreshed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cached_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )
    with op.batch_alter_table("shows", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_shows_tmdb_id"), ["tmdb_id"], unique=True)
        batch_op.create_index(batch_op.f("ix_shows_popularity"), ["popularity"], unique=False)
        batch_op.create_index(
            batch_op.f("ix_shows_last_refreshed_at"), ["last_refreshed_at"], unique=False
        )

    # Child collections, removed together with their show
    op.create_table(
        "show_cast",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("show_id", sa.Integer(), nullable=False),
        sa.Column("tmdb_person_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("character", sa.Text(), nullable=True),
        sa.Column("profile_path", sa.String(length=255), nullable=True),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["show_id"], ["shows.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("show_cast", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_show_cast_show_id"), ["show_id"], unique=False)

    op.create_table(
        "show_videos",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("show_id", sa.Integer(), nullable=False),
        sa.Column("tmdb_video_id", sa.String(length=64), nullable=False),
        sa.Column("key", sa.String(length=100), nullable=True),
        sa.Column("site", sa.String(length=50), nullable=True),
        sa.Column("video_type", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("size", sa.Integer(), nullable=True),
        sa.Column("official", sa.Boolean(), nullable=False),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["show_id"], ["shows.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("show_videos", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_show_videos_show_id"), ["show_id"], unique=False)

    op.create_table(
        "show_seasons",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("show_id", sa.Integer(), nullable=False),
        sa.Column("tmdb_season_id", sa.Integer(), nullable=True),
        sa.Column("season_number", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("overview", sa.Text(), nullable=True),
        sa.Column("episode_count", sa.Integer(), nullable=False),
        sa.Column("air_date", sa.Date(), nullable=True),
        sa.Column("poster_path", sa.String(length=255), nullable=True),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["show_id"], ["shows.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("show_seasons", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_show_seasons_show_id"), ["show_id"], unique=False)

    op.create_table(
        "show_images",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("show_id", sa.Integer(), nullable=False),
        sa.Column("image_type", sa.String(length=20), nullable=False),
        sa.Column("file_path", sa.String(length=255), nullable=False),
        sa.Column("width", sa.Integer(), nullable=False),
        sa.Column("height", sa.Integer(), nullable=False),
        sa.Column("aspect_ratio", sa.Float(), nullable=False),
        sa.Column("vote_average", sa.Float(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["show_id"], ["shows.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("show_images", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_show_images_show_id"), ["show_id"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    for table in ("show_images", "show_seasons", "show_videos", "show_cast"):
        with op.batch_alter_table(table, schema=None) as batch_op:
            batch_op.drop_index(batch_op.f(f"ix_{table}_show_id"))
        op.drop_table(table)

    with op.batch_alter_table("shows", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_shows_last_refreshed_at"))
        batch_op.drop_index(batch_op.f("ix_shows_popularity"))
        batch_op.drop_index(batch_op.f("ix_shows_tmdb_id"))
    op.drop_table("shows")
