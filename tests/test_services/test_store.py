"""Tests for the cache store against a real SQLite database."""

import asyncio
from datetime import UTC, date, datetime, timedelta

import pytest

from show_cache.schemas.external import TMDBShowResult
from show_cache.schemas.show import (
    CastItem,
    ChildKind,
    ImageItem,
    SeasonItem,
    ShowFields,
    VideoItem,
)
from show_cache.services.store import CacheStore, StorageError

NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=UTC)

FULL_FIELDS = ShowFields(
    title="Pousada do Amor",
    original_title="사랑의 여관",
    overview="Uma pousada no interior...",
    first_air_date=date(2024, 3, 2),
    vote_average=8.1,
    vote_count=420,
    popularity=55.0,
    status="Ended",
    number_of_episodes=16,
    number_of_seasons=1,
    genre_ids=[18, 35],
    origin_country=["KR"],
    original_language="ko",
    episode_run_time=60,
)


def cast(*names: str) -> list[CastItem]:
    """Build cast items in the given order."""
    return [
        CastItem(tmdb_person_id=1000 + i, name=name, character=f"Role {i}", position=i)
        for i, name in enumerate(names)
    ]


async def fields_for(store: CacheStore, tmdb_id: int):
    show = await store.read_entity(tmdb_id)
    assert show is not None
    return show


class TestUpsertEntity:
    """Tests for inserting and updating shows."""

    async def test_insert_assigns_id(self, store: CacheStore) -> None:
        """Test that the first upsert inserts a row and returns its id."""
        show_id = await store.upsert_entity(100, FULL_FIELDS, refreshed_at=NOW)

        assert show_id is not None
        show = await fields_for(store, 100)
        assert show.id == show_id
        assert show.title == "Pousada do Amor"
        assert show.genre_ids == [18, 35]
        assert show.status == "Ended"
        assert show.last_refreshed_at is not None
        assert show.cached_at is not None

    async def test_upsert_is_idempotent(self, store: CacheStore) -> None:
        """Test that repeated upserts keep one row with the same id and last values."""
        first_id = await store.upsert_entity(100, FULL_FIELDS)
        updated = FULL_FIELDS.model_copy(update={"title": "Pousada do Amor (2024)"})
        second_id = await store.upsert_entity(100, updated)

        assert first_id == second_id
        shows, total = await store.list_popular(1, 20)
        assert total == 1
        assert shows[0].title == "Pousada do Amor (2024)"

    async def test_concurrent_upserts_converge(self, store: CacheStore) -> None:
        """Test that racing upserts for one TMDB id end with exactly one row."""
        ids = await asyncio.gather(
            *(
                store.upsert_entity(100, ShowFields(title=f"Title {i}", popularity=float(i)))
                for i in range(5)
            )
        )

        resolved = await store.resolve_internal_id(100)
        assert {show_id for show_id in ids if show_id is not None} <= {resolved}
        _, total = await store.list_popular(1, 20)
        assert total == 1

    async def test_summary_upsert_keeps_detail_fields(self, store: CacheStore) -> None:
        """Test that a listing summary never clears detail-only columns."""
        await store.upsert_entity(100, FULL_FIELDS, refreshed_at=NOW)
        before = await fields_for(store, 100)

        summary = TMDBShowResult(id=100, name="Pousada do Amor", popularity=99.0)
        await store.upsert_entity(100, ShowFields.from_summary(summary))

        after = await fields_for(store, 100)
        assert after.popularity == 99.0
        assert after.number_of_episodes == 16
        assert after.status == "Ended"
        assert after.original_language == "ko"
        assert after.last_refreshed_at == before.last_refreshed_at

    async def test_summary_insert_is_never_refreshed(self, store: CacheStore) -> None:
        """Test that a show first seen in a listing has no refresh timestamp."""
        summary = TMDBShowResult(id=200, name="Nova Série", popularity=10.0)
        await store.upsert_entity(200, ShowFields.from_summary(summary))

        show = await fields_for(store, 200)
        assert show.last_refreshed_at is None
        assert show.status == "Unknown"

    async def test_ids_are_not_reused(self, store: CacheStore) -> None:
        """Test that a pruned show's id is never handed to a new show."""
        old_id = await store.upsert_entity(100, FULL_FIELDS)
        deleted = await store.delete_older_than(timedelta(days=1), now=NOW + timedelta(days=3650))
        assert deleted == 1

        new_id = await store.upsert_entity(101, FULL_FIELDS)
        assert new_id is not None
        assert old_id is not None
        assert new_id > old_id


class TestReadEntity:
    """Tests for reading shows."""

    async def test_read_missing_returns_none(self, store: CacheStore) -> None:
        """Test that an unknown TMDB id reads as None."""
        assert await store.read_entity(404) is None
        assert await store.resolve_internal_id(404) is None

    async def test_read_children_of_new_show_are_empty(self, store: CacheStore) -> None:
        """Test that a show without children has four empty collections."""
        show_id = await store.upsert_entity(100, FULL_FIELDS)
        assert show_id is not None

        children = await store.read_child_collections(show_id)
        assert children.cast == []
        assert children.videos == []
        assert children.seasons == []
        assert children.images == []


class TestReplaceChildCollection:
    """Tests for replacing child collections."""

    async def test_replace_is_wholesale(self, store: CacheStore) -> None:
        """Test that a replacement leaves exactly the new items, in order."""
        show_id = await store.upsert_entity(100, FULL_FIELDS)
        assert show_id is not None

        await store.replace_child_collection(show_id, ChildKind.CAST, cast("A", "B", "C", "D", "E"))
        await store.replace_child_collection(show_id, ChildKind.CAST, cast("X", "Y", "Z"))

        children = await store.read_child_collections(show_id)
        assert [member.name for member in children.cast] == ["X", "Y", "Z"]
        assert [member.position for member in children.cast] == [0, 1, 2]

    async def test_replace_with_empty_clears(self, store: CacheStore) -> None:
        """Test that replacing with no items empties the collection."""
        show_id = await store.upsert_entity(100, FULL_FIELDS)
        assert show_id is not None
        await store.replace_child_collection(show_id, ChildKind.CAST, cast("A"))

        await store.replace_child_collection(show_id, ChildKind.CAST, [])

        children = await store.read_child_collections(show_id)
        assert children.cast == []

    async def test_collections_are_independent(self, store: CacheStore) -> None:
        """Test that replacing one collection leaves the others untouched."""
        show_id = await store.upsert_entity(100, FULL_FIELDS)
        assert show_id is not None
        videos = [
            VideoItem(tmdb_video_id="v1", key="abc", site="YouTube", video_type="trailer"),
        ]
        seasons = [SeasonItem(season_number=1, episode_count=16, position=0)]
        images = [ImageItem(image_type="poster", file_path="/p.jpg", width=500, height=750)]

        await store.replace_child_collection(show_id, ChildKind.VIDEOS, videos)
        await store.replace_child_collection(show_id, ChildKind.SEASONS, seasons)
        await store.replace_child_collection(show_id, ChildKind.IMAGES, images)
        await store.replace_child_collection(show_id, ChildKind.CAST, cast("A"))

        children = await store.read_child_collections(show_id)
        assert children.videos[0].video_type == "trailer"
        assert children.seasons[0].episode_count == 16
        assert children.images[0].file_path == "/p.jpg"
        assert [member.name for member in children.cast] == ["A"]

    async def test_replace_for_missing_show_fails(self, store: CacheStore) -> None:
        """Test that children cannot be written for a show that does not exist."""
        with pytest.raises(StorageError):
            await store.replace_child_collection(9999, ChildKind.CAST, cast("A"))

    async def test_replace_rejects_wrong_item_type(self, store: CacheStore) -> None:
        """Test that items of another collection are rejected before any write."""
        show_id = await store.upsert_entity(100, FULL_FIELDS)
        assert show_id is not None

        with pytest.raises(TypeError, match="CastItem"):
            await store.replace_child_collection(
                show_id, ChildKind.CAST, [SeasonItem(season_number=1)]
            )


class TestListPopular:
    """Tests for the cached popularity listing."""

    async def test_pages_by_descending_popularity(self, store: CacheStore) -> None:
        """Test ordering and paging of cached shows."""
        for tmdb_id, popularity in ((1, 10.0), (2, 30.0), (3, 20.0)):
            await store.upsert_entity(
                tmdb_id, ShowFields(title=f"Show {tmdb_id}", popularity=popularity)
            )

        first, total = await store.list_popular(1, 2)
        second, _ = await store.list_popular(2, 2)

        assert total == 3
        assert [show.tmdb_id for show in first] == [2, 3]
        assert [show.tmdb_id for show in second] == [1]

    async def test_empty_store(self, store: CacheStore) -> None:
        """Test listing an empty cache."""
        shows, total = await store.list_popular(1, 20)
        assert shows == []
        assert total == 0


class TestListStale:
    """Tests for selecting stale shows."""

    async def test_never_refreshed_first_then_oldest(self, store: CacheStore) -> None:
        """Test stale ordering and that fresh shows are excluded."""
        await store.upsert_entity(1, ShowFields(title="Old"), refreshed_at=NOW - timedelta(days=10))
        await store.upsert_entity(
            2, ShowFields(title="Fresh"), refreshed_at=NOW - timedelta(days=1)
        )
        await store.upsert_entity(3, ShowFields(title="Never"))
        await store.upsert_entity(
            4, ShowFields(title="Older"), refreshed_at=NOW - timedelta(days=30)
        )

        stale = await store.list_stale(timedelta(days=7), limit=50, now=NOW)

        assert stale == [3, 4, 1]

    async def test_limit(self, store: CacheStore) -> None:
        """Test that at most limit ids are returned."""
        for tmdb_id in range(1, 6):
            await store.upsert_entity(tmdb_id, ShowFields(title=f"Show {tmdb_id}"))

        stale = await store.list_stale(timedelta(days=7), limit=2, now=NOW)

        assert len(stale) == 2


class TestDeleteOlderThan:
    """Tests for pruning old shows."""

    async def test_deletes_old_and_cascades(self, store: CacheStore) -> None:
        """Test that old shows are removed along with their children."""
        old_id = await store.upsert_entity(
            1, ShowFields(title="Old"), refreshed_at=NOW - timedelta(days=120)
        )
        await store.upsert_entity(
            2, ShowFields(title="Recent"), refreshed_at=NOW - timedelta(days=5)
        )
        assert old_id is not None
        await store.replace_child_collection(old_id, ChildKind.CAST, cast("A", "B"))

        deleted = await store.delete_older_than(timedelta(days=90), now=NOW)

        assert deleted == 1
        assert await store.read_entity(1) is None
        assert await store.read_entity(2) is not None
        children = await store.read_child_collections(old_id)
        assert children.cast == []

    async def test_never_refreshed_aged_by_cached_at(self, store: CacheStore) -> None:
        """Test that never refreshed shows are pruned by when they were cached."""
        await store.upsert_entity(1, ShowFields(title="Listing only"))

        assert await store.delete_older_than(timedelta(days=90), now=NOW) == 0
        later = datetime.now(UTC) + timedelta(days=91)
        assert await store.delete_older_than(timedelta(days=90), now=later) == 1

    async def test_nothing_to_delete(self, store: CacheStore) -> None:
        """Test pruning an empty cache."""
        assert await store.delete_older_than(timedelta(days=90), now=NOW) == 0
