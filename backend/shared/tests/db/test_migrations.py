"""Tests for schema versioning and the registered migration steps."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest

from shared.db.exceptions import MigrationError
from shared.db.game_repository import DocumentGameRepository
from shared.db.migrations import (
    SCHEMA_VERSION,
    VERSION_DOC_ID,
    add_last_played_at,
    migrate,
    parse_created_date,
    read_schema_version,
)

if TYPE_CHECKING:
    from shared.db.document_store import SqliteDocumentStore


def _ms(year: int, month: int, day: int) -> int:
    return int(datetime(year, month, day, tzinfo=UTC).timestamp() * 1000)


async def _stamp(store: SqliteDocumentStore, version: int) -> None:
    await store.put({"_id": VERSION_DOC_ID, "version": version})


class TestParseCreatedDate:
    @pytest.mark.parametrize(
        "value",
        ["October 19, 2026", "Oct 19, 2026", "10/19/2026", "2026-10-19", "  October 19, 2026  "],
    )
    def test_accepted_formats(self, value: str) -> None:
        assert parse_created_date(value) == _ms(2026, 10, 19)

    def test_single_digit_day(self) -> None:
        assert parse_created_date("March 5, 2024") == _ms(2024, 3, 5)

    @pytest.mark.parametrize("value", [None, "", "   ", "last tuesday", 20261019])
    def test_unparseable_returns_none(self, value: object) -> None:
        assert parse_created_date(value) is None


class TestMigrate:
    async def test_fresh_store_is_stamped_without_running_steps(self, store: SqliteDocumentStore) -> None:
        calls: list[int] = []

        async def step(_store: SqliteDocumentStore) -> int:
            calls.append(1)
            return 0

        version = await migrate(store, steps={SCHEMA_VERSION: step})

        assert version == SCHEMA_VERSION
        assert calls == []
        assert await read_schema_version(store) == SCHEMA_VERSION

    async def test_second_run_is_a_no_op(self, store: SqliteDocumentStore) -> None:
        await migrate(store)
        rev_before = (await store.get(VERSION_DOC_ID))["_rev"]

        assert await migrate(store) == SCHEMA_VERSION
        assert (await store.get(VERSION_DOC_ID))["_rev"] == rev_before

    async def test_runs_pending_steps_in_order(self, store: SqliteDocumentStore) -> None:
        await _stamp(store, 1)
        calls: list[int] = []

        def recorder(version: int):
            async def step(_store: SqliteDocumentStore) -> int:
                calls.append(version)
                return 0

            return step

        version = await migrate(store, target=4, steps={4: recorder(4), 2: recorder(2), 3: recorder(3)})

        assert version == 4
        assert calls == [2, 3, 4]
        assert await read_schema_version(store) == 4

    async def test_steps_at_or_below_stored_version_are_skipped(self, store: SqliteDocumentStore) -> None:
        await _stamp(store, 2)
        calls: list[int] = []

        async def step_two(_store: SqliteDocumentStore) -> int:
            calls.append(2)
            return 0

        async def step_three(_store: SqliteDocumentStore) -> int:
            calls.append(3)
            return 0

        await migrate(store, target=3, steps={2: step_two, 3: step_three})

        assert calls == [3]

    async def test_failed_step_leaves_version_unchanged(self, store: SqliteDocumentStore) -> None:
        await _stamp(store, 1)

        async def broken(_store: SqliteDocumentStore) -> int:
            raise RuntimeError("boom")

        with pytest.raises(MigrationError) as exc_info:
            await migrate(store, target=2, steps={2: broken})

        assert exc_info.value.version == 2
        assert "boom" in str(exc_info.value)
        assert await read_schema_version(store) == 1

    async def test_failed_run_is_retried_next_time(self, store: SqliteDocumentStore) -> None:
        await _stamp(store, 1)
        attempts: list[int] = []

        async def flaky(_store: SqliteDocumentStore) -> int:
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError("disk hiccup")
            return 0

        with pytest.raises(MigrationError):
            await migrate(store, target=2, steps={2: flaky})
        assert await migrate(store, target=2, steps={2: flaky}) == 2
        assert len(attempts) == 2

    async def test_newer_store_is_left_alone(self, store: SqliteDocumentStore) -> None:
        await _stamp(store, SCHEMA_VERSION + 3)

        assert await migrate(store) == SCHEMA_VERSION + 3
        assert await read_schema_version(store) == SCHEMA_VERSION + 3

    async def test_version_record_is_not_listed(self, store: SqliteDocumentStore) -> None:
        await migrate(store)
        assert await store.all_docs() == []

    async def test_read_schema_version_of_uninitialised_store(self, store: SqliteDocumentStore) -> None:
        assert await read_schema_version(store) is None


class TestAddLastPlayedAt:
    async def test_derives_timestamp_from_created_date(self, store: SqliteDocumentStore) -> None:
        await store.put({"_id": "g1", "type": "game", "created_date": "October 19, 2026"})
        await store.put({"_id": "g2", "type": "game", "created_date": "January 2, 2025"})

        assert await add_last_played_at(store) == 2

        assert (await store.get("g1"))["last_played_at"] == _ms(2026, 10, 19)
        assert (await store.get("g2"))["last_played_at"] == _ms(2025, 1, 2)

    async def test_unparseable_date_becomes_zero(self, store: SqliteDocumentStore) -> None:
        await store.put({"_id": "g1", "type": "game", "created_date": "someday"})

        await add_last_played_at(store)

        assert (await store.get("g1"))["last_played_at"] == 0

    async def test_legacy_date_field_and_missing_type(self, store: SqliteDocumentStore) -> None:
        await store.put({"_id": "g1", "date": "10/19/2026"})

        await add_last_played_at(store)

        doc = await store.get("g1")
        assert doc["last_played_at"] == _ms(2026, 10, 19)
        assert doc["type"] == "game"
        assert doc["created_date"] == "10/19/2026"
        assert "date" not in doc

    async def test_legacy_date_does_not_override_created_date(self, store: SqliteDocumentStore) -> None:
        await store.put({"_id": "g1", "type": "game", "created_date": "October 19, 2026", "date": "01/02/2025"})

        await add_last_played_at(store)

        doc = await store.get("g1")
        assert doc["created_date"] == "October 19, 2026"
        assert doc["last_played_at"] == _ms(2026, 10, 19)
        assert "date" not in doc

    async def test_legacy_games_are_listed_after_upgrade(self, store: SqliteDocumentStore) -> None:
        await _stamp(store, 1)
        await store.put({"_id": "g1", "date": "10/19/2026", "name": "Old", "variant": "simple", "players": ["Ann"]})
        await store.put({"_id": "g2", "date": "10/18/2026"})

        await migrate(store)
        games = await DocumentGameRepository(store).list_games()

        assert [(g.id, g.created_date, g.last_played_at) for g in games] == [("g1", "10/19/2026", _ms(2026, 10, 19))]

    async def test_course_templates_are_untouched(self, store: SqliteDocumentStore) -> None:
        rev = await store.put({"_id": "c1", "type": "course_template", "name": "Back Nine"})

        assert await add_last_played_at(store) == 0
        assert (await store.get("c1"))["_rev"] == rev

    async def test_rerunning_gives_the_same_result(self, store: SqliteDocumentStore) -> None:
        await store.put({"_id": "g1", "type": "game", "created_date": "October 19, 2026"})

        await add_last_played_at(store)
        await add_last_played_at(store)

        assert (await store.get("g1"))["last_played_at"] == _ms(2026, 10, 19)

    async def test_full_upgrade_from_version_one(self, store: SqliteDocumentStore) -> None:
        await _stamp(store, 1)
        await store.put({"_id": "g1", "type": "game", "created_date": "October 19, 2026"})

        assert await migrate(store) == SCHEMA_VERSION
        assert (await store.get("g1"))["last_played_at"] == _ms(2026, 10, 19)
