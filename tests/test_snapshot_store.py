"""Mini README: Tests for the asynchronous SQLite snapshot store.

Each test drives the coroutines with ``asyncio.run`` so the suite needs no
async plugin.
"""

from __future__ import annotations

import asyncio
import json
import sqlite3
from contextlib import closing
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from shopbill.backup import SnapshotStore, build_snapshot
from shopbill.errors import InvalidFormatError, SnapshotNotFoundError, StorageUnavailableError
from shopbill.storage import InMemoryKeyValueStore

BASE_TIME = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)


def _snapshot_at(store: InMemoryKeyValueStore, minutes: int):
    return build_snapshot(store, now=lambda: BASE_TIME + timedelta(minutes=minutes))


@pytest.fixture()
def primary() -> InMemoryKeyValueStore:
    store = InMemoryKeyValueStore()
    store.set("shopName", "Corner Store")
    return store


@pytest.fixture()
def snapshot_store(tmp_path: Path, primary: InMemoryKeyValueStore) -> SnapshotStore:
    return SnapshotStore(tmp_path / "snapshots.sqlite3", primary)


def test_open_is_idempotent(snapshot_store: SnapshotStore) -> None:
    async def scenario():
        await snapshot_store.open()
        await snapshot_store.open()
        return await snapshot_store.list_all()

    assert asyncio.run(scenario()) == []


def test_list_returns_most_recent_first(snapshot_store: SnapshotStore, primary) -> None:
    first, second, third = (_snapshot_at(primary, minutes) for minutes in (0, 5, 10))

    async def scenario():
        for snapshot in (second, first, third):
            await snapshot_store.put(snapshot)
        return await snapshot_store.list_all()

    listed = asyncio.run(scenario())

    assert [snapshot.id for snapshot in listed] == [third.id, second.id, first.id]
    assert listed[0].data["shopName"] == "Corner Store"


def test_put_returns_id_and_overwrites(snapshot_store: SnapshotStore, primary) -> None:
    original = _snapshot_at(primary, 0)
    primary.set("shopName", "Renamed")
    replacement = _snapshot_at(primary, 0)

    async def scenario():
        stored_id = await snapshot_store.put(original)
        await snapshot_store.put(replacement)
        return stored_id, await snapshot_store.list_all(), await snapshot_store.get(original.id)

    stored_id, listed, fetched = asyncio.run(scenario())

    assert stored_id == original.id
    assert len(listed) == 1
    assert fetched.data["shopName"] == "Renamed"


def test_delete_is_silent_for_unknown_ids(snapshot_store: SnapshotStore, primary) -> None:
    snapshot = _snapshot_at(primary, 0)

    async def scenario():
        await snapshot_store.put(snapshot)
        await snapshot_store.delete("snap-unknown")
        await snapshot_store.delete(snapshot.id)
        return await snapshot_store.list_all()

    assert asyncio.run(scenario()) == []


def test_concurrent_puts_are_all_persisted(snapshot_store: SnapshotStore, primary) -> None:
    snapshots = [_snapshot_at(primary, minutes) for minutes in range(6)]

    async def scenario():
        await asyncio.gather(*(snapshot_store.put(snapshot) for snapshot in snapshots))
        return await snapshot_store.list_all()

    listed = asyncio.run(scenario())

    assert [snapshot.id for snapshot in listed] == [snapshot.id for snapshot in reversed(snapshots)]


def test_restore_respects_overwrite_policy(snapshot_store: SnapshotStore, primary) -> None:
    snapshot = _snapshot_at(primary, 0)
    primary.set("shopName", "Changed")

    async def scenario(overwrite: bool):
        await snapshot_store.put(snapshot)
        return await snapshot_store.restore(snapshot.id, overwrite=overwrite)

    asyncio.run(scenario(False))
    assert primary.get("shopName") == "Changed"

    asyncio.run(scenario(True))
    assert primary.get("shopName") == "Corner Store"


def test_restore_of_unknown_id_leaves_primary_untouched(snapshot_store: SnapshotStore, primary) -> None:
    before = {key: primary.read_raw(key) for key in primary.keys()}

    with pytest.raises(SnapshotNotFoundError):
        asyncio.run(snapshot_store.restore("snap-missing", overwrite=True))

    assert {key: primary.read_raw(key) for key in primary.keys()} == before


def test_unusable_database_path_reports_storage_unavailable(tmp_path: Path, primary) -> None:
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("file", encoding="utf-8")
    store = SnapshotStore(blocker / "snapshots.sqlite3", primary)

    with pytest.raises(StorageUnavailableError):
        asyncio.run(store.open())


def _insert_raw(database_path: Path, snapshot_id: str, created_at: str, document: str) -> None:
    with closing(sqlite3.connect(str(database_path))) as connection, connection:
        connection.execute(
            "INSERT INTO snapshots (id, created_at, document) VALUES (?, ?, ?)",
            (snapshot_id, created_at, document),
        )


def test_unreadable_records_are_skipped_by_listing_and_rejected_by_get(
    snapshot_store: SnapshotStore, primary: InMemoryKeyValueStore
) -> None:
    async def scenario():
        kept = await snapshot_store.put(_snapshot_at(primary, 0))
        _insert_raw(snapshot_store.database_path, "broken-json", "2024-05-01T09:05:00.000Z", "{oops")
        _insert_raw(
            snapshot_store.database_path,
            "bad-version",
            "2024-05-01T09:06:00.000Z",
            json.dumps({"id": "bad-version", "meta": {"version": "abc"}, "data": {}}),
        )
        listed = await snapshot_store.list_all()
        with pytest.raises(InvalidFormatError) as version_error:
            await snapshot_store.get("bad-version")
        with pytest.raises(InvalidFormatError) as json_error:
            await snapshot_store.get("broken-json")
        return kept, listed, version_error.value, json_error.value

    kept, listed, version_error, json_error = asyncio.run(scenario())

    assert [snapshot.id for snapshot in listed] == [kept]
    assert version_error.reason == "invalid-version"
    assert json_error.reason == "invalid-json"
