"""Mini README: Asynchronous SQLite store holding named snapshots.

Structure:
    * SnapshotStore - put/get/list/delete/restore for ``Snapshot`` records.

The snapshot store is deliberately separate from the synchronous key/value
store: it lives in its own SQLite database, every operation runs on a worker
thread via ``asyncio.to_thread`` and opens its own connection, and each
operation is a single transaction so SQLite serialises conflicting writes.
Writes to an existing id replace the stored record (last writer wins).

``open`` is idempotent and is invoked implicitly by every operation. Any
SQLite failure is raised as ``StorageUnavailableError`` so callers can treat
the whole feature as unavailable instead of crashing.
"""

from __future__ import annotations

import asyncio
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import List, Optional

from ..errors import InvalidFormatError, SnapshotNotFoundError, StorageUnavailableError
from ..logging_utils import get_logger
from ..storage import KeyValueStore, decode_json, encode_json
from .reconciler import ImportResult, import_into
from .snapshot import Snapshot

LOGGER = get_logger(__name__)

_SCHEMA = """
    CREATE TABLE IF NOT EXISTS snapshots (
        id TEXT PRIMARY KEY,
        created_at TEXT NOT NULL,
        document TEXT NOT NULL
    )
"""


def _decode_record(document: str) -> Snapshot:
    try:
        payload = decode_json(document)
    except ValueError as error:
        raise InvalidFormatError(
            f"Stored snapshot is not valid JSON: {error}", reason="invalid-json"
        ) from error
    return Snapshot.from_document(payload)


class SnapshotStore:
    """Keyed record store for snapshots backed by a SQLite database file."""

    def __init__(self, database_path: Path, primary_store: KeyValueStore) -> None:
        self.database_path = Path(database_path)
        self.primary_store = primary_store
        self._ready = False

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.database_path), timeout=10.0)

    def _initialise(self) -> None:
        try:
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
            with closing(self._connect()) as connection, connection:
                connection.execute(_SCHEMA)
        except (OSError, sqlite3.Error) as error:
            raise StorageUnavailableError(
                f"Snapshot database {self.database_path} is unavailable: {error}"
            ) from error

    async def open(self) -> None:
        """Create the snapshot table when missing; safe to call repeatedly."""

        if self._ready:
            return
        await asyncio.to_thread(self._initialise)
        self._ready = True
        LOGGER.debug("Snapshot store ready at %s", self.database_path)

    async def _run(self, operation, *args):
        await self.open()
        try:
            return await asyncio.to_thread(operation, *args)
        except sqlite3.Error as error:
            raise StorageUnavailableError(f"Snapshot store operation failed: {error}") from error

    def _put(self, snapshot: Snapshot) -> str:
        document = encode_json(snapshot.to_document(), ensure_ascii=False)
        with closing(self._connect()) as connection, connection:
            connection.execute(
                "INSERT OR REPLACE INTO snapshots (id, created_at, document) VALUES (?, ?, ?)",
                (snapshot.id, snapshot.meta.created_at, document),
            )
        return snapshot.id

    def _list(self) -> List[Snapshot]:
        with closing(self._connect()) as connection:
            rows = connection.execute(
                "SELECT document FROM snapshots ORDER BY created_at DESC, id DESC"
            ).fetchall()
        snapshots: List[Snapshot] = []
        for (document,) in rows:
            try:
                snapshots.append(_decode_record(document))
            except InvalidFormatError as error:
                LOGGER.warning("Skipping unreadable snapshot record: %s", error)
        return snapshots

    def _get(self, snapshot_id: str) -> Optional[str]:
        with closing(self._connect()) as connection:
            row = connection.execute(
                "SELECT document FROM snapshots WHERE id = ?", (snapshot_id,)
            ).fetchone()
        return row[0] if row else None

    def _delete(self, snapshot_id: str) -> int:
        with closing(self._connect()) as connection, connection:
            cursor = connection.execute("DELETE FROM snapshots WHERE id = ?", (snapshot_id,))
            return cursor.rowcount

    async def put(self, snapshot: Snapshot) -> str:
        """Persist ``snapshot`` under its id, replacing any existing record."""

        snapshot_id = await self._run(self._put, snapshot)
        LOGGER.info("Stored snapshot %s", snapshot_id)
        return snapshot_id

    async def list_all(self) -> List[Snapshot]:
        """Return every stored snapshot, most recent first."""

        return await self._run(self._list)

    async def get(self, snapshot_id: str) -> Snapshot:
        """Fetch one snapshot, raising ``SnapshotNotFoundError`` when absent."""

        document = await self._run(self._get, snapshot_id)
        if document is None:
            raise SnapshotNotFoundError(snapshot_id)
        return _decode_record(document)

    async def delete(self, snapshot_id: str) -> None:
        """Remove a snapshot; unknown ids are ignored."""

        removed = await self._run(self._delete, snapshot_id)
        LOGGER.info("Deleted snapshot %s (records removed=%s)", snapshot_id, removed)

    async def restore(self, snapshot_id: str, *, overwrite: bool = False) -> ImportResult:
        """Import a stored snapshot into the primary key/value store."""

        snapshot = await self.get(snapshot_id)
        LOGGER.info("Restoring snapshot %s overwrite=%s", snapshot_id, overwrite)
        return import_into(self.primary_store, snapshot.to_document(), overwrite=overwrite)
