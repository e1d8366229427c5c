"""Mini README: User-facing backup operations with success/failure outcomes.

Structure:
    * OperationOutcome - flag, short message and optional payload per call.
    * BackupService - export, import and snapshot lifecycle for one shop.

Every operation converts the backup exceptions into an ``OperationOutcome``
whose message is suitable for a toast or a CLI line. Listing snapshots treats
an unavailable snapshot database as "no snapshots" rather than an error.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, List, Optional

from ..configuration import ShopbillSettings, get_settings
from ..errors import BackupError, StorageUnavailableError
from ..logging_utils import get_logger
from ..storage import JsonFileKeyValueStore, KeyValueStore
from .reconciler import import_from_document
from .snapshot import Snapshot, build_snapshot, write_download
from .snapshot_store import SnapshotStore

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class OperationOutcome:
    """Result of a user-facing operation."""

    ok: bool
    message: str
    payload: Any = None


class BackupService:
    """Wire the key/value store, snapshot builder and snapshot store together."""

    def __init__(
        self,
        store: KeyValueStore,
        snapshot_store: SnapshotStore,
        *,
        app_name: str = "Billing-App",
        version: int = 1,
        now: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.store = store
        self.snapshot_store = snapshot_store
        self.app_name = app_name
        self.version = version
        self._now = now

    @classmethod
    def from_settings(cls, settings: Optional[ShopbillSettings] = None) -> "BackupService":
        """Build a service using the configured data directory."""

        settings = settings or get_settings()
        store = JsonFileKeyValueStore(settings.store_path)
        return cls(
            store,
            SnapshotStore(settings.snapshot_database_path, store),
            app_name=settings.app_name,
            version=settings.schema_version,
        )

    def capture(self) -> Snapshot:
        """Build a snapshot of the current store contents."""

        return build_snapshot(self.store, app_name=self.app_name, version=self.version, now=self._now)

    def export_to_document(self, directory: Path) -> OperationOutcome:
        """Write a backup file into ``directory``."""

        try:
            path = write_download(self.capture(), directory)
        except (OSError, ValueError) as error:
            LOGGER.error("Export failed: %s", error)
            return OperationOutcome(False, "Export failed")
        return OperationOutcome(True, "Backup downloaded", path)

    async def import_from_document(self, path: Path, *, overwrite: bool = False) -> OperationOutcome:
        """Import a backup file, preserving existing keys unless ``overwrite``."""

        try:
            content = await asyncio.to_thread(Path(path).read_bytes)
            result = await asyncio.to_thread(
                import_from_document, self.store, content, overwrite=overwrite
            )
        except (OSError, BackupError) as error:
            LOGGER.error("Import of %s failed: %s", path, error)
            return OperationOutcome(False, f"Import failed: {error}")
        suffix = "" if overwrite else " (existing keys preserved)"
        return OperationOutcome(True, f"Import successful{suffix}", result)

    async def save_snapshot(self) -> OperationOutcome:
        """Capture and persist a snapshot in the snapshot store."""

        try:
            snapshot_id = await self.snapshot_store.put(self.capture())
        except BackupError as error:
            LOGGER.error("Could not save snapshot: %s", error)
            return OperationOutcome(False, f"Could not save snapshot: {error}")
        return OperationOutcome(True, "Snapshot saved locally", snapshot_id)

    async def list_snapshots(self) -> List[Snapshot]:
        """Return stored snapshots, or an empty list when storage is unavailable."""

        try:
            return await self.snapshot_store.list_all()
        except StorageUnavailableError as error:
            LOGGER.warning("Snapshot listing unavailable: %s", error)
            return []

    async def delete_snapshot(self, snapshot_id: str) -> OperationOutcome:
        """Delete a stored snapshot."""

        try:
            await self.snapshot_store.delete(snapshot_id)
        except BackupError as error:
            LOGGER.error("Delete of snapshot %s failed: %s", snapshot_id, error)
            return OperationOutcome(False, "Delete failed")
        return OperationOutcome(True, "Deleted", snapshot_id)

    async def restore_snapshot(self, snapshot_id: str, *, overwrite: bool = False) -> OperationOutcome:
        """Restore a stored snapshot into the key/value store."""

        try:
            result = await self.snapshot_store.restore(snapshot_id, overwrite=overwrite)
        except BackupError as error:
            LOGGER.error("Restore of snapshot %s failed: %s", snapshot_id, error)
            return OperationOutcome(False, f"Restore failed: {error.reason}")
        suffix = "" if overwrite else " (existing keys preserved)"
        return OperationOutcome(True, f"Snapshot restored{suffix}", result)
