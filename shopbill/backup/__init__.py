"""Mini README: Backup and restore package initialiser.

The package is divided into ``snapshot`` for capturing the allow-listed keys,
``reconciler`` for importing documents back into the key/value store,
``snapshot_store`` for the asynchronous SQLite snapshot database and
``service`` for the user-facing operations built on top of them.
"""

from .reconciler import ImportResult, import_from_document, import_into, validate_backup
from .service import BackupService, OperationOutcome
from .snapshot import (
    ALLOWLIST_KEYS,
    Snapshot,
    SnapshotMeta,
    build_download_document,
    build_snapshot,
    write_download,
)
from .snapshot_store import SnapshotStore

__all__ = [
    "ALLOWLIST_KEYS",
    "BackupService",
    "ImportResult",
    "OperationOutcome",
    "Snapshot",
    "SnapshotMeta",
    "SnapshotStore",
    "build_download_document",
    "build_snapshot",
    "import_from_document",
    "import_into",
    "validate_backup",
    "write_download",
]
