"""Mini README: Exception types raised by the backup and restore helpers.

Structure:
    * BackupError - base class carrying a short ``reason`` code.
    * InvalidJSONError - a backup document does not parse.
    * InvalidFormatError - a parsed document lacks a ``data`` mapping.
    * SnapshotNotFoundError - a snapshot id is absent from the snapshot store.
    * StorageUnavailableError - the snapshot database cannot be used.

The reason codes double as the short messages shown to operators, so callers
can surface ``str(error)`` or ``error.reason`` without further translation.
"""

from __future__ import annotations


class BackupError(Exception):
    """Base class for backup failures that carry a short reason code."""

    reason: str = "backup-error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.reason)


class InvalidJSONError(BackupError, ValueError):
    """Raised when a backup document cannot be decoded as JSON."""

    reason = "invalid-json"


class InvalidFormatError(BackupError, ValueError):
    """Raised when a backup document is not an object with a ``data`` mapping."""

    reason = "missing-data"

    def __init__(self, message: str | None = None, *, reason: str | None = None) -> None:
        if reason is not None:
            self.reason = reason
        super().__init__(message)


class SnapshotNotFoundError(BackupError, LookupError):
    """Raised when a snapshot id is not present in the snapshot store."""

    reason = "not-found"

    def __init__(self, snapshot_id: str) -> None:
        self.snapshot_id = snapshot_id
        super().__init__(f"Snapshot {snapshot_id} not found")


class StorageUnavailableError(BackupError, RuntimeError):
    """Raised when the asynchronous snapshot store cannot be opened or used."""

    reason = "storage-unavailable"
