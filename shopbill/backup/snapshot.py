"""Mini README: Point-in-time snapshots of the persisted shop state.

Structure:
    * ALLOWLIST_KEYS - the store keys the billing application persists.
    * SnapshotMeta / Snapshot - immutable snapshot document model.
    * build_snapshot - captures the allow-listed keys from a key/value store.
    * build_download_document / write_download - serialise a snapshot to the
      pretty-printed JSON backup file.

Capture never fails as a whole. Each key is read independently: text that
does not parse as JSON is kept verbatim and an absent key is recorded as
``None`` so restoring can tell "missing" apart from "empty".
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional

from ..errors import InvalidFormatError
from ..logging_utils import get_logger
from ..storage import KeyValueStore, decode_json, encode_json
from ..utils.clock import isoformat_utc, utc_now

LOGGER = get_logger(__name__)

ALLOWLIST_KEYS = (
    "cart",
    "products",
    "accounts",
    "bills",
    "shopName",
    "shopAddress",
    "shopPhone",
    "shopGST",
    "upiId",
    "pin",
    "logoImage",
)

DEFAULT_APP_NAME = "Billing-App"
DEFAULT_VERSION = 1


@dataclass(slots=True, frozen=True)
class SnapshotMeta:
    """Metadata stamped into every snapshot."""

    created_at: str
    app: str = DEFAULT_APP_NAME
    version: int = DEFAULT_VERSION

    def as_dict(self) -> Dict[str, Any]:
        return {"createdAt": self.created_at, "app": self.app, "version": self.version}


@dataclass(slots=True, frozen=True)
class Snapshot:
    """A portable export of the allow-listed store keys."""

    id: str
    meta: SnapshotMeta
    data: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", MappingProxyType(copy.deepcopy(dict(self.data))))

    def to_document(self) -> Dict[str, Any]:
        """Return the JSON-ready document layout."""

        return {"id": self.id, "meta": self.meta.as_dict(), "data": copy.deepcopy(dict(self.data))}

    @classmethod
    def from_document(cls, document: object) -> "Snapshot":
        """Rebuild a snapshot from its document layout."""

        if not isinstance(document, Mapping):
            raise InvalidFormatError("Snapshot document must be an object", reason="invalid-json")
        data = document.get("data")
        if not isinstance(data, Mapping):
            raise InvalidFormatError("Snapshot document lacks a data mapping")
        meta = document.get("meta")
        meta = meta if isinstance(meta, Mapping) else {}
        snapshot_id = document.get("id")
        if not isinstance(snapshot_id, str) or not snapshot_id:
            raise InvalidFormatError("Snapshot document lacks an id", reason="missing-id")
        try:
            version = int(meta.get("version", DEFAULT_VERSION))
        except (TypeError, ValueError) as error:
            raise InvalidFormatError(
                f"Snapshot {snapshot_id} has an invalid version", reason="invalid-version"
            ) from error
        return cls(
            id=snapshot_id,
            meta=SnapshotMeta(
                created_at=str(meta.get("createdAt", "")),
                app=str(meta.get("app", DEFAULT_APP_NAME)),
                version=version,
            ),
            data=data,
        )


def _capture(store: KeyValueStore, key: str) -> Any:
    try:
        raw = store.read_raw(key)
    except OSError as error:
        LOGGER.warning("Could not read key '%s' while capturing snapshot: %s", key, error)
        return None
    if raw is None:
        return None
    try:
        return decode_json(raw)
    except ValueError:
        LOGGER.debug("Key '%s' holds non-JSON text; capturing it verbatim", key)
        return raw


def build_snapshot(
    store: KeyValueStore,
    *,
    app_name: str = DEFAULT_APP_NAME,
    version: int = DEFAULT_VERSION,
    now: Optional[Callable[[], datetime]] = None,
) -> Snapshot:
    """Capture every allow-listed key from ``store`` into a new snapshot."""

    created_at = isoformat_utc((now or utc_now)())
    data = {key: _capture(store, key) for key in ALLOWLIST_KEYS}
    snapshot = Snapshot(
        id=f"snap-{created_at}",
        meta=SnapshotMeta(created_at=created_at, app=app_name, version=version),
        data=data,
    )
    LOGGER.info(
        "Captured snapshot %s (%s of %s keys present)",
        snapshot.id,
        sum(value is not None for value in data.values()),
        len(ALLOWLIST_KEYS),
    )
    return snapshot


def build_download_document(snapshot: Snapshot) -> bytes:
    """Serialise ``snapshot`` to pretty-printed UTF-8 JSON."""

    return encode_json(snapshot.to_document(), indent=2, ensure_ascii=False).encode("utf-8")


def download_filename(snapshot: Snapshot) -> str:
    """Return the backup file name, with the timestamp made filesystem safe."""

    stamp = snapshot.meta.created_at.replace(":", "-")
    return f"billing-backup-{stamp}.json"


def write_download(snapshot: Snapshot, directory: Path) -> Path:
    """Write the backup document into ``directory`` and return its path."""

    directory = Path(directory).expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    destination = directory / download_filename(snapshot)
    destination.write_bytes(build_download_document(snapshot))
    LOGGER.info("Wrote backup document %s", destination)
    return destination
