"""Mini README: Merge backup documents back into the key/value store.

Structure:
    * ImportResult - keys written and skipped by an import.
    * validate_backup - shape check returning a reason code or ``None``.
    * import_into - applies a snapshot-like document under an overwrite policy.
    * import_from_document - parses raw file content then delegates.

The whole document is validated before anything is written, so an invalid
file never leaves partial state behind. Once validation passes the import is
best-effort per key: a value that cannot be JSON-encoded is written as text
instead, and a key that still fails is logged and skipped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional

from ..errors import InvalidFormatError, InvalidJSONError
from ..logging_utils import get_logger
from ..storage import KeyValueStore, decode_json, encode_json

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class ImportResult:
    """Outcome of an import, listing keys in the order they were processed."""

    written: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


def validate_backup(document: object) -> Optional[str]:
    """Return a reason code when ``document`` cannot be imported, else ``None``."""

    if not isinstance(document, Mapping):
        return "invalid-json"
    if not isinstance(document.get("data"), Mapping):
        return "missing-data"
    return None


def _write(store: KeyValueStore, key: str, value: Any) -> bool:
    try:
        store.write_raw(key, encode_json(value))
        return True
    except (OSError, TypeError, ValueError) as error:
        LOGGER.warning("Could not write key '%s' as JSON (%s); retrying as text", key, error)
    try:
        store.write_raw(key, str(value))
        return True
    except (OSError, TypeError, ValueError) as error:
        LOGGER.error("Giving up on key '%s' during import: %s", key, error)
        return False


def import_into(
    store: KeyValueStore,
    document: object,
    *,
    overwrite: bool = False,
    keys: Optional[Iterable[str]] = None,
) -> ImportResult:
    """Write the ``data`` entries of ``document`` into ``store``.

    Existing non-empty values win unless ``overwrite`` is set. When ``keys``
    is given only those keys are considered.
    """

    reason = validate_backup(document)
    if reason is not None:
        raise InvalidFormatError(reason=reason)

    selected = set(keys) if keys is not None else None
    result = ImportResult()
    for key, value in document["data"].items():  # type: ignore[index]
        key = str(key)
        if selected is not None and key not in selected:
            continue
        if not overwrite and store.read_raw(key):
            result.skipped.append(key)
            continue
        if _write(store, key, value):
            result.written.append(key)
        else:
            result.failed.append(key)

    LOGGER.info(
        "Import finished overwrite=%s written=%s skipped=%s failed=%s",
        overwrite,
        len(result.written),
        len(result.skipped),
        len(result.failed),
    )
    return result


def import_from_document(
    store: KeyValueStore,
    content: bytes | str,
    *,
    overwrite: bool = False,
    keys: Optional[Iterable[str]] = None,
) -> ImportResult:
    """Parse backup file ``content`` and import it into ``store``."""

    try:
        text = content.decode("utf-8-sig") if isinstance(content, bytes) else content
        parsed = decode_json(text)
    except (UnicodeDecodeError, ValueError) as error:
        raise InvalidJSONError() from error
    return import_into(store, parsed, overwrite=overwrite, keys=keys)
