"""Mini README: Single-file JSON key/value store.

Structure:
    * JsonFileKeyValueStore - persists every key as raw text inside one JSON
      object on disk.

The file plays the role browser local storage played for the original
screens: a flat mapping of key to raw text. The file is re-read on every
access so separate processes (the CLI and a running app) observe each
other's writes, and every write goes through a temporary file followed by an
atomic replace so a crash never leaves a half-written store behind.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Iterable, Optional

from ..logging_utils import get_logger
from .base import KeyValueStore

LOGGER = get_logger(__name__)


class JsonFileKeyValueStore(KeyValueStore):
    """Persist raw text values in a JSON object stored at ``path``."""

    store_name = "json-file"

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        LOGGER.debug("Using JSON key/value store at %s", self.path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as error:
            LOGGER.warning("Key/value store %s is unreadable, treating as empty: %s", self.path, error)
            return {}
        if not isinstance(payload, dict):
            LOGGER.warning("Key/value store %s does not hold an object, treating as empty", self.path)
            return {}
        return {str(key): value for key, value in payload.items() if isinstance(value, str)}

    def _dump(self, items: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        descriptor, temp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(descriptor, "w", encoding="utf-8") as handle:
                json.dump(items, handle, ensure_ascii=False, indent=2)
            os.replace(temp_name, self.path)
        except OSError:
            Path(temp_name).unlink(missing_ok=True)
            raise

    def read_raw(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def write_raw(self, key: str, text: str) -> None:
        if not isinstance(text, str):
            raise TypeError(f"Store values must be text, got {type(text).__name__}")
        items = self._load()
        items[key] = text
        self._dump(items)

    def delete_raw(self, key: str) -> None:
        items = self._load()
        if items.pop(key, None) is not None:
            self._dump(items)

    def keys(self) -> Iterable[str]:
        return list(self._load().keys())
