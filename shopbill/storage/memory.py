"""Mini README: Dictionary-backed key/value store for tests and scratch sessions."""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional

from .base import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Hold raw text values in a plain dictionary."""

    store_name = "memory"

    def __init__(self, initial: Optional[Mapping[str, str]] = None) -> None:
        self._items: Dict[str, str] = dict(initial or {})

    def read_raw(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def write_raw(self, key: str, text: str) -> None:
        if not isinstance(text, str):
            raise TypeError(f"Store values must be text, got {type(text).__name__}")
        self._items[key] = text

    def delete_raw(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> Iterable[str]:
        return list(self._items.keys())
