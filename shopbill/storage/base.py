"""Mini README: Abstract key/value store used for all persisted shop state.

Structure:
    * KeyValueStore - abstract interface over raw text values with JSON helpers.

Concrete stores only implement the raw primitives (``read_raw``,
``write_raw``, ``delete_raw``, ``keys``). The JSON helpers mirror the
behaviour the billing screens rely on: ``get`` falls back on a missing key,
on unparsable text and on a stored literal ``null``; ``set`` and ``remove``
log and swallow failures so a full or read-only store never crashes a caller.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def decode_json(text: str) -> Any:
    """Parse strict JSON, rejecting the ``NaN`` and ``Infinity`` extensions."""

    return json.loads(text, parse_constant=_reject_constant)


def encode_json(value: Any, **kwargs: Any) -> str:
    """Serialise ``value`` as strict JSON; non-finite floats raise ``ValueError``."""

    return json.dumps(value, allow_nan=False, **kwargs)


class KeyValueStore(ABC):
    """Base interface for synchronous string-keyed stores holding JSON text."""

    store_name: str = "generic"

    @abstractmethod
    def read_raw(self, key: str) -> Optional[str]:
        """Return the raw text stored under ``key`` or ``None`` when absent."""

    @abstractmethod
    def write_raw(self, key: str, text: str) -> None:
        """Store ``text`` verbatim under ``key``."""

    @abstractmethod
    def delete_raw(self, key: str) -> None:
        """Delete ``key``; deleting an absent key is a no-op."""

    @abstractmethod
    def keys(self) -> Iterable[str]:
        """Return the keys currently present."""

    def get(self, key: str, fallback: Any = None) -> Any:
        """Decode the JSON value under ``key`` or return ``fallback``."""

        try:
            raw = self.read_raw(key)
            if not raw:
                return fallback
            parsed = decode_json(raw)
        except (OSError, ValueError) as error:
            LOGGER.error("Store %s load error for key '%s': %s", self.store_name, key, error)
            return fallback
        if parsed is None:
            return fallback
        return parsed

    def set(self, key: str, value: Any) -> None:
        """JSON-encode ``value`` and store it under ``key``."""

        try:
            self.write_raw(key, encode_json(value))
        except (OSError, TypeError, ValueError) as error:
            LOGGER.error("Store %s save error for key '%s': %s", self.store_name, key, error)

    def remove(self, key: str) -> None:
        """Delete ``key``, logging rather than raising on failure."""

        try:
            self.delete_raw(key)
        except OSError as error:
            LOGGER.error("Store %s remove error for key '%s': %s", self.store_name, key, error)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.read_raw(key) is not None
