"""Mini README: Key/value storage package initialiser.

Re-exports the abstract ``KeyValueStore`` along with the in-memory store used
by tests, the JSON-file store used by the command line tooling, and the
strict JSON helpers every store value passes through.
"""

from .base import KeyValueStore, decode_json, encode_json
from .json_file import JsonFileKeyValueStore
from .memory import InMemoryKeyValueStore

__all__ = [
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "decode_json",
    "encode_json",
]
