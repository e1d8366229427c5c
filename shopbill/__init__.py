"""Mini README: Core package initializer for the shopbill backup tooling.

The package persists a small shop's billing state in a key/value store,
normalises its income and expense ledger, and captures, stores and restores
snapshots of that state. Convenience imports stay lightweight so importing
the package never opens a store or a database.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]
