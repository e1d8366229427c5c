"""Mini README: Finance utilities for the shop's income and expense book.

This package turns whatever ledger layout is stored under the ``accounts``
key into canonical entries, records new bill income, expenses and manual
entries, and aggregates totals for the accounts dashboard.
"""

from .accounts import AccountsBook
from .ledger import (
    EntryKind,
    EntrySource,
    LedgerEntry,
    LedgerSummary,
    filter_entries,
    normalize_ledger,
    summarise,
)

__all__ = [
    "AccountsBook",
    "EntryKind",
    "EntrySource",
    "LedgerEntry",
    "LedgerSummary",
    "filter_entries",
    "normalize_ledger",
    "summarise",
]
