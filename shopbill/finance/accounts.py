"""Mini README: Income and expense book persisted under the ``accounts`` key.

Structure:
    * AccountsBook - reads the normalised ledger and records new entries.

Reads always go through ``normalize_ledger`` so either stored layout works.
Writes always store the current ``{income, expense}`` layout; a legacy list
is migrated the first time anything is recorded.
"""

from __future__ import annotations

import math
import uuid
from datetime import datetime
from typing import List, Optional

from ..logging_utils import get_logger
from ..storage import KeyValueStore
from ..utils.clock import isoformat_utc
from .ledger import (
    EntryKind,
    EntrySource,
    LedgerEntry,
    LedgerSummary,
    filter_entries,
    normalize_ledger,
    summarise,
    to_current_layout,
)

LOGGER = get_logger(__name__)

ACCOUNTS_KEY = "accounts"
BILLS_KEY = "bills"


class AccountsBook:
    """Record and query ledger entries stored in a key/value store."""

    def __init__(self, store: KeyValueStore, *, key: str = ACCOUNTS_KEY) -> None:
        self._store = store
        self._key = key

    def entries(self) -> List[LedgerEntry]:
        """Return every entry in canonical form."""

        return normalize_ledger(self._store.get(self._key, None))

    def _append(self, entry: LedgerEntry) -> LedgerEntry:
        entries = self.entries()
        entries.append(entry)
        self._store.set(self._key, to_current_layout(entries))
        LOGGER.info(
            "Recorded %s entry %s amount=%.2f source=%s",
            entry.kind.value,
            entry.id,
            entry.amount,
            entry.source.value,
        )
        return entry

    @staticmethod
    def _positive(amount: object) -> float:
        try:
            value = float(amount)  # type: ignore[arg-type]
        except (TypeError, ValueError) as error:
            raise ValueError(f"Amount must be numeric, got {amount!r}") from error
        if not math.isfinite(value) or value <= 0:
            raise ValueError("Amount must be a finite number greater than zero.")
        return value

    def add_income_from_bill(
        self, bill_no: str, amount: object, note: Optional[str] = None
    ) -> LedgerEntry:
        """Record the income produced by a finalised bill."""

        bill_ref = str(bill_no)
        return self._append(
            LedgerEntry(
                id=str(uuid.uuid4()),
                kind=EntryKind.INCOME,
                source=EntrySource.BILL,
                amount=self._positive(amount),
                note=note or f"Bill {bill_ref}",
                occurred_at=isoformat_utc(),
                ref=bill_ref,
            )
        )

    def add_expense(
        self, amount: object, category: str, note: Optional[str] = None
    ) -> LedgerEntry:
        """Record an expense; the category doubles as the note when none is given."""

        return self._append(
            LedgerEntry(
                id=str(uuid.uuid4()),
                kind=EntryKind.EXPENSE,
                source=EntrySource.MANUAL,
                amount=self._positive(amount),
                note=note or category or "Expense",
                occurred_at=isoformat_utc(),
            )
        )

    def add_manual_entry(
        self, kind: str | EntryKind, amount: object, note: Optional[str] = None
    ) -> LedgerEntry:
        """Record a hand-entered income or expense."""

        entry_kind = kind if isinstance(kind, EntryKind) else EntryKind.from_str(kind)
        default_note = "Manual income" if entry_kind is EntryKind.INCOME else "Manual expense"
        return self._append(
            LedgerEntry(
                id=str(uuid.uuid4()),
                kind=entry_kind,
                source=EntrySource.MANUAL,
                amount=self._positive(amount),
                note=note or default_note,
                occurred_at=isoformat_utc(),
            )
        )

    def summary(
        self,
        period: str = "all",
        *,
        vehicle: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> tuple[List[LedgerEntry], LedgerSummary]:
        """Return the filtered entries together with their totals."""

        bills = self._store.get(BILLS_KEY, []) if vehicle else []
        if not isinstance(bills, list):
            bills = []
        selected = filter_entries(self.entries(), period, now=now, vehicle=vehicle, bills=bills)
        return selected, summarise(selected)
