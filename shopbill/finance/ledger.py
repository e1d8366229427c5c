"""Mini README: Canonical ledger entries and normalisation of stored ledgers.

Structure:
    * EntryKind - enum representing income versus expense entries.
    * EntrySource - enum recording whether an entry came from a bill or by hand.
    * LedgerEntry - dataclass storing a normalised ledger record.
    * normalize_ledger - converts either stored ledger shape into entries.
    * LedgerSummary / summarise / filter_entries - dashboard aggregation helpers.

The ``accounts`` key has held two layouts over time. Early releases stored a
flat list of records carrying a ``type`` field; current releases store an
object with separate ``income`` and ``expense`` lists. ``normalize_ledger``
dispatches on the runtime shape of whatever is stored and always yields a
flat list with ``kind`` populated, leaving the raw value untouched.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from ..logging_utils import get_logger
from ..utils.clock import isoformat_utc, parse_timestamp, utc_now

LOGGER = get_logger(__name__)

PERIODS = ("all", "day", "month", "year")


class EntryKind(str, Enum):
    """Enumerate the supported ledger entry kinds."""

    INCOME = "income"
    EXPENSE = "expense"

    @classmethod
    def from_str(cls, value: str) -> "EntryKind":
        """Coerce arbitrary casing into a valid entry kind."""

        try:
            normalised = value.strip().lower()
            return cls(normalised)
        except (ValueError, AttributeError) as error:
            raise ValueError(f"Unsupported entry kind: {value}") from error


class EntrySource(str, Enum):
    """Enumerate where a ledger entry originated."""

    BILL = "bill"
    MANUAL = "manual"


@dataclass(slots=True, frozen=True)
class LedgerEntry:
    """Represent a normalised income or expense record."""

    id: str
    kind: EntryKind
    source: EntrySource
    amount: float
    note: str
    occurred_at: str
    ref: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        """Export the entry using the field names of the stored layout."""

        payload: Dict[str, Any] = {
            "id": self.id,
            "type": self.kind.value,
            "source": self.source.value,
            "amount": self.amount,
            "note": self.note,
            "date": self.occurred_at,
        }
        if self.ref is not None:
            payload["ref"] = self.ref
        return payload


@dataclass(slots=True, frozen=True)
class LedgerSummary:
    """Totals shown on the accounts dashboard."""

    income: float
    expense: float

    @property
    def balance(self) -> float:
        return self.income - self.expense


def _coerce_amount(value: object) -> float:
    """Return a finite non-negative float, defaulting malformed values to zero."""

    if value is None or isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(amount) or amount < 0:
        return 0.0
    return amount


def _coerce_enum(enum_cls, value: object, default):
    if isinstance(value, str):
        try:
            return enum_cls(value.strip().lower())
        except ValueError:
            LOGGER.debug("Unknown %s '%s'; using %s", enum_cls.__name__, value, default.value)
    return default


def _text(value: object) -> str:
    return value if isinstance(value, str) else ""


def _ref(value: object) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _identifier(record: Mapping[str, Any]) -> str:
    value = record.get("id")
    if value is None or value == "":
        return str(uuid.uuid4())
    return str(value)


def _timestamp(record: Mapping[str, Any]) -> str:
    value = record.get("date") or record.get("occurredAt")
    return value if isinstance(value, str) and value else isoformat_utc()


def _as_mapping(record: object) -> Mapping[str, Any]:
    return record if isinstance(record, Mapping) else {}


def _normalise_legacy(records: Sequence[object]) -> List[LedgerEntry]:
    entries: List[LedgerEntry] = []
    for raw_record in records:
        record = _as_mapping(raw_record)
        source = _coerce_enum(EntrySource, record.get("source"), EntrySource.MANUAL)
        entries.append(
            LedgerEntry(
                id=_identifier(record),
                kind=_coerce_enum(EntryKind, record.get("type"), EntryKind.INCOME),
                source=source,
                amount=_coerce_amount(record.get("amount")),
                note=_text(record.get("note")),
                occurred_at=_timestamp(record),
                ref=_ref(record.get("ref")) if source is EntrySource.BILL else None,
            )
        )
    return entries


def _group(raw: Mapping[str, Any], name: str) -> List[Mapping[str, Any]]:
    group = raw.get(name)
    if not isinstance(group, list):
        return []
    return [_as_mapping(record) for record in group]


def _normalise_current(raw: Mapping[str, Any]) -> List[LedgerEntry]:
    entries: List[LedgerEntry] = []
    for record in _group(raw, "income"):
        source = _coerce_enum(EntrySource, record.get("source"), EntrySource.BILL)
        ref = _ref(record.get("ref"))
        entries.append(
            LedgerEntry(
                id=_identifier(record),
                kind=EntryKind.INCOME,
                source=source,
                amount=_coerce_amount(record.get("amount")),
                note=_text(record.get("note")) or f"Bill {ref or ''}".strip(),
                occurred_at=_timestamp(record),
                ref=ref if source is EntrySource.BILL else None,
            )
        )
    for record in _group(raw, "expense"):
        entries.append(
            LedgerEntry(
                id=_identifier(record),
                kind=EntryKind.EXPENSE,
                source=EntrySource.MANUAL,
                amount=_coerce_amount(record.get("amount")),
                note=_text(record.get("note")) or _text(record.get("category")) or "Expense",
                occurred_at=_timestamp(record),
            )
        )
    return entries


def normalize_ledger(raw: object) -> List[LedgerEntry]:
    """Translate a stored ledger of either layout into canonical entries.

    Lists are treated as the legacy layout and keep their order. Mappings are
    treated as the current layout and yield income entries before expense
    entries. Anything else yields an empty list.
    """

    if isinstance(raw, list):
        return _normalise_legacy(raw)
    if isinstance(raw, Mapping):
        return _normalise_current(raw)
    if raw is not None:
        LOGGER.warning("Ignoring ledger of unsupported type %s", type(raw).__name__)
    return []


def to_current_layout(entries: Iterable[LedgerEntry]) -> Dict[str, List[Dict[str, Any]]]:
    """Group entries into the ``{income, expense}`` layout used for writes."""

    income: List[Dict[str, Any]] = []
    expense: List[Dict[str, Any]] = []
    for entry in entries:
        record: Dict[str, Any] = {
            "id": entry.id,
            "date": entry.occurred_at,
            "amount": entry.amount,
            "note": entry.note,
        }
        if entry.kind is EntryKind.INCOME:
            record["source"] = entry.source.value
            if entry.ref is not None:
                record["ref"] = entry.ref
            income.append(record)
        else:
            expense.append(record)
    return {"income": income, "expense": expense}


def _bill_vehicle(bills: Sequence[object], ref: str) -> Optional[str]:
    for bill in bills:
        bill = _as_mapping(bill)
        if bill.get("number") == ref:
            customer = _as_mapping(bill.get("customerInfo"))
            return _text(customer.get("vehicleNo"))
    return None


def _in_period(entry: LedgerEntry, period: str, now: datetime) -> bool:
    if period == "all":
        return True
    occurred = parse_timestamp(entry.occurred_at)
    if occurred is None:
        return False
    occurred = occurred.astimezone(now.tzinfo) if now.tzinfo else occurred.replace(tzinfo=None)
    if occurred.year != now.year:
        return False
    if period == "year":
        return True
    if occurred.month != now.month:
        return False
    return period == "month" or occurred.day == now.day


def filter_entries(
    entries: Iterable[LedgerEntry],
    period: str = "all",
    *,
    now: Optional[datetime] = None,
    vehicle: Optional[str] = None,
    bills: Optional[Sequence[object]] = None,
) -> List[LedgerEntry]:
    """Filter entries by calendar period and, optionally, by bill vehicle number."""

    if period not in PERIODS:
        raise ValueError(f"Unsupported period '{period}'. Choose one of {', '.join(PERIODS)}.")
    now = now or utc_now()
    query = (vehicle or "").strip().upper()
    bills = bills or []

    selected: List[LedgerEntry] = []
    for entry in entries:
        if query:
            if entry.source is not EntrySource.BILL or not entry.ref:
                continue
            vehicle_no = _bill_vehicle(bills, entry.ref)
            if vehicle_no is None or query not in vehicle_no.upper():
                continue
        if _in_period(entry, period, now):
            selected.append(entry)
    return selected


def summarise(entries: Iterable[LedgerEntry]) -> LedgerSummary:
    """Total income and expense amounts."""

    income = 0.0
    expense = 0.0
    for entry in entries:
        if entry.kind is EntryKind.INCOME:
            income += entry.amount
        else:
            expense += entry.amount
    return LedgerSummary(income=income, expense=expense)
