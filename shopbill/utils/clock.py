"""Mini README: Timestamp helpers shared by the ledger and backup modules.

Browser-era data stores timestamps as ISO-8601 strings in UTC with
millisecond precision and a trailing ``Z`` (``2024-05-01T10:00:00.000Z``).
These helpers produce and parse that exact layout so new records sort
lexicographically alongside the old ones.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""

    return datetime.now(timezone.utc)


def isoformat_utc(moment: Optional[datetime] = None) -> str:
    """Format ``moment`` (default: now) as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""

    moment = moment or utc_now()
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: object) -> Optional[datetime]:
    """Parse an ISO timestamp string, returning ``None`` when it is unusable."""

    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
