"""Mini README: Utility helpers for shopbill.

Currently exports the timestamp helpers that keep new records in the same
ISO-8601 layout as data written by earlier releases.
"""

from .clock import isoformat_utc, parse_timestamp, utc_now

__all__ = ["isoformat_utc", "parse_timestamp", "utc_now"]
