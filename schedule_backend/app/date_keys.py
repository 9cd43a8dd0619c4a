"""Date keys used by the revenue and note ledgers.

Ledger documents are keyed by ``YYYY-MM-DD`` and monthly aggregation groups by
the ``YYYY-MM`` prefix, so every reader and writer goes through these helpers.
"""

from __future__ import annotations

import re
from datetime import date

DATE_KEY_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def format_date_key(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def date_key(year: int, month: int, day: int) -> str:
    """Return the key for a calendar day, rejecting impossible dates."""

    return format_date_key(date(year, month, day))


def parse_date_key(raw: str) -> date:
    match = DATE_KEY_PATTERN.match(raw or "")
    if match is None:
        raise ValueError(f"Invalid date key {raw!r}, expected YYYY-MM-DD")
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise ValueError(f"Invalid date key {raw!r}: {exc}") from exc


def month_key(year: int, month: int) -> str:
    if month < 1 or month > 12:
        raise ValueError("month must be between 1 and 12")
    return f"{year:04d}-{month:02d}"


def is_in_month(key: str, year: int, month: int) -> bool:
    return key.startswith(f"{month_key(year, month)}-")
