"""Calendar helpers: date identifiers, recent-day ranges, time-of-day parsing."""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta

from pulse.workspace import now_local

_DATE_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_REMINDER_RE = re.compile(r"^\s*(\d{1,2}):(\d{1,2})\s*$")


def date_key(moment: date | datetime | None = None) -> str:
    """Return the YYYY-MM-DD identifier of the moment's local calendar day."""
    if moment is None:
        moment = now_local()
    return date(moment.year, moment.month, moment.day).isoformat()


def parse_date_key(value: object) -> date | None:
    """Parse a YYYY-MM-DD identifier, returning None for anything else."""
    if not isinstance(value, str) or not _DATE_KEY_RE.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def as_date(value: date | datetime | str | None) -> date | None:
    """Coerce a date, datetime or date identifier to a date (None = today)."""
    if value is None:
        value = now_local()
    if isinstance(value, str):
        return parse_date_key(value)
    return date(value.year, value.month, value.day)


def recent_days(n: int, today: date | datetime | str | None = None) -> list[str]:
    """Last ``n`` calendar days ending at ``today``, oldest first."""
    end = as_date(today)
    if end is None or n <= 0:
        return []
    return [(end - timedelta(days=offset)).isoformat() for offset in range(n - 1, -1, -1)]


def parse_reminder_time(value: object) -> tuple[int, int] | None:
    """Parse an HH:MM reminder time into (hour, minute).

    Returns None unless the hour is 0-23 and the minute 0-59.
    """
    if not isinstance(value, str):
        return None
    m = _REMINDER_RE.match(value)
    if not m:
        return None
    hour, minute = int(m.group(1)), int(m.group(2))
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return hour, minute


def canonical_reminder_time(value: object) -> str | None:
    """Zero-padded HH:MM form of a reminder time, or None if it does not parse."""
    parsed = parse_reminder_time(value)
    if parsed is None:
        return None
    return f"{parsed[0]:02d}:{parsed[1]:02d}"
