from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone

ISO_DATE_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}"
    r"(?:[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d{1,9})?)?(?:Z|[+-]\d{2}:?\d{2})?)?$"
)


def now_utc() -> datetime:
    """Current aware UTC time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def is_iso_date_string(value: str) -> bool:
    return bool(ISO_DATE_RE.match(value.strip()))


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 date or datetime string.

    A bare date becomes midnight. Fractions longer than microseconds are cut.
    """
    v = value.strip()
    if not is_iso_date_string(v):
        raise ValueError(f"Not an ISO-8601 date: {value!r}")
    m = re.search(r"\.(\d+)", v)
    if m and len(m.group(1)) > 6:
        v = v[: m.start(1) + 6] + v[m.end(1):]
    if len(v) == 10:
        return datetime.combine(date.fromisoformat(v), datetime.min.time())
    return datetime.fromisoformat(v)


def to_iso(value: datetime | date) -> str:
    """Format a date for local files.

    Aware UTC values use the `...sssZ` form the legacy files carry.
    """
    if isinstance(value, datetime) and value.tzinfo is not None and value.utcoffset() == timedelta(0):
        if value.microsecond % 1000 == 0:
            return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"
        return value.strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return value.isoformat()


def to_utc(value: datetime) -> datetime:
    """Same instant as an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
