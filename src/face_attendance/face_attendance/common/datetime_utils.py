from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterator, Optional

import pytz

from ..core.constants import DEFAULT_WORKDAY_TZ


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse HH:MM (or HH:MM:SS) string into time."""
    value = value.strip()
    fmt = "%H:%M:%S" if value.count(":") == 2 else "%H:%M"
    return datetime.strptime(value, fmt).time()


def now_local(tz_name: Optional[str] = None) -> datetime:
    """Current wall-clock time in the workday timezone, as a naive datetime.

    Note: Wrapped so tests can patch/mocked easier. Attendance instants are
    stored naive in workday local time.
    """
    tz = pytz.timezone(tz_name or DEFAULT_WORKDAY_TZ)
    return datetime.now(tz).replace(tzinfo=None)


def iter_dates(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    first = date(year, month, 1)
    if month == 12:
        nxt = date(year + 1, 1, 1)
    else:
        nxt = date(year, month + 1, 1)
    return first, nxt - timedelta(days=1)
