from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterator, Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date.

    Accepts a full ISO timestamp too (only the date part is used), since
    clients send pay dates either way.
    """
    return datetime.strptime(value.strip()[:10], "%Y-%m-%d").date()


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive UTC, the one basis every stored and live timestamp is compared on.

    Naive input is taken as already UTC (Ghana civil time has no offset).
    """
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def now_utc() -> datetime:
    """Current time as naive UTC.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Best-effort timestamp parsing for stored punches.

    Returns None for anything unusable instead of raising. Aware values are
    converted to naive UTC so sessions from mixed sources can be subtracted.
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    return to_naive_utc(parsed)


def month_bounds(day: date) -> tuple[date, date]:
    """First and last calendar day of the month containing `day`."""
    last = calendar.monthrange(day.year, day.month)[1]
    return date(day.year, day.month, 1), date(day.year, day.month, last)


def iter_days(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
