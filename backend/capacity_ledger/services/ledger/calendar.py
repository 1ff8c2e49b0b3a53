import datetime as dt
from typing import Any, Iterator


def is_weekend(d: dt.date) -> bool:
    return d.weekday() >= 5


def month_start(year: int, month: int) -> dt.date:
    return dt.date(year, month, 1)


def month_end(year: int, month: int) -> dt.date:
    if month == 12:
        return dt.date(year, 12, 31)
    return dt.date(year, month + 1, 1) - dt.timedelta(days=1)


def add_months(d: dt.date, months: int) -> dt.date:
    """Shift to the first day of the month `months` away from `d`."""
    idx = d.year * 12 + (d.month - 1) + months
    return dt.date(idx // 12, idx % 12 + 1, 1)


def enumerate_days(start: dt.date, end: dt.date) -> Iterator[dt.date]:
    d = start
    while d <= end:
        yield d
        d += dt.timedelta(days=1)


def working_days_in_month(year: int, month: int) -> int:
    return sum(1 for d in enumerate_days(month_start(year, month), month_end(year, month)) if not is_weekend(d))


def day_key(d: dt.date) -> str:
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def month_key(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def to_day(v: Any) -> dt.date | None:
    # Read the calendar fields as stored; a UTC timestamp must not shift the day.
    if v is None:
        return None
    if isinstance(v, dt.datetime):
        return dt.date(v.year, v.month, v.day)
    if isinstance(v, dt.date):
        return v
    if isinstance(v, str):
        s = v.strip()
        if not s:
            return None
        try:
            return dt.date.fromisoformat(s[:10])
        except ValueError:
            return None
    return None


def default_horizon(reference: dt.date, months: int = 12) -> tuple[dt.date, dt.date]:
    start = dt.date(reference.year, reference.month, 1)
    last = add_months(start, months)
    return start, month_end(last.year, last.month)
