import datetime as dt

from capacity_ledger.services.ledger.calendar import (
    add_months,
    day_key,
    default_horizon,
    enumerate_days,
    month_end,
    to_day,
    working_days_in_month,
)


def test_working_days_known_months():
    assert working_days_in_month(2024, 2) == 21
    assert working_days_in_month(2025, 1) == 23
    assert working_days_in_month(2025, 2) == 20


def test_working_days_bounds_and_enumeration_agree():
    for year in range(2020, 2031):
        for month in range(1, 13):
            n = working_days_in_month(year, month)
            assert 19 <= n <= 23
            days = enumerate_days(dt.date(year, month, 1), month_end(year, month))
            assert n == sum(1 for d in days if d.weekday() < 5)


def test_enumerate_days_inclusive_and_restartable():
    start, end = dt.date(2024, 2, 27), dt.date(2024, 3, 1)
    first = list(enumerate_days(start, end))
    second = list(enumerate_days(start, end))
    assert first == second
    assert [day_key(d) for d in first] == ["2024-02-27", "2024-02-28", "2024-02-29", "2024-03-01"]
    assert list(enumerate_days(end, start)) == []


def test_to_day_reads_calendar_fields_without_shifting():
    ts = dt.datetime(2025, 3, 3, 0, 0, tzinfo=dt.timezone.utc)
    assert to_day(ts) == dt.date(2025, 3, 3)
    assert to_day("2025-03-03T00:00:00.000Z") == dt.date(2025, 3, 3)
    assert to_day("") is None
    assert to_day("not a date") is None


def test_default_horizon_spans_thirteen_months():
    start, end = default_horizon(dt.date(2025, 10, 19), 12)
    assert start == dt.date(2025, 10, 1)
    assert end == dt.date(2026, 10, 31)
    assert add_months(dt.date(2025, 12, 15), 1) == dt.date(2026, 1, 1)
