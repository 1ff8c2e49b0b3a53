import datetime as dt
from collections import defaultdict
from collections.abc import Iterable

from capacity_ledger.services.ledger.calendar import enumerate_days, is_weekend, month_end, month_start
from capacity_ledger.services.ledger.records import AssignmentRecord, LedgerEntry, MonthEntry, ResourceRecord


class CapacityLedger:
    """Derives per-day and per-month hours for resources.

    Nothing is cached: each call recomputes from the records it is given, so the
    same records always yield the same entries.
    """

    def __init__(self, working_days_divisor: int = 20):
        self.divisor = working_days_divisor

    def base_hours(self, resource: ResourceRecord, day: dt.date) -> float:
        if is_weekend(day):
            return 0.0
        return resource.daily_base_hours(self.divisor)

    def hours_by_day(
        self, resource_id: str, assignments: Iterable[AssignmentRecord]
    ) -> tuple[dict[dt.date, float], dict[dt.date, float]]:
        absence: dict[dt.date, float] = defaultdict(float)
        committed: dict[dt.date, float] = defaultdict(float)
        for a in assignments:
            # pending rows (no resource) never reach a resource's ledger
            if a.resource_id is None or a.resource_id != resource_id:
                continue
            d = a.ledger_day
            if d is None:
                continue
            if a.is_absence:
                absence[d] += a.hours
            else:
                committed[d] += a.hours
        return absence, committed

    def entry(
        self, resource: ResourceRecord, day: dt.date, absence_hours: float, committed_hours: float
    ) -> LedgerEntry:
        base = self.base_hours(resource, day)
        return LedgerEntry(
            resource_id=resource.id,
            date=day,
            base_hours=base,
            absence_hours=absence_hours,
            committed_hours=committed_hours,
            available_hours=max(0.0, base - absence_hours - committed_hours),
        )

    def day_entries(
        self,
        resource: ResourceRecord,
        assignments: Iterable[AssignmentRecord],
        start: dt.date,
        end: dt.date,
    ) -> list[LedgerEntry]:
        absence, committed = self.hours_by_day(resource.id, assignments)
        return [self.entry(resource, d, absence.get(d, 0.0), committed.get(d, 0.0)) for d in enumerate_days(start, end)]

    def ledger_range(
        self,
        resources: Iterable[ResourceRecord],
        assignments: Iterable[AssignmentRecord],
        start: dt.date,
        end: dt.date,
    ) -> dict[str, list[LedgerEntry]]:
        by_resource: dict[str, list[AssignmentRecord]] = defaultdict(list)
        for a in assignments:
            if a.resource_id is not None:
                by_resource[a.resource_id].append(a)
        return {r.id: self.day_entries(r, by_resource.get(r.id, []), start, end) for r in resources}

    def month_entry(self, resource: ResourceRecord, entries: list[LedgerEntry], year: int, month: int) -> MonthEntry:
        return MonthEntry(
            resource_id=resource.id,
            year=year,
            month=month,
            base_hours=sum(e.base_hours for e in entries),
            absence_hours=sum(e.absence_hours for e in entries),
            committed_hours=sum(e.committed_hours for e in entries),
            available_hours=sum(e.available_hours for e in entries),
            working_days=sum(1 for e in entries if not is_weekend(e.date)),
        )

    def month_entries(
        self, resource: ResourceRecord, assignments: Iterable[AssignmentRecord], year: int
    ) -> list[MonthEntry]:
        days = self.day_entries(resource, assignments, month_start(year, 1), month_end(year, 12))
        grouped: dict[int, list[LedgerEntry]] = defaultdict(list)
        for e in days:
            grouped[e.date.month].append(e)
        return [self.month_entry(resource, grouped[m], year, m) for m in range(1, 13)]
