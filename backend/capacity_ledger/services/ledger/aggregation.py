from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence

from capacity_ledger.services.ledger.ledger import CapacityLedger
from capacity_ledger.services.ledger.records import (
    AssignmentRecord,
    MonthEntry,
    MonthlySummary,
    ResourceRecord,
    absence_project_code,
)


def utilization(committed: float, total: float) -> float:
    return (committed / total) * 100.0 if total > 0 else 0.0


class AggregationEngine:
    def __init__(self, ledger: CapacityLedger, skill_order: Sequence[str] = (), absence_prefix: str = "ABSENCES"):
        self.ledger = ledger
        self.skill_order = tuple(skill_order)
        self.absence_prefix = absence_prefix

    def summarize(self, entry: MonthEntry, assignments: Iterable[AssignmentRecord] = ()) -> MonthlySummary:
        total = max(0.0, entry.base_hours - entry.absence_hours)
        return MonthlySummary(
            resource_id=entry.resource_id,
            month=entry.month,
            year=entry.year,
            base_hours=entry.base_hours,
            absence_hours=entry.absence_hours,
            total_hours=total,
            committed_hours=entry.committed_hours,
            available_hours=max(0.0, total - entry.committed_hours),
            utilization_rate=utilization(entry.committed_hours, total),
            assignments=tuple(assignments),
        )

    def monthly_summaries(
        self, resource: ResourceRecord, assignments: Iterable[AssignmentRecord], year: int
    ) -> list[MonthlySummary]:
        own = [a for a in assignments if a.resource_id == resource.id]
        by_month: dict[int, list[AssignmentRecord]] = defaultdict(list)
        for a in own:
            if a.period and a.period[0] == year:
                by_month[a.period[1]].append(a)
        entries = self.ledger.month_entries(resource, own, year)
        return [self.summarize(e, by_month.get(e.month, ())) for e in entries]

    @staticmethod
    def average_utilization(summaries: Iterable[MonthlySummary], from_month: int) -> float:
        rates = [s.utilization_rate for s in summaries if s.month >= from_month]
        return sum(rates) / len(rates) if rates else 0.0

    @staticmethod
    def has_future_commitment(summaries: Iterable[MonthlySummary]) -> bool:
        # Looks at every month of the series, past ones included.
        return any(s.committed_hours > 0 for s in summaries)

    def skill_availability(
        self,
        resources: Iterable[ResourceRecord],
        summaries: Mapping[str, Sequence[MonthlySummary]],
        current_month: int,
        skill_order: Sequence[str] | None = None,
    ) -> list[dict]:
        """Split each resource's available hours evenly over its skills, then sum per skill.

        Only skills in the ordered allow-list are reported, in that order.
        """
        order = tuple(skill_order) if skill_order is not None else self.skill_order
        totals: dict[str, dict[str, float]] = {}
        for r in resources:
            if not r.skills:
                continue
            months = summaries.get(r.id, ())
            current = sum(s.available_hours for s in months if s.month == current_month)
            future = sum(s.available_hours for s in months if s.month > current_month)
            share = len(r.skills)
            for skill in r.skills:
                bucket = totals.setdefault(skill, {"current": 0.0, "future": 0.0})
                bucket["current"] += current / share
                bucket["future"] += future / share
        return [{"skill": s, **totals[s]} for s in order if s in totals]

    @staticmethod
    def monthly_comparison(summaries: Mapping[str, Sequence[MonthlySummary]]) -> list[dict]:
        out = []
        for month in range(1, 13):
            rows = [s for series in summaries.values() for s in series if s.month == month]
            out.append(
                {
                    "month": month,
                    "committed_hours": sum(s.committed_hours for s in rows),
                    "available_hours": sum(s.available_hours for s in rows),
                }
            )
        return out

    def team_potential_hours(
        self,
        resources: Sequence[ResourceRecord],
        assignments: Iterable[AssignmentRecord],
        year: int,
        team: str,
    ) -> list[dict]:
        """Team-wide base, absence, potential (base - absence) and committed hours per month."""
        base = [0.0] * 12
        for r in resources:
            for e in self.ledger.month_entries(r, (), year):
                base[e.month - 1] += e.base_hours

        team_code = absence_project_code(team, self.absence_prefix)
        member_ids = {r.id for r in resources}
        absence = [0.0] * 12
        committed = [0.0] * 12
        for a in assignments:
            if not a.period or a.period[0] != year:
                continue
            idx = a.period[1] - 1
            if a.project_code == team_code:
                absence[idx] += a.hours
            elif not a.is_absence and a.resource_id in member_ids:
                committed[idx] += a.hours

        return [
            {
                "month": m + 1,
                "base_hours": base[m],
                "absence_hours": absence[m],
                "potential_hours": max(0.0, base[m] - absence[m]),
                "committed_hours": committed[m],
            }
            for m in range(12)
        ]
