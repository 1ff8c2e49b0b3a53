import math
from collections.abc import Sequence

from capacity_ledger.services.ledger.aggregation import AggregationEngine
from capacity_ledger.services.ledger.records import AssignmentRecord, MonthlySummary, ResourceRecord


def round_half_up(v: float) -> int:
    return int(math.floor(v + 0.5))


def _assignment_out(a: AssignmentRecord) -> dict:
    return {
        "id": a.id,
        "project_id": a.project_id,
        "project_code": a.project_code,
        "project_title": a.project_title,
        "skill_name": a.skill_name,
        "team": a.team,
        "hours": a.hours,
    }


def _month_out(s: MonthlySummary) -> dict:
    return {
        "month": s.month,
        "total_hours": round_half_up(s.total_hours),
        "committed_hours": s.committed_hours,
        "available_hours": round_half_up(s.available_hours),
        "utilization_rate": round_half_up(s.utilization_rate),
        "assignments": [_assignment_out(a) for a in s.assignments],
    }


class OverviewProjector:
    """Assembles the dashboard payload out of monthly summaries."""

    def __init__(self, engine: AggregationEngine):
        self.engine = engine

    def build(
        self,
        resources: Sequence[ResourceRecord],
        assignments: Sequence[AssignmentRecord],
        year: int,
        current_month: int,
    ) -> dict:
        engine = self.engine
        summaries = {r.id: engine.monthly_summaries(r, assignments, year) for r in resources}

        resources_out = []
        for r in resources:
            series = summaries[r.id]
            resources_out.append(
                {
                    "id": r.id,
                    "code": r.code,
                    "name": r.name,
                    "email": r.email,
                    "default_capacity": r.default_capacity,
                    "skills": list(r.skills),
                    "monthly_data": [_month_out(s) for s in series],
                    "avg_utilization": round_half_up(engine.average_utilization(series, current_month)),
                    "has_future_assignment": engine.has_future_commitment(series),
                }
            )

        total = len(resources)
        with_assignment = sum(1 for r in resources_out if r["has_future_assignment"])
        if total:
            current_util = sum(
                s.utilization_rate for series in summaries.values() for s in series if s.month == current_month
            ) / total
            future_util = sum(
                engine.average_utilization(series, current_month + 1) for series in summaries.values()
            ) / total
        else:
            current_util = future_util = 0.0

        skills = [
            {
                "skill": row["skill"],
                "current_month": round_half_up(row["current"]),
                "future_months": round_half_up(row["future"]),
            }
            for row in engine.skill_availability(resources, summaries, current_month)
        ]

        return {
            "year": year,
            "current_month": current_month,
            "kpis": {
                "total_resources": total,
                "resources_with_assignment": with_assignment,
                "resources_without_assignment": total - with_assignment,
                "avg_utilization": {
                    "current": round_half_up(current_util),
                    "future": round_half_up(future_util),
                },
            },
            "charts": {
                "monthly_comparison": engine.monthly_comparison(summaries),
                "skills_availability": skills,
            },
            "resources": resources_out,
        }
