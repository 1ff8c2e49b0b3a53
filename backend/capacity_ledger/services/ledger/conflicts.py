import datetime as dt
import math
from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, asdict

from capacity_ledger.core.errors import NotFoundError, ValidationError
from capacity_ledger.services.ledger.calendar import day_key
from capacity_ledger.services.ledger.records import AssignmentRecord, LedgerEntry, ResourceRecord

CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"


def fmt_hours(v: float) -> str:
    return str(int(v)) if float(v).is_integer() else f"{v:g}"


def capacity_detail(available: float, requested: float, assigned: float) -> str:
    return (
        f"Available: {fmt_hours(available)} hours, "
        f"Requested: {fmt_hours(requested)} hours, "
        f"Assigned: {fmt_hours(assigned)} hours"
    )


@dataclass(frozen=True)
class ProposedAllocation:
    resource_id: str
    date: dt.date
    hours: float


@dataclass(frozen=True)
class Conflict:
    resource_id: str
    date: dt.date
    available: float
    requested: float
    assigned: float
    detail: str
    kind: str = CAPACITY_EXCEEDED

    def to_dict(self) -> dict:
        d = asdict(self)
        d["date"] = day_key(self.date)
        return d


@dataclass(frozen=True)
class AbsenceEdit:
    accepted: bool
    absence_hours: float
    available_hours: float
    message: str | None = None


def group_allocations(proposals: Iterable[ProposedAllocation]) -> dict[tuple[str, dt.date], float]:
    grouped: dict[tuple[str, dt.date], float] = defaultdict(float)
    for p in proposals:
        if p.hours <= 0:
            raise ValidationError(f"hours must be greater than 0 ({p.resource_id} on {day_key(p.date)})")
        grouped[(p.resource_id, p.date)] += p.hours
    return dict(grouped)


class ConflictValidator:
    """Checks proposed hours against what is left of each resource's day.

    Pure: reads the records it is handed and never writes. Runs to completion and
    returns every conflict found so the caller can abort or drop entries.
    """

    def __init__(self, working_days_divisor: int = 20, count_absences: bool = False):
        self.divisor = working_days_divisor
        self.count_absences = count_absences

    def daily_capacity(self, resource: ResourceRecord) -> int:
        return math.floor(resource.default_capacity / self.divisor)

    def already_assigned(
        self,
        resource_id: str,
        day: dt.date,
        existing: Iterable[AssignmentRecord],
        exclude_project_id: str | None = None,
    ) -> tuple[float, float]:
        committed = 0.0
        absence = 0.0
        for a in existing:
            if a.resource_id != resource_id or a.day != day:
                continue
            if a.is_absence:
                absence += a.hours
            elif exclude_project_id is None or a.project_id != exclude_project_id:
                committed += a.hours
        return committed, absence

    def check(
        self,
        resource: ResourceRecord,
        day: dt.date,
        requested: float,
        existing: Iterable[AssignmentRecord],
        exclude_project_id: str | None = None,
    ) -> Conflict | None:
        assigned, absence = self.already_assigned(resource.id, day, existing, exclude_project_id)
        capacity = self.daily_capacity(resource)
        if self.count_absences:
            capacity -= absence
        available = capacity - assigned
        if requested > available:
            return Conflict(
                resource_id=resource.id,
                date=day,
                available=available,
                requested=requested,
                assigned=assigned,
                detail=capacity_detail(available, requested, assigned),
            )
        return None

    def validate(
        self,
        proposals: Iterable[ProposedAllocation],
        resources: Mapping[str, ResourceRecord],
        existing: Iterable[AssignmentRecord],
        exclude_project_id: str | None = None,
    ) -> list[Conflict]:
        existing = list(existing)
        conflicts = []
        for (resource_id, day), requested in sorted(group_allocations(proposals).items()):
            resource = resources.get(resource_id)
            if resource is None:
                raise NotFoundError("Resource", resource_id)
            conflict = self.check(resource, day, requested, existing, exclude_project_id)
            if conflict is not None:
                conflicts.append(conflict)
        return conflicts


def check_absence_edit(entry: LedgerEntry, absence_hours: float) -> AbsenceEdit:
    """Accept an absence value for a day only if absence + committed stays within base.

    `entry.absence_hours` holds absences that are not being edited (other absence
    projects) and count as fixed. A rejected edit reports the value the cell reverts to.
    """
    if absence_hours < 0:
        raise ValidationError("Hours cannot be negative")
    fixed = entry.absence_hours + entry.committed_hours
    if absence_hours + fixed > entry.base_hours:
        reverted = max(0.0, entry.base_hours - fixed)
        return AbsenceEdit(
            accepted=False,
            absence_hours=reverted,
            available_hours=max(0.0, entry.base_hours - reverted - fixed),
            message=(
                f"Absences ({fmt_hours(absence_hours + entry.absence_hours)}h) "
                f"+ committed ({fmt_hours(entry.committed_hours)}h) "
                f"cannot exceed base hours ({fmt_hours(entry.base_hours)}h) on {day_key(entry.date)}"
            ),
        )
    return AbsenceEdit(
        accepted=True,
        absence_hours=absence_hours,
        available_hours=max(0.0, entry.base_hours - absence_hours - fixed),
    )
