"""Typed records the ledger works on.

Rows coming from the database (ORM objects) or from JSON payloads (mappings)
are converted here once; everything downstream trusts the fields.
"""
import datetime as dt
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from capacity_ledger.core.errors import ValidationError
from capacity_ledger.services.ledger.calendar import month_start, to_day

ABSENCE_PREFIX = "ABSENCES"


def is_absence_code(project_code: str | None, prefix: str = ABSENCE_PREFIX) -> bool:
    return bool(project_code) and project_code.startswith(prefix)


def absence_project_code(team: str, prefix: str = ABSENCE_PREFIX) -> str:
    return f"{prefix}-{team}"


@dataclass(frozen=True)
class ResourceRecord:
    id: str
    code: str
    name: str
    default_capacity: float
    active: bool = True
    skills: tuple[str, ...] = ()
    team: str | None = None
    email: str | None = None

    def daily_base_hours(self, divisor: int = 20) -> float:
        return self.default_capacity / divisor


@dataclass(frozen=True)
class AssignmentRecord:
    id: str
    project_id: str
    project_code: str | None
    resource_id: str | None
    day: dt.date | None
    month: int | None
    year: int | None
    hours: float
    is_absence: bool = False
    skill_name: str | None = None
    team: str | None = None
    project_title: str | None = None

    @property
    def ledger_day(self) -> dt.date | None:
        """Day the hours land on; legacy month/year rows land on the 1st."""
        if self.day is not None:
            return self.day
        if self.month and self.year:
            return month_start(self.year, self.month)
        return None

    @property
    def period(self) -> tuple[int, int] | None:
        d = self.ledger_day
        return (d.year, d.month) if d is not None else None


@dataclass(frozen=True)
class LedgerEntry:
    resource_id: str
    date: dt.date
    base_hours: float
    absence_hours: float
    committed_hours: float
    available_hours: float


@dataclass(frozen=True)
class MonthEntry:
    resource_id: str
    year: int
    month: int
    base_hours: float
    absence_hours: float
    committed_hours: float
    available_hours: float
    working_days: int


@dataclass(frozen=True)
class MonthlySummary:
    resource_id: str
    month: int
    year: int
    base_hours: float
    absence_hours: float
    total_hours: float
    committed_hours: float
    available_hours: float
    utilization_rate: float
    assignments: tuple[AssignmentRecord, ...] = field(default=(), compare=False, repr=False)


def _get(row: Any, name: str, default: Any = None) -> Any:
    if isinstance(row, Mapping):
        return row.get(name, default)
    return getattr(row, name, default)


def _hours(v: Any) -> float:
    try:
        h = float(v or 0)
    except (TypeError, ValueError):
        raise ValidationError(f"hours must be numeric, got {v!r}")
    if h < 0:
        raise ValidationError(f"hours must not be negative, got {h}")
    return h


def resource_from_row(row: Any, default_capacity: float = 160.0) -> ResourceRecord:
    skills = _get(row, "skills") or []
    names = []
    for s in skills:
        name = s if isinstance(s, str) else (_get(s, "skill_name") or _get(s, "name"))
        if name:
            names.append(name)
    capacity = _get(row, "default_capacity")
    active = _get(row, "active")
    return ResourceRecord(
        id=str(_get(row, "id")),
        code=_get(row, "code") or "",
        name=_get(row, "name") or "",
        default_capacity=float(capacity) if capacity is not None else default_capacity,
        active=True if active is None else bool(active),
        skills=tuple(names),
        team=_get(row, "team"),
        email=_get(row, "email"),
    )


def assignment_from_row(row: Any, absence_prefix: str = ABSENCE_PREFIX) -> AssignmentRecord:
    project = _get(row, "project")
    project_code = _get(row, "project_code") or (_get(project, "code") if project is not None else None)
    project_title = _get(row, "project_title") or (_get(project, "title") if project is not None else None)
    resource_id = _get(row, "resource_id")
    month = _get(row, "month")
    year = _get(row, "year")
    return AssignmentRecord(
        id=str(_get(row, "id")),
        project_id=str(_get(row, "project_id")),
        project_code=project_code,
        resource_id=str(resource_id) if resource_id else None,
        day=to_day(_get(row, "date")),
        month=int(month) if month else None,
        year=int(year) if year else None,
        hours=_hours(_get(row, "hours")),
        is_absence=is_absence_code(project_code, absence_prefix),
        skill_name=_get(row, "skill_name"),
        team=_get(row, "team"),
        project_title=project_title,
    )
