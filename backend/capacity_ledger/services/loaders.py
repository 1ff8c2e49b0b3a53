import datetime as dt
from collections.abc import Iterable
from sqlalchemy.orm import Session

from capacity_ledger.core.config import settings
from capacity_ledger.core.errors import NotFoundError
from capacity_ledger.crud import assignments as assignments_crud
from capacity_ledger.crud.resources import get_resource, get_resources, list_team_resources
from capacity_ledger.services.ledger.records import (
    AssignmentRecord,
    ResourceRecord,
    assignment_from_row,
    resource_from_row,
)


def to_resource(row) -> ResourceRecord:
    return resource_from_row(row, default_capacity=settings.DEFAULT_CAPACITY)


def to_assignments(rows: Iterable) -> list[AssignmentRecord]:
    return [assignment_from_row(r, settings.ABSENCE_PROJECT_PREFIX) for r in rows]


def load_resource(db: Session, resource_id: str) -> ResourceRecord:
    row = get_resource(db, resource_id)
    if row is None:
        raise NotFoundError("Resource", resource_id)
    return to_resource(row)


def load_resources(db: Session, resource_ids: Iterable[str]) -> dict[str, ResourceRecord]:
    return {r.id: to_resource(r) for r in get_resources(db, resource_ids)}


def load_team(db: Session, team: str) -> list[ResourceRecord]:
    return [to_resource(r) for r in list_team_resources(db, team)]


def load_assignments(
    db: Session, resource_ids: Iterable[str], date_from: dt.date, date_to: dt.date
) -> list[AssignmentRecord]:
    return to_assignments(assignments_crud.list_for_resources(db, resource_ids, date_from, date_to))
