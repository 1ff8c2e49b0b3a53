import datetime as dt
from collections.abc import Iterable
from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session, joinedload

from capacity_ledger.db.models.assignment import Assignment
from capacity_ledger.db.models.project import Project


def _in_range(date_from: dt.date, date_to: dt.date):
    # legacy rows carry only month/year
    return or_(
        and_(Assignment.date >= date_from, Assignment.date <= date_to),
        and_(
            Assignment.date.is_(None),
            Assignment.year * 100 + Assignment.month >= date_from.year * 100 + date_from.month,
            Assignment.year * 100 + Assignment.month <= date_to.year * 100 + date_to.month,
        ),
    )


def list_for_resources(
    db: Session,
    resource_ids: Iterable[str],
    date_from: dt.date,
    date_to: dt.date,
) -> list[Assignment]:
    ids = list(set(resource_ids))
    if not ids:
        return []
    return (
        db.query(Assignment)
        .options(joinedload(Assignment.project))
        .filter(Assignment.resource_id.in_(ids), _in_range(date_from, date_to))
        .all()
    )


def list_for_team_absences(db: Session, absence_code: str, date_from: dt.date, date_to: dt.date) -> list[Assignment]:
    return (
        db.query(Assignment)
        .join(Project, Assignment.project_id == Project.id)
        .options(joinedload(Assignment.project))
        .filter(Project.code == absence_code, _in_range(date_from, date_to))
        .all()
    )


def list_for_period(db: Session, resource_id: str, month: int, year: int) -> list[Assignment]:
    return (
        db.query(Assignment)
        .options(joinedload(Assignment.project))
        .filter(Assignment.resource_id == resource_id, Assignment.month == month, Assignment.year == year)
        .all()
    )


def list_on_day(db: Session, resource_id: str, day: dt.date) -> list[Assignment]:
    return (
        db.query(Assignment)
        .options(joinedload(Assignment.project))
        .filter(Assignment.resource_id == resource_id, Assignment.date == day)
        .all()
    )


def create_assignment(db: Session, **fields) -> Assignment:
    a = Assignment(**fields)
    db.add(a)
    db.flush()
    return a


def delete_project_assignments(db: Session, project_id: str) -> int:
    return (
        db.query(Assignment)
        .filter(Assignment.project_id == project_id)
        .delete(synchronize_session=False)
    )


def delete_absences_on_day(db: Session, resource_id: str, project_id: str, day: dt.date) -> int:
    return (
        db.query(Assignment)
        .filter(
            Assignment.resource_id == resource_id,
            Assignment.project_id == project_id,
            Assignment.date == day,
        )
        .delete(synchronize_session=False)
    )


def sum_committed_for_period(db: Session, resource_id: str, month: int, year: int, absence_prefix: str) -> float:
    total = (
        db.query(func.coalesce(func.sum(Assignment.hours), 0.0))
        .join(Project, Assignment.project_id == Project.id)
        .filter(
            Assignment.resource_id == resource_id,
            Assignment.month == month,
            Assignment.year == year,
            ~Project.code.startswith(absence_prefix),
        )
        .scalar()
    )
    return float(total or 0.0)
