import datetime as dt
from collections.abc import Callable
from sqlalchemy.orm import Session

from capacity_ledger.core.config import settings
from capacity_ledger.core.errors import BusinessRuleError, NotFoundError, ValidationError
from capacity_ledger.core.logging import logger
from capacity_ledger.crud import assignments as assignments_crud
from capacity_ledger.crud.projects import get_or_create_absence_project, get_project
from capacity_ledger.crud.resources import get_resource
from capacity_ledger.db.models.assignment import Assignment
from capacity_ledger.db.models.project import Project
from capacity_ledger.schemas.assignments import AllocationIn, AssignmentIn, SaveBatchIn
from capacity_ledger.services.batch import BatchExecutor, BatchOperation
from capacity_ledger.services.ledger import build_engine
from capacity_ledger.services.ledger.calendar import day_key
from capacity_ledger.services.ledger.conflicts import (
    CAPACITY_EXCEEDED,
    Conflict,
    ProposedAllocation,
    check_absence_edit,
)
from capacity_ledger.services.ledger.records import absence_project_code, is_absence_code
from capacity_ledger.services.loaders import load_assignments, load_resources, to_assignments, to_resource
from capacity_ledger.services.validators import validate_hours, validate_month, validate_uuid, validate_year


def _check_item(data: AssignmentIn) -> AssignmentIn:
    ids = {"project_id": validate_uuid(data.project_id, "projectId")}
    if data.resource_id:
        ids["resource_id"] = validate_uuid(data.resource_id, "resourceId")
    data = data.model_copy(update=ids)
    if not data.title or not data.title.strip():
        raise ValidationError("title is required", details={"field": "title"})
    if data.date is None and not (data.month and data.year):
        raise ValidationError("Either date or (month and year) is required")
    if data.date is None:
        validate_month(data.month)
        validate_year(data.year)
    else:
        validate_year(data.date.year, "date")
    validate_hours(data.hours)
    return data


def _period(data: AssignmentIn) -> tuple[int, int]:
    if data.date is not None:
        return data.date.month, data.date.year
    return data.month, data.year


def _exceeded(conflict: Conflict) -> BusinessRuleError:
    return BusinessRuleError(
        f"Assignment would exceed daily resource capacity for {day_key(conflict.date)}. {conflict.detail}",
        CAPACITY_EXCEEDED,
        details=conflict.to_dict(),
    )


def _write_one(db: Session, project: Project, data: AssignmentIn) -> str:
    """Insert one assignment, re-checking the resource's day under a row lock."""
    try:
        if data.resource_id:
            row = get_resource(db, data.resource_id, for_update=True)
            if row is None:
                raise NotFoundError("Resource", data.resource_id)
            if not row.active:
                raise BusinessRuleError("Cannot assign inactive resource to project", "INACTIVE_RESOURCE")
            if data.date is not None and not is_absence_code(project.code, settings.ABSENCE_PROJECT_PREFIX):
                _, _, validator = build_engine(settings)
                existing = to_assignments(assignments_crud.list_on_day(db, row.id, data.date))
                conflict = validator.check(to_resource(row), data.date, data.hours, existing)
                if conflict is not None:
                    raise _exceeded(conflict)

        month, year = _period(data)
        a = assignments_crud.create_assignment(
            db,
            project_id=project.id,
            resource_id=data.resource_id or None,
            title=data.title.strip(),
            description=data.description,
            skill_name=data.skill_name,
            team=data.team,
            date=data.date,
            month=month,
            year=year,
            hours=data.hours,
        )
        db.commit()
        return a.id
    except Exception:
        db.rollback()
        raise


def _load_project(db: Session, project_id: str) -> Project:
    project = get_project(db, project_id)
    if project is None:
        raise NotFoundError("Project", project_id)
    return project


def create_assignment(db: Session, data: AssignmentIn) -> Assignment:
    data = _check_item(data)
    project = _load_project(db, data.project_id)
    assignment_id = _write_one(db, project, data)
    logger.info(
        "assignment_created",
        assignment_id=assignment_id,
        project_id=project.id,
        resource_id=data.resource_id,
        date=day_key(data.date) if data.date else None,
        hours=data.hours,
    )
    return db.get(Assignment, assignment_id)


def validate_allocations(
    db: Session, allocations: list[AllocationIn], project_id: str | None = None
) -> list[Conflict]:
    proposals = []
    for a in allocations:
        proposals.append(ProposedAllocation(validate_uuid(a.resource_id, "resourceId"), a.date, a.hours))
    if project_id:
        project_id = validate_uuid(project_id, "projectId")
    if not proposals:
        return []

    resources = load_resources(db, {p.resource_id for p in proposals})
    date_from = min(p.date for p in proposals)
    date_to = max(p.date for p in proposals)
    existing = load_assignments(db, resources.keys(), date_from, date_to)

    _, _, validator = build_engine(settings)
    conflicts = validator.validate(proposals, resources, existing, exclude_project_id=project_id)
    if conflicts:
        logger.info("capacity_conflicts_found", project_id=project_id, conflicts=len(conflicts))
    return conflicts


def save_assignments(
    db: Session,
    data: SaveBatchIn,
    session_factory: Callable[[], Session] | None = None,
    executor: BatchExecutor | None = None,
) -> dict:
    """Validate a project's batch, then write it item by item.

    Conflicts either abort the whole batch (nothing written) or drop the
    offending (resource, day) keys. Writes that fail later do not undo earlier ones.
    """
    project_id = validate_uuid(data.project_id, "projectId")
    project = _load_project(db, project_id)
    items = [_check_item(a.model_copy(update={"project_id": project_id})) for a in data.assignments]

    allocations = [
        AllocationIn(resource_id=a.resource_id, date=a.date, hours=a.hours)
        for a in items
        if a.resource_id and a.date is not None
    ]
    conflicts = validate_allocations(db, allocations, project_id)
    conflict_keys = {(c.resource_id, c.date) for c in conflicts}

    blocked = [a for a in items if (a.resource_id, a.date) in conflict_keys]
    if conflicts and data.on_conflict == "abort":
        logger.info("assignment_batch_aborted", project_id=project_id, conflicts=len(conflicts), items=len(blocked))
        return dict(succeeded=0, failed=len(blocked), errors=[], conflicts=[c.to_dict() for c in conflicts], deleted=0)

    if blocked:
        items = [a for a in items if (a.resource_id, a.date) not in conflict_keys]

    deleted = 0
    if data.replace_existing:
        deleted = assignments_crud.delete_project_assignments(db, project_id)
        db.commit()

    def _operation(idx: int, item: AssignmentIn) -> BatchOperation:
        def run() -> str:
            if session_factory is None:
                return _write_one(db, project, item)
            s = session_factory()
            try:
                return _write_one(s, project, item)
            finally:
                s.close()

        key = f"{item.resource_id or '-'}:{day_key(item.date) if item.date else f'{item.year}-{item.month:02d}'}:{idx}"
        return BatchOperation(key=key, run=run, payload=item.model_dump(mode="json", by_alias=True))

    if executor is None:
        workers = settings.BATCH_MAX_WORKERS if session_factory is not None else 1
        executor = BatchExecutor(max_workers=workers)
    result = executor.run([_operation(i, item) for i, item in enumerate(items)])

    logger.info(
        "assignment_batch_saved",
        project_id=project_id,
        succeeded=result.succeeded,
        failed=result.failed,
        skipped_conflicts=len(conflicts),
        deleted=deleted,
    )
    return dict(
        succeeded=result.succeeded,
        failed=result.failed,
        errors=[
            dict(key=str(e.key), code=e.code, message=e.message, payload=e.payload) for e in result.errors
        ],
        conflicts=[c.to_dict() for c in conflicts],
        deleted=deleted,
    )


def set_absence(db: Session, resource_id: str, day: dt.date, hours: float, team: str) -> dict:
    """Replace a resource's absence hours for one day.

    Rejected when absence + committed would exceed the day's base hours; the
    error carries the value the cell reverts to.
    """
    resource_id = validate_uuid(resource_id, "resourceId")
    validate_year(day.year, "date")
    if hours is None or hours < 0:
        raise ValidationError("Hours cannot be negative", details={"field": "hours", "value": hours})

    try:
        row = get_resource(db, resource_id, for_update=True)
        if row is None:
            raise NotFoundError("Resource", resource_id)
        if not row.active:
            raise BusinessRuleError("Cannot record absences for inactive resource", "INACTIVE_RESOURCE")

        resource = to_resource(row)
        own_code = absence_project_code(team, settings.ABSENCE_PROJECT_PREFIX)
        # rows of this team's absence project are replaced below; every other row stays
        kept = [a for a in to_assignments(assignments_crud.list_on_day(db, resource.id, day)) if a.project_code != own_code]
        ledger, _, _ = build_engine(settings)
        absence_by_day, committed_by_day = ledger.hours_by_day(resource.id, kept)
        entry = ledger.entry(resource, day, absence_by_day.get(day, 0.0), committed_by_day.get(day, 0.0))

        edit = check_absence_edit(entry, hours)
        if not edit.accepted:
            raise BusinessRuleError(
                edit.message,
                "ABSENCE_EXCEEDS_BASE",
                details={"date": day_key(day), "requested": hours, "revertTo": edit.absence_hours},
            )

        project = get_or_create_absence_project(db, own_code, team)
        assignments_crud.delete_absences_on_day(db, resource.id, project.id, day)
        if hours > 0:
            assignments_crud.create_assignment(
                db,
                project_id=project.id,
                resource_id=resource.id,
                title="Absence",
                team=team,
                date=day,
                month=day.month,
                year=day.year,
                hours=hours,
            )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("absence_recorded", resource_id=resource_id, date=day_key(day), hours=hours, team=team)
    return dict(
        accepted=True,
        date=day,
        absence_hours=edit.absence_hours,
        available_hours=edit.available_hours,
    )
