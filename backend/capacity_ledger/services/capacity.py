import math
from sqlalchemy.orm import Session

from capacity_ledger.core.config import settings
from capacity_ledger.core.errors import BusinessRuleError, NotFoundError, ValidationError
from capacity_ledger.core.logging import logger
from capacity_ledger.crud import assignments as assignments_crud
from capacity_ledger.crud import capacity as capacity_crud
from capacity_ledger.crud.resources import get_resource
from capacity_ledger.db.models.capacity import Capacity
from capacity_ledger.schemas.capacity import CapacityIn
from capacity_ledger.services.ledger.overview import round_half_up
from capacity_ledger.services.validators import (
    validate_month,
    validate_pagination,
    validate_uuid,
    validate_year,
)


def _metrics(c: Capacity, assigned: float) -> dict:
    total = float(c.total_hours)
    return dict(
        total_hours=total,
        assigned_hours=assigned,
        available_hours=total - assigned,
        utilization_percentage=round_half_up(assigned / total * 100) if total > 0 else 0,
    )


def _resource_ref(c: Capacity) -> dict | None:
    r = c.resource
    if r is None:
        return None
    return dict(id=r.id, code=r.code, name=r.name, email=r.email, active=r.active)


def _committed(db: Session, resource_id: str, month: int, year: int) -> float:
    return assignments_crud.sum_committed_for_period(db, resource_id, month, year, settings.ABSENCE_PROJECT_PREFIX)


def capacity_out(db: Session, c: Capacity, with_assignments: bool = False) -> dict:
    out = dict(
        id=c.id,
        resource_id=c.resource_id,
        month=c.month,
        year=c.year,
        resource=_resource_ref(c),
        updated_at=c.updated_at,
        **_metrics(c, _committed(db, c.resource_id, c.month, c.year)),
    )
    if with_assignments:
        out["assignments"] = [
            dict(
                id=a.id,
                project_id=a.project_id,
                project_code=a.project.code if a.project else None,
                project_title=a.project.title if a.project else None,
                skill_name=a.skill_name,
                hours=float(a.hours),
            )
            for a in assignments_crud.list_for_period(db, c.resource_id, c.month, c.year)
        ]
    return out


def get_capacity(db: Session, capacity_id: str) -> dict:
    capacity_id = validate_uuid(capacity_id, "id")
    c = capacity_crud.get_capacity(db, capacity_id)
    if c is None:
        raise NotFoundError("Capacity", capacity_id)
    return capacity_out(db, c, with_assignments=True)


def list_capacity(
    db: Session,
    resource_id: str | None = None,
    month: int | None = None,
    year: int | None = None,
    page: int | None = None,
    limit: int | None = None,
) -> dict:
    page, limit = validate_pagination(page, limit)
    if resource_id:
        resource_id = validate_uuid(resource_id, "resourceId")
    if month is not None:
        validate_month(month)
    if year is not None:
        validate_year(year)

    rows, total = capacity_crud.list_capacity(
        db, resource_id=resource_id, month=month, year=year, limit=limit, offset=(page - 1) * limit
    )
    return dict(
        capacities=[capacity_out(db, c) for c in rows],
        pagination=dict(page=page, limit=limit, total=total, total_pages=math.ceil(total / limit)),
    )


def upsert_capacity(db: Session, data: CapacityIn) -> dict:
    resource_id = validate_uuid(data.resource_id, "resourceId")
    validate_month(data.month)
    validate_year(data.year)
    if data.total_hours is None or data.total_hours < 0:
        raise ValidationError("totalHours must be >= 0", details={"field": "totalHours", "value": data.total_hours})

    resource = get_resource(db, resource_id)
    if resource is None:
        raise NotFoundError("Resource", resource_id)
    if not resource.active:
        raise BusinessRuleError("Cannot set capacity for inactive resource", "INACTIVE_RESOURCE")

    assigned = _committed(db, resource_id, data.month, data.year)
    if data.total_hours < assigned:
        raise BusinessRuleError(
            f"Cannot set capacity to {data.total_hours:g} hours. Resource already has "
            f"{assigned:g} hours assigned for {data.month}/{data.year}",
            "CAPACITY_BELOW_ASSIGNED",
            details={"totalHours": data.total_hours, "assignedHours": assigned},
        )

    c = capacity_crud.upsert_capacity(db, resource_id, data.month, data.year, data.total_hours)
    logger.info(
        "capacity_upserted",
        resource_id=resource_id,
        month=data.month,
        year=data.year,
        total_hours=data.total_hours,
        assigned_hours=assigned,
    )
    return dict(
        id=c.id,
        resource_id=c.resource_id,
        month=c.month,
        year=c.year,
        resource=dict(id=resource.id, code=resource.code, name=resource.name),
        updated_at=c.updated_at,
        **_metrics(c, assigned),
    )
