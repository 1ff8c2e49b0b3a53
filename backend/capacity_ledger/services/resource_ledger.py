import datetime as dt
from sqlalchemy.orm import Session

from capacity_ledger.core.config import settings
from capacity_ledger.core.errors import ValidationError
from capacity_ledger.services.clock import today
from capacity_ledger.services.ledger import build_engine
from capacity_ledger.services.ledger.calendar import default_horizon, month_end, month_start
from capacity_ledger.services.loaders import load_assignments, load_resource
from capacity_ledger.services.validators import validate_uuid, validate_year

MAX_RANGE_DAYS = 800


def resource_ledger(
    db: Session,
    resource_id: str,
    date_from: dt.date | None = None,
    date_to: dt.date | None = None,
    reference: dt.date | None = None,
) -> dict:
    resource_id = validate_uuid(resource_id, "resourceId")
    if date_from is None or date_to is None:
        start, end = default_horizon(reference or today(), settings.LEDGER_HORIZON_MONTHS)
        date_from = date_from or start
        date_to = date_to or end
    if date_to < date_from:
        raise ValidationError("date_to must not be before date_from")
    if (date_to - date_from).days > MAX_RANGE_DAYS:
        raise ValidationError(f"date range must not exceed {MAX_RANGE_DAYS} days")

    resource = load_resource(db, resource_id)
    assignments = load_assignments(db, [resource.id], date_from, date_to)
    ledger, _, _ = build_engine(settings)
    return dict(
        resource_id=resource.id,
        date_from=date_from,
        date_to=date_to,
        entries=ledger.day_entries(resource, assignments, date_from, date_to),
    )


def resource_months(db: Session, resource_id: str, year: int) -> dict:
    resource_id = validate_uuid(resource_id, "resourceId")
    validate_year(year)
    resource = load_resource(db, resource_id)
    assignments = load_assignments(db, [resource.id], month_start(year, 1), month_end(year, 12))
    _, aggregation, _ = build_engine(settings)
    return dict(resource_id=resource.id, year=year, months=aggregation.monthly_summaries(resource, assignments, year))
