import datetime as dt
from sqlalchemy.orm import Session

from capacity_ledger.core.config import settings
from capacity_ledger.core.logging import logger
from capacity_ledger.crud import assignments as assignments_crud
from capacity_ledger.services.clock import today
from capacity_ledger.services.ledger import build_engine
from capacity_ledger.services.ledger.calendar import month_end, month_start
from capacity_ledger.services.ledger.overview import OverviewProjector
from capacity_ledger.services.ledger.records import absence_project_code
from capacity_ledger.services.loaders import load_assignments, load_team, to_assignments
from capacity_ledger.services.validators import validate_year


def capacity_overview(db: Session, team: str, year: int | None = None, reference: dt.date | None = None) -> dict:
    ref = reference or today()
    year = validate_year(year if year is not None else ref.year)

    resources = load_team(db, team)
    assignments = load_assignments(db, [r.id for r in resources], month_start(year, 1), month_end(year, 12))

    _, aggregation, _ = build_engine(settings)
    payload = OverviewProjector(aggregation).build(resources, assignments, year, ref.month)
    logger.info(
        "capacity_overview_built",
        team=team,
        year=year,
        resources=len(resources),
        assignments=len(assignments),
    )
    return payload


def team_potential_hours(db: Session, team: str, year: int | None = None, reference: dt.date | None = None) -> dict:
    year = validate_year(year if year is not None else (reference or today()).year)
    date_from, date_to = month_start(year, 1), month_end(year, 12)

    resources = load_team(db, team)
    assignments = load_assignments(db, [r.id for r in resources], date_from, date_to)
    code = absence_project_code(team, settings.ABSENCE_PROJECT_PREFIX)
    seen = {a.id for a in assignments}
    # team absences may sit on rows without a resource
    assignments += [
        a
        for a in to_assignments(assignments_crud.list_for_team_absences(db, code, date_from, date_to))
        if a.id not in seen
    ]

    _, aggregation, _ = build_engine(settings)
    return dict(year=year, team=team, months=aggregation.team_potential_hours(resources, assignments, year, team))
