import datetime as dt
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from capacity_ledger.core.deps import get_db, get_user_team
from capacity_ledger.schemas.ledger import AbsenceIn, AbsenceOut, ResourceLedgerOut, ResourceMonthsOut
from capacity_ledger.services.assignments import set_absence
from capacity_ledger.services.clock import today
from capacity_ledger.services.resource_ledger import resource_ledger, resource_months

router = APIRouter()

@router.get("/resources/{resource_id}", response_model=ResourceLedgerOut)
def get_resource_ledger(
    resource_id: str,
    date_from: dt.date | None = Query(None),
    date_to: dt.date | None = Query(None),
    db: Session = Depends(get_db),
):
    return resource_ledger(db, resource_id, date_from, date_to)

@router.get("/resources/{resource_id}/months", response_model=ResourceMonthsOut)
def get_resource_months(
    resource_id: str,
    year: int | None = Query(None),
    db: Session = Depends(get_db),
):
    return resource_months(db, resource_id, year if year is not None else today().year)

@router.put("/resources/{resource_id}/absences/{day}", response_model=AbsenceOut)
def put_absence(
    resource_id: str,
    day: dt.date,
    data: AbsenceIn,
    team: str = Depends(get_user_team),
    db: Session = Depends(get_db),
):
    return set_absence(db, resource_id, day, data.hours, team)
