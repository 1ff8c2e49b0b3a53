import re
from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from capacity_ledger.core.deps import get_db, get_user_team
from capacity_ledger.schemas.capacity import (
    CapacityIn,
    CapacityListOut,
    CapacityOut,
    OverviewOut,
    PotentialHoursOut,
)
from capacity_ledger.services.capacity import get_capacity, list_capacity, upsert_capacity
from capacity_ledger.services.exports.exporter import default_export_path, export_capacity_matrix_xlsx
from capacity_ledger.services.overview import capacity_overview, team_potential_hours

router = APIRouter()

@router.get("/overview", response_model=OverviewOut)
def overview(
    year: int | None = Query(None),
    team: str = Depends(get_user_team),
    db: Session = Depends(get_db),
):
    return capacity_overview(db, team, year)

@router.get("/potential", response_model=PotentialHoursOut)
def potential(
    year: int | None = Query(None),
    team: str = Depends(get_user_team),
    db: Session = Depends(get_db),
):
    return team_potential_hours(db, team, year)

@router.get("/export/matrix.xlsx")
def export_matrix(
    year: int | None = Query(None),
    team: str = Depends(get_user_team),
    db: Session = Depends(get_db),
):
    data = capacity_overview(db, team, year)
    safe_team = re.sub(r"[^A-Za-z0-9_-]+", "_", team)
    out = default_export_path(f"capacity_{safe_team}_{data['year']}", "xlsx")
    export_capacity_matrix_xlsx(data, out)
    return FileResponse(str(out), media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet", filename=out.name)

@router.get("", response_model=CapacityListOut)
def get_capacities(
    resource_id: str | None = Query(None, alias="resourceId"),
    month: int | None = Query(None),
    year: int | None = Query(None),
    page: int = Query(1),
    limit: int = Query(20),
    db: Session = Depends(get_db),
):
    return list_capacity(db, resource_id=resource_id, month=month, year=year, page=page, limit=limit)

@router.get("/{capacity_id}", response_model=CapacityOut)
def get_capacity_by_id(capacity_id: str, db: Session = Depends(get_db)):
    return get_capacity(db, capacity_id)

@router.put("", response_model=CapacityOut)
def put_capacity(data: CapacityIn, db: Session = Depends(get_db)):
    return upsert_capacity(db, data)
