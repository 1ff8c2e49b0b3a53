from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from capacity_ledger.core.deps import get_db
from capacity_ledger.schemas.assignments import (
    AssignmentIn,
    AssignmentOut,
    SaveBatchIn,
    SaveBatchOut,
    ValidateBatchIn,
    ValidateBatchOut,
)
from capacity_ledger.services.assignments import create_assignment, save_assignments, validate_allocations

router = APIRouter()

@router.post("", response_model=AssignmentOut, status_code=201)
def post_assignment(data: AssignmentIn, db: Session = Depends(get_db)):
    return create_assignment(db, data)

@router.post("/validate", response_model=ValidateBatchOut)
def post_validate(data: ValidateBatchIn, db: Session = Depends(get_db)):
    conflicts = validate_allocations(db, data.allocations, data.project_id)
    return {"ok": not conflicts, "conflicts": [c.to_dict() for c in conflicts]}

@router.post("/batch", response_model=SaveBatchOut)
def post_batch(data: SaveBatchIn, request: Request, db: Session = Depends(get_db)):
    return save_assignments(db, data, session_factory=request.app.state.session_factory)
