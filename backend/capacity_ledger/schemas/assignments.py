import datetime as dt
from typing import Any, Literal
from capacity_ledger.schemas._base import CamelModel


class AssignmentIn(CamelModel):
    project_id: str
    resource_id: str | None = None
    title: str
    description: str | None = None
    skill_name: str | None = None
    team: str | None = None
    date: dt.date | None = None
    month: int | None = None
    year: int | None = None
    hours: float


class AssignmentOut(CamelModel):
    id: str
    project_id: str
    resource_id: str | None = None
    title: str
    description: str | None = None
    skill_name: str | None = None
    team: str | None = None
    date: dt.date | None = None
    month: int | None = None
    year: int | None = None
    hours: float


class AllocationIn(CamelModel):
    resource_id: str
    date: dt.date
    hours: float


class ValidateBatchIn(CamelModel):
    project_id: str | None = None
    allocations: list[AllocationIn]


class ConflictOut(CamelModel):
    kind: str
    resource_id: str
    date: str
    available: float
    requested: float
    assigned: float
    detail: str


class ValidateBatchOut(CamelModel):
    ok: bool
    conflicts: list[ConflictOut]


class SaveBatchIn(CamelModel):
    project_id: str
    assignments: list[AssignmentIn]
    replace_existing: bool = False
    on_conflict: Literal["abort", "skip"] = "abort"


class BatchErrorOut(CamelModel):
    key: str
    code: str
    message: str
    payload: dict[str, Any] | None = None


class SaveBatchOut(CamelModel):
    succeeded: int
    failed: int
    errors: list[BatchErrorOut]
    conflicts: list[ConflictOut]
    deleted: int = 0
