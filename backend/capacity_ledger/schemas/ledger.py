import datetime as dt
from capacity_ledger.schemas._base import CamelModel


class LedgerEntryOut(CamelModel):
    date: dt.date
    base_hours: float
    absence_hours: float
    committed_hours: float
    available_hours: float


class ResourceLedgerOut(CamelModel):
    resource_id: str
    date_from: dt.date
    date_to: dt.date
    entries: list[LedgerEntryOut]


class MonthlySummaryOut(CamelModel):
    month: int
    year: int
    base_hours: float
    absence_hours: float
    total_hours: float
    committed_hours: float
    available_hours: float
    utilization_rate: float


class ResourceMonthsOut(CamelModel):
    resource_id: str
    year: int
    months: list[MonthlySummaryOut]


class AbsenceIn(CamelModel):
    hours: float


class AbsenceOut(CamelModel):
    accepted: bool
    date: dt.date
    absence_hours: float
    available_hours: float
    message: str | None = None
