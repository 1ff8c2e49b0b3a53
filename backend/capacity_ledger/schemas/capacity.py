import datetime as dt
from capacity_ledger.schemas._base import CamelModel


class CapacityIn(CamelModel):
    resource_id: str
    month: int
    year: int
    total_hours: float


class ResourceRef(CamelModel):
    id: str
    code: str
    name: str
    email: str | None = None
    active: bool | None = None


class CapacityAssignmentOut(CamelModel):
    id: str
    project_id: str
    project_code: str | None = None
    project_title: str | None = None
    skill_name: str | None = None
    hours: float


class CapacityOut(CamelModel):
    id: str
    resource_id: str
    month: int
    year: int
    total_hours: float
    assigned_hours: float
    available_hours: float
    utilization_percentage: int
    resource: ResourceRef | None = None
    assignments: list[CapacityAssignmentOut] | None = None
    updated_at: dt.datetime | None = None


class PaginationOut(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class CapacityListOut(CamelModel):
    capacities: list[CapacityOut]
    pagination: PaginationOut


class OverviewAssignmentOut(CamelModel):
    id: str
    project_id: str
    project_code: str | None = None
    project_title: str | None = None
    skill_name: str | None = None
    team: str | None = None
    hours: float


class MonthlyDataOut(CamelModel):
    month: int
    total_hours: int
    committed_hours: float
    available_hours: int
    utilization_rate: int
    assignments: list[OverviewAssignmentOut] = []


class OverviewResourceOut(CamelModel):
    id: str
    code: str
    name: str
    email: str | None = None
    default_capacity: float
    skills: list[str]
    monthly_data: list[MonthlyDataOut]
    avg_utilization: int
    has_future_assignment: bool


class AvgUtilizationOut(CamelModel):
    current: int
    future: int


class KPIsOut(CamelModel):
    total_resources: int
    resources_with_assignment: int
    resources_without_assignment: int
    avg_utilization: AvgUtilizationOut


class MonthlyComparisonPoint(CamelModel):
    month: int
    committed_hours: float
    available_hours: float


class SkillAvailabilityRow(CamelModel):
    skill: str
    current_month: int
    future_months: int


class ChartsOut(CamelModel):
    monthly_comparison: list[MonthlyComparisonPoint]
    skills_availability: list[SkillAvailabilityRow]


class OverviewOut(CamelModel):
    year: int
    current_month: int
    kpis: KPIsOut
    charts: ChartsOut
    resources: list[OverviewResourceOut]


class PotentialMonthOut(CamelModel):
    month: int
    base_hours: float
    absence_hours: float
    potential_hours: float
    committed_hours: float


class PotentialHoursOut(CamelModel):
    year: int
    team: str
    months: list[PotentialMonthOut]
