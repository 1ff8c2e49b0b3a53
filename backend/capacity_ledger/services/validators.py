import uuid
from typing import Any

from capacity_ledger.core.errors import ValidationError

YEAR_MIN = 2000
YEAR_MAX = 2100
PAGE_LIMIT_MAX = 100


def validate_uuid(v: Any, field: str) -> str:
    try:
        return str(uuid.UUID(str(v)))
    except (TypeError, ValueError, AttributeError):
        raise ValidationError(f"{field} must be a valid UUID", details={"field": field, "value": v})


def validate_month(v: int, field: str = "month") -> int:
    if not isinstance(v, int) or not 1 <= v <= 12:
        raise ValidationError("Month must be between 1 and 12", details={"field": field, "value": v})
    return v


def validate_year(v: int, field: str = "year") -> int:
    if not isinstance(v, int) or not YEAR_MIN <= v <= YEAR_MAX:
        raise ValidationError(f"Year must be between {YEAR_MIN} and {YEAR_MAX}", details={"field": field, "value": v})
    return v


def validate_hours(v: float, field: str = "hours", allow_zero: bool = False) -> float:
    if v is None or v < 0 or (v == 0 and not allow_zero):
        raise ValidationError(f"{field} must be greater than 0", details={"field": field, "value": v})
    return float(v)


def validate_pagination(page: int | None, limit: int | None) -> tuple[int, int]:
    page = page or 1
    limit = limit or 20
    if page < 1:
        raise ValidationError("page must be >= 1", details={"field": "page", "value": page})
    if not 1 <= limit <= PAGE_LIMIT_MAX:
        raise ValidationError(f"limit must be between 1 and {PAGE_LIMIT_MAX}", details={"field": "limit", "value": limit})
    return page, limit
