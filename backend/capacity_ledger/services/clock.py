import datetime as dt
from zoneinfo import ZoneInfo

from capacity_ledger.core.config import settings


def today(tz: str | None = None) -> dt.date:
    """Reference date for "current month" in the configured calendar."""
    return dt.datetime.now(ZoneInfo(tz or settings.TZ)).date()
