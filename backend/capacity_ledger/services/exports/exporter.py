import datetime as dt
from pathlib import Path
import pandas as pd

from capacity_ledger.core.config import settings

def _matrix(resources: list[dict], field: str) -> pd.DataFrame:
    rows = []
    for r in resources:
        row = {"code": r["code"], "name": r["name"]}
        for m in r["monthly_data"]:
            row[f"{m['month']:02d}"] = m[field]
        rows.append(row)
    columns = ["code", "name"] + [f"{m:02d}" for m in range(1, 13)]
    return pd.DataFrame(rows, columns=columns).fillna(0)

def export_capacity_matrix_xlsx(overview: dict, out_path: Path) -> Path:
    # overview: OverviewProjector payload (snake_case keys)
    resources = overview["resources"]
    df_monthly = pd.DataFrame(overview["charts"]["monthly_comparison"])
    df_monthly["utilization_pct"] = (
        df_monthly["committed_hours"]
        / (df_monthly["committed_hours"] + df_monthly["available_hours"]).where(lambda s: s > 0)
        * 100
    ).fillna(0.0).round(1)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(out_path, engine="xlsxwriter") as w:
        _matrix(resources, "committed_hours").to_excel(w, index=False, sheet_name="committed")
        _matrix(resources, "available_hours").to_excel(w, index=False, sheet_name="available")
        _matrix(resources, "utilization_rate").to_excel(w, index=False, sheet_name="utilization")
        df_monthly.to_excel(w, index=False, sheet_name="monthly")
    return out_path

def default_export_path(prefix: str, ext: str) -> Path:
    ts = dt.datetime.now(dt.timezone.utc).strftime("%Y%m%d_%H%M%S")
    return Path(settings.EXPORT_DIR) / f"{prefix}_{ts}.{ext}"
