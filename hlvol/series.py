# hlvol/series.py

from datetime import date
import re
import numpy as np
import pandas as pd

SERIES_COLUMNS = ["date", "total_volume", "non_hlp_volume", "non_hlp_pct", "hlp_pct"]
_DATE_KEY = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)

def empty_series() -> pd.DataFrame:
    """Zero-row daily series with the usual columns (the 'nothing loaded' state)."""
    out = pd.DataFrame({
        "date": pd.Series(dtype="object"),
        "total_volume": pd.Series(dtype="int64"),
        "non_hlp_volume": pd.Series(dtype="int64"),
        "non_hlp_pct": pd.Series(dtype="float64"),
        "hlp_pct": pd.Series(dtype="float64"),
    })
    out.attrs["clamped_dates"] = []
    return out

def chart_points(payload, name: str) -> list:
    """Pull the 'chart_data' list out of a parsed volume document."""
    if not isinstance(payload, dict):
        raise ValueError(f"{name} must be a JSON object with 'chart_data'. Got: {type(payload).__name__}")
    points = payload.get("chart_data")
    if not isinstance(points, list):
        raise ValueError(f"{name} must contain a 'chart_data' list. Found keys: {sorted(payload)}")
    return points

def date_key(ts) -> str:
    """Calendar-date part of an ISO date/datetime string (everything before 'T')."""
    return str(ts).split("T", 1)[0]

def _is_date_key(ts) -> bool:
    """True if `ts` is a string whose date key is a real YYYY-MM-DD calendar date."""
    if not isinstance(ts, str):
        return False
    key = date_key(ts)
    if not _DATE_KEY.fullmatch(key):
        return False
    try:
        date.fromisoformat(key)
    except ValueError:
        return False
    return True

def _daily_sum(points, value_col: str, name: str, scale: float = 1.0) -> pd.Series:
    """
    Sum one numeric field per date key.
    Returns a float Series indexed by date string (empty if no points).
    """
    if not isinstance(points, list):
        raise ValueError(f"{name} must be a list of points. Got: {type(points).__name__}")
    if not points:
        return pd.Series(dtype="float64")

    for i, p in enumerate(points):
        if not isinstance(p, dict):
            raise ValueError(f"{name}[{i}] must be an object. Got: {type(p).__name__}")
        missing = [c for c in ("time", value_col) if c not in p]
        if missing:
            raise ValueError(f"{name}[{i}] is missing {missing}. Found: {sorted(p)}")
        if not _is_date_key(p["time"]):
            raise ValueError(f"{name}[{i}].time is not an ISO date: {p['time']!r}")

    df = pd.DataFrame(points)
    vals = pd.to_numeric(df[value_col], errors="coerce")
    bad = vals.isna()
    if bad.any():
        i = int(np.flatnonzero(bad.to_numpy())[0])
        raise ValueError(f"{name}[{i}].{value_col} is not a number: {points[i][value_col]!r}")

    keys = df["time"].map(date_key)
    return (vals.astype("float64") * scale).groupby(keys).sum()

def _round_half_up(x: pd.Series) -> pd.Series:
    # Math.round semantics: 0.5 -> 1, 2.5 -> 3 (pandas .round() would give 2)
    return np.floor(x + 0.5).astype("int64")

def build_daily_volume(total_points, non_hlp_points) -> pd.DataFrame:
    """
    Merge total volume and non-HLP volume into one row per calendar date.

    total_points:   [{time, coin, total_volume}, ...]      summed per date
    non_hlp_points: [{time, coin, daily_usd_volume}, ...]  halved (maker + taker
                    double counting), then summed per date
    A date present in only one input gets 0 for the other metric.
    Output columns: date, total_volume, non_hlp_volume, non_hlp_pct, hlp_pct
    sorted ascending by date. Dates whose raw non-HLP share exceeded 100%
    are listed in .attrs['clamped_dates'].
    """
    total_by_date = _daily_sum(total_points, "total_volume", "total_volume.chart_data")
    non_hlp_by_date = _daily_sum(non_hlp_points, "daily_usd_volume", "daily_nonhlp_usd_volume.chart_data", scale=0.5)

    dates = sorted(set(total_by_date.index) | set(non_hlp_by_date.index))
    if not dates:
        return empty_series()

    total = total_by_date.reindex(dates, fill_value=0.0).astype("float64")
    non_hlp = non_hlp_by_date.reindex(dates, fill_value=0.0).astype("float64")

    # Guard: no division by zero (or by a negative total)
    safe_total = total.where(total > 0, 1.0)
    raw_pct = pd.Series(np.where(total > 0, non_hlp / safe_total * 100.0, 0.0), index=total.index)

    # Cap percentage at 100%
    non_hlp_pct = raw_pct.clip(lower=0.0, upper=100.0)
    hlp_pct = 100.0 - non_hlp_pct

    out = pd.DataFrame({
        "date": list(dates),
        "total_volume": _round_half_up(total).values,
        "non_hlp_volume": _round_half_up(non_hlp).values,
        "non_hlp_pct": non_hlp_pct.values,
        "hlp_pct": hlp_pct.values,
    })
    out.attrs["clamped_dates"] = [d for d, pct in raw_pct.items() if pct > 100.0]
    return out

def date_bounds(series: pd.DataFrame) -> tuple[str | None, str | None]:
    """(first date, last date) of a daily series; (None, None) when empty."""
    if series is None or series.empty:
        return None, None
    return str(series["date"].iloc[0]), str(series["date"].iloc[-1])
