# hlvol/ranges.py

from __future__ import annotations
from datetime import date, datetime, timedelta, timezone
from enum import Enum
import pandas as pd

class DateRange(str, Enum):
    ALL = "all"
    LAST_7D = "7d"
    LAST_30D = "30d"
    LAST_90D = "90d"
    LAST_1Y = "1y"
    CUSTOM = "custom"

    @property
    def days(self) -> int | None:
        return _WINDOW_DAYS.get(self)

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def parse(cls, value) -> "DateRange":
        if isinstance(value, cls):
            return value
        key = str(value or "").strip().lower()
        for r in cls:
            if r.value == key:
                return r
        raise ValueError(f"Unknown date range {value!r}. Expected one of: {[r.value for r in cls]}")

_WINDOW_DAYS = {
    DateRange.LAST_7D: 7,
    DateRange.LAST_30D: 30,
    DateRange.LAST_90D: 90,
    DateRange.LAST_1Y: 365,
}

_LABELS = {
    DateRange.ALL: "All Time",
    DateRange.LAST_7D: "7 Days",
    DateRange.LAST_30D: "30 Days",
    DateRange.LAST_90D: "90 Days",
    DateRange.LAST_1Y: "1 Year",
    DateRange.CUSTOM: "Custom",
}

def _as_key(d) -> str | None:
    """None/'' -> None; date/datetime -> 'YYYY-MM-DD'; strings pass through."""
    if d is None or d == "":
        return None
    if isinstance(d, datetime):
        return d.date().isoformat()
    if isinstance(d, date):
        return d.isoformat()
    return str(d)

def cutoff_date(days: int, now=None) -> str:
    """Calendar date exactly `days` before `now` (UTC now if not given)."""
    if now is None:
        now = datetime.now(timezone.utc)
    today = now.date() if isinstance(now, datetime) else now
    return (today - timedelta(days=days)).isoformat()

def filter_series(series: pd.DataFrame, selection, now=None, start=None, end=None) -> pd.DataFrame:
    """
    Narrow a daily series to a date window. Never mutates `series`.
      all          -> everything
      7d/30d/90d/1y -> date >= now - N days (inclusive, calendar dates)
      custom       -> start <= date <= end (inclusive, YYYY-MM-DD strings);
                      no filtering if either bound is unset
    """
    rng = DateRange.parse(selection)
    if rng is DateRange.ALL or series.empty:
        return series.copy()

    dates = series["date"].astype(str)

    if rng is DateRange.CUSTOM:
        lo, hi = _as_key(start), _as_key(end)
        if lo is None or hi is None:
            return series.copy()
        mask = (dates >= lo) & (dates <= hi)
    else:
        mask = dates >= cutoff_date(rng.days, now)

    return series.loc[mask].reset_index(drop=True)
