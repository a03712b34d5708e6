# Ensure repo root on sys.path for CI
import sys, pathlib, os
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# tools/volume_report.py
from hlvol.fmt import format_pct, format_usd
from hlvol.ranges import filter_series
from jobs.load import DATA_BASE, FETCH_TIMEOUT, LoadError, load_daily_volume

def render(view) -> str:
    """Text table of a (filtered) daily volume series with display formatting."""
    if view.empty:
        return "(no rows)"
    out = view.copy()
    for c in ("total_volume", "non_hlp_volume"):
        out[c] = out[c].map(format_usd)
    for c in ("non_hlp_pct", "hlp_pct"):
        out[c] = out[c].map(format_pct)
    return out.to_string(index=False)

def main(base: str = DATA_BASE) -> int:
    rng = os.getenv("VOLUME_RANGE", "all")
    start = os.getenv("VOLUME_START") or None
    end = os.getenv("VOLUME_END") or None

    try:
        series = load_daily_volume(base, FETCH_TIMEOUT)
    except LoadError as e:
        print(f"[volume_report] Load failed: {e}")
        return 1

    view = filter_series(series, rng, start=start, end=end)
    print(render(view))
    print(f"[volume_report] {len(view)} of {len(series)} day(s) shown for range '{rng}'")

    clamped = series.attrs.get("clamped_dates", [])
    if clamped:
        print(f"[volume_report] Non-HLP share capped at 100% on: {', '.join(clamped)}")
    return 0

if __name__ == "__main__":
    sys.exit(main())
