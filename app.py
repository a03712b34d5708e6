# stdlib
import os
from datetime import date, datetime, timezone

# third-party
import pandas as pd
import streamlit as st
import altair as alt

from hlvol.fmt import format_pct, format_usd
from hlvol.ranges import DateRange, filter_series
from hlvol.series import date_bounds, empty_series
from jobs.load import DATA_BASE, FETCH_TIMEOUT, LoadError, load_daily_volume

def _setting(name: str, default: str) -> str:
    """Environment first, then .streamlit/secrets.toml, then the default."""
    val = os.getenv(name)
    if val:
        return val.strip()
    try:
        return str(st.secrets.get(name, default)).strip()
    except Exception:
        # no secrets.toml at all
        return default

BASE = _setting("VOLUME_DATA_BASE", DATA_BASE)
TIMEOUT = float(_setting("VOLUME_FETCH_TIMEOUT", str(FETCH_TIMEOUT)))

st.set_page_config(page_title="Daily Volume Analysis", layout="wide")

# ---------- LOAD (once per session) ----------
def _load_into_session():
    """
    Fetch + merge both volume files. A failed load is printed and leaves an
    empty series behind (the page then just shows no charts).
    """
    try:
        with st.spinner("Loading..."):
            series = load_daily_volume(BASE, TIMEOUT)
    except LoadError as e:
        print(f"[load] Error fetching data: {e}")
        series = empty_series()
    st.session_state["volume_series"] = series
    st.session_state["loaded_at"] = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")

    first, last = date_bounds(series)
    if first is not None:
        st.session_state["custom_start"] = date.fromisoformat(first)
        st.session_state["custom_end"] = date.fromisoformat(last)

if "volume_series" not in st.session_state:
    _load_into_session()

series = st.session_state["volume_series"]
first_date, last_date = date_bounds(series)

clamped = series.attrs.get("clamped_dates", [])
if clamped:
    st.sidebar.warning(
        f"Non-HLP volume exceeded total on {len(clamped)} day(s); share capped at 100%: "
        + ", ".join(clamped[:10]) + (" ..." if len(clamped) > 10 else "")
    )
# ---------- /LOAD ----------

@st.cache_data
def project(series: pd.DataFrame, selection: str, today_key: str, start, end) -> pd.DataFrame:
    """Filtered view; cached per (selection, today, bounds)."""
    return filter_series(series, selection, now=date.fromisoformat(today_key), start=start, end=end)

def _volume_chart(view: pd.DataFrame):
    plot = view.rename(columns={"total_volume": "Total Volume", "non_hlp_volume": "Non-HLP Volume"})
    plot = plot.melt(
        id_vars=["date"],
        value_vars=["Total Volume", "Non-HLP Volume"],
        var_name="series",
        value_name="volume",
    )
    plot["date"] = pd.to_datetime(plot["date"], errors="coerce")
    plot["label"] = plot["volume"].map(format_usd)

    return (
        alt.Chart(plot)
        .mark_line()
        .encode(
            x=alt.X("date:T", title=""),
            y=alt.Y("volume:Q", title="", axis=alt.Axis(format="$.2s")),
            color=alt.Color(
                "series:N",
                scale=alt.Scale(domain=["Total Volume", "Non-HLP Volume"], range=["#8884d8", "#82ca9d"]),
                legend=alt.Legend(title=None, orient="bottom"),
            ),
            tooltip=[
                alt.Tooltip("date:T", title="Date"),
                alt.Tooltip("series:N", title="Series"),
                alt.Tooltip("label:N", title="Volume"),
            ],
        )
        .properties(height=500)
    )

def _pct_chart(view: pd.DataFrame, col: str, name: str, color: str):
    plot = view[["date", col]].copy()
    plot["date"] = pd.to_datetime(plot["date"], errors="coerce")
    plot["label"] = plot[col].map(format_pct)
    plot["series"] = name

    return (
        alt.Chart(plot)
        .mark_line(color=color)
        .encode(
            x=alt.X("date:T", title=""),
            y=alt.Y(
                f"{col}:Q",
                title="",
                scale=alt.Scale(domain=[0, 100], nice=False),
                axis=alt.Axis(values=[0, 20, 40, 60, 80, 100], labelExpr="datum.value + '%'"),
            ),
            tooltip=[
                alt.Tooltip("date:T", title="Date"),
                alt.Tooltip("series:N", title="Series"),
                alt.Tooltip("label:N", title="Share"),
            ],
        )
        .properties(height=400)
    )

st.title("Daily Volume Analysis")

# ---------- RANGE CONTROLS ----------
selection = st.radio(
    "Date range",
    options=[r.value for r in DateRange],
    format_func=lambda v: DateRange(v).label,
    horizontal=True,
    key="date_range",
    label_visibility="collapsed",
)

start = end = None
if selection == DateRange.CUSTOM.value and first_date is not None:
    lo, hi = date.fromisoformat(first_date), date.fromisoformat(last_date)
    c1, c2 = st.columns(2)
    with c1:
        start = st.date_input("From:", min_value=lo, max_value=hi, key="custom_start")
    with c2:
        end = st.date_input("To:", min_value=lo, max_value=hi, key="custom_end")

# "now" is read on every rerun, only the projection is cached
today_key = datetime.now(timezone.utc).date().isoformat()
view = project(
    series,
    selection,
    today_key,
    start.isoformat() if start else None,
    end.isoformat() if end else None,
)

st.caption(f"{len(view)} day(s) shown · loaded {st.session_state.get('loaded_at', 'unknown')}")

if view.empty:
    st.info("No volume data for the selected range.")
    st.stop()

st.subheader("Volume Comparison")
st.altair_chart(_volume_chart(view), use_container_width=True)

st.subheader("Non-HLP Volume as % of Total Volume")
st.altair_chart(_pct_chart(view, "non_hlp_pct", "Non-HLP Volume / Total Volume", "#ff7300"), use_container_width=True)

st.subheader("HLP Volume as % of Total Volume")
st.altair_chart(_pct_chart(view, "hlp_pct", "HLP Volume / Total Volume", "#8b5cf6"), use_container_width=True)
