# jobs/load.py
from __future__ import annotations
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from pathlib import Path
import json
import os
import requests

from hlvol.series import build_daily_volume, chart_points

# Either an http(s) base URL or a local directory holding the two JSON files
DATA_BASE = os.getenv("VOLUME_DATA_BASE", "data")
FETCH_TIMEOUT = float(os.getenv("VOLUME_FETCH_TIMEOUT", "20") or 20)

TOTAL_VOLUME_JSON = "total_volume.json"
NON_HLP_VOLUME_JSON = "daily_nonhlp_usd_volume.json"

class LoadError(RuntimeError):
    """Either volume resource could not be fetched, parsed or merged."""

def _is_url(base: str) -> bool:
    return str(base).lower().startswith(("http://", "https://"))

def resource_location(base: str, name: str) -> str:
    """Join a resource file name onto a URL or directory base."""
    if _is_url(base):
        return str(base).rstrip("/") + "/" + name
    return str(Path(base) / name)

def fetch_json(location: str, timeout: float = FETCH_TIMEOUT):
    """
    Fetch one JSON document from a URL (requests) or a local path.
    Any network, HTTP status, file or parse failure becomes LoadError.
    """
    try:
        if _is_url(location):
            r = requests.get(location, headers={"Accept": "application/json"}, timeout=timeout)
            r.raise_for_status()
            return r.json()
        return json.loads(Path(location).read_text(encoding="utf-8"))
    except (requests.RequestException, OSError, ValueError) as e:
        raise LoadError(f"Fetch failed for {location}: {e}") from e

def fetch_volume_payloads(base: str = DATA_BASE, timeout: float = FETCH_TIMEOUT) -> tuple[dict, dict]:
    """
    Fetch both volume documents concurrently and join on both.
    The first failure fails the whole load; there is no partial result.
    """
    locations = [
        resource_location(base, TOTAL_VOLUME_JSON),
        resource_location(base, NON_HLP_VOLUME_JSON),
    ]
    pool = ThreadPoolExecutor(max_workers=2)
    try:
        futures = [pool.submit(fetch_json, loc, timeout) for loc in locations]
        done, _ = wait(futures, return_when=FIRST_EXCEPTION)
        for f in futures:
            if f in done and f.exception() is not None:
                raise f.exception()
        total_doc, non_hlp_doc = (f.result() for f in futures)
    finally:
        # an in-flight sibling request is left to finish on its own
        pool.shutdown(wait=False)
    return total_doc, non_hlp_doc

def load_daily_volume(base: str = DATA_BASE, timeout: float = FETCH_TIMEOUT):
    """Fetch both resources and merge them into the daily volume series."""
    total_doc, non_hlp_doc = fetch_volume_payloads(base, timeout)
    try:
        return build_daily_volume(
            chart_points(total_doc, TOTAL_VOLUME_JSON),
            chart_points(non_hlp_doc, NON_HLP_VOLUME_JSON),
        )
    except ValueError as e:
        raise LoadError(f"Malformed volume data from {base}: {e}") from e
