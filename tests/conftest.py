"""Shared test fixtures."""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest


def _point(time: str, coin: str, **values) -> dict:
    return {"time": time, "coin": coin, **values}


@pytest.fixture
def write_volume_files(tmp_path):
    """Write total_volume.json / daily_nonhlp_usd_volume.json into tmp_path; returns the directory."""

    def _write(total_points, non_hlp_points) -> Path:
        (tmp_path / "total_volume.json").write_text(
            json.dumps({"chart_data": total_points}), encoding="utf-8"
        )
        (tmp_path / "daily_nonhlp_usd_volume.json").write_text(
            json.dumps({"chart_data": non_hlp_points}), encoding="utf-8"
        )
        return tmp_path

    return _write


@pytest.fixture
def sample_points() -> tuple[list[dict], list[dict]]:
    """Two days of BTC/ETH volume; 2024-01-02 has no non-HLP data."""
    total = [
        _point("2024-01-01T00:00:00", "BTC", total_volume=1_000_000),
        _point("2024-01-01T00:00:00", "ETH", total_volume=500_000),
        _point("2024-01-02T00:00:00", "BTC", total_volume=2_000_000),
    ]
    non_hlp = [
        _point("2024-01-01T00:00:00", "BTC", daily_usd_volume=1_200_000),
        _point("2024-01-01T00:00:00", "ETH", daily_usd_volume=300_000),
    ]
    return total, non_hlp
