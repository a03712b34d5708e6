from tools.volume_report import main, render
from hlvol.series import build_daily_volume, empty_series


def test_report_prints_filtered_table(write_volume_files, sample_points, monkeypatch, capsys) -> None:
    base = write_volume_files(*sample_points)
    monkeypatch.setenv("VOLUME_RANGE", "custom")
    monkeypatch.setenv("VOLUME_START", "2024-01-02")
    monkeypatch.setenv("VOLUME_END", "2024-01-02")

    assert main(str(base)) == 0

    out = capsys.readouterr().out
    assert "$2.0M" in out
    assert "100.0%" in out
    assert "[volume_report] 1 of 2 day(s) shown for range 'custom'" in out


def test_report_lists_clamped_dates(write_volume_files, monkeypatch, capsys) -> None:
    base = write_volume_files(
        [{"time": "2024-01-05", "coin": "BTC", "total_volume": 10}],
        [{"time": "2024-01-05", "coin": "BTC", "daily_usd_volume": 50}],
    )
    monkeypatch.delenv("VOLUME_RANGE", raising=False)

    assert main(str(base)) == 0
    assert "capped at 100% on: 2024-01-05" in capsys.readouterr().out


def test_report_load_failure_exits_1(tmp_path, capsys) -> None:
    assert main(str(tmp_path)) == 1
    assert "[volume_report] Load failed" in capsys.readouterr().out


def test_render_formats_columns() -> None:
    view = build_daily_volume(
        [{"time": "2024-01-01", "coin": "BTC", "total_volume": 1_500_000}],
        [{"time": "2024-01-01", "coin": "BTC", "daily_usd_volume": 1_000_000}],
    )
    text = render(view)
    assert "$1.5M" in text and "$500K" in text and "33.3%" in text and "66.7%" in text
    assert render(empty_series()) == "(no rows)"
