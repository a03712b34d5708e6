import pytest

from hlvol.fmt import format_pct, format_usd


@pytest.mark.parametrize(
    "value,expected",
    [
        (2_345_678_901, "$2345.7M"),
        (1_500_000, "$1.5M"),
        (1_000_000, "$1.0M"),
        (350_400, "$350K"),
        (1_000, "$1K"),
        (999, "$999"),
        (0, "$0"),
    ],
)
def test_format_usd(value, expected) -> None:
    assert format_usd(value) == expected


def test_format_pct() -> None:
    assert format_pct(20) == "20.0%"
    assert format_pct(33.3333) == "33.3%"
    assert format_pct(100.0) == "100.0%"
