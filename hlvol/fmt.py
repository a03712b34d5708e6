# hlvol/fmt.py

def format_usd(value) -> str:
    """$1.2M / $350K / $42 style labels for volume axes and tooltips."""
    v = float(value)
    if v >= 1_000_000:
        return f"${v / 1_000_000:.1f}M"
    if v >= 1_000:
        return f"${v / 1_000:.0f}K"
    return f"${v:.0f}"

def format_pct(value) -> str:
    return f"{float(value):.1f}%"
