"""
Tick and duration formatting.

Times are shown as minutes and seconds only. Long matches keep counting
minutes past 59 ("75:00") instead of gaining an hour field.
"""


def format_clock(seconds: float) -> str:
    """Seconds as "MM:SS", floored, without an hour field."""
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes:02d}:{secs:02d}"


def format_tick(tick: int, interval: float | None = None) -> str:
    """
    Convert a tick count into a clock string.

    Args:
        tick: Non-negative tick count
        interval: Seconds per tick. None or non-positive means the tick is
            shown as-is.

    Returns:
        "MM:SS" (both fields zero-padded to at least 2 digits), or the decimal
        tick when no usable interval is known
    """
    if interval is None or interval <= 0:
        return str(tick)
    return format_clock(tick * interval)


def format_duration(seconds: float) -> str:
    """Header duration as "{m}m {s}s"."""
    seconds = max(0.0, seconds)
    return f"{int(seconds // 60)}m {int(seconds % 60)}s"
