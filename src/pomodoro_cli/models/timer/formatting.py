"""Time formatting helpers shared by the state machine, ledger and UI.

Stored clock times are always canonical 24-hour ``HH:MM`` strings. Everything
here is a pure projection used at display or export time.
"""

import math
from datetime import datetime


def to_clock_time(moment: datetime) -> str:
    """Canonical ``HH:MM`` (24-hour) for *moment*."""
    return moment.strftime("%H:%M")


def to_calendar_date(moment: datetime) -> str:
    """Calendar day of *moment* as ``YYYY-MM-DD``."""
    return moment.date().isoformat()


def format_clock_time(value: str, use_24h: bool = True) -> str:
    """Project a stored ``HH:MM`` value for display.

    >>> format_clock_time("13:05", use_24h=False)
    '1:05 PM'
    """
    if use_24h:
        return value

    try:
        hours_str, minutes_str = value.split(":", 1)
        hours = int(hours_str)
        minutes = int(minutes_str)
    except ValueError:
        # Not a clock time we wrote; show it as-is
        return value

    suffix = "PM" if hours >= 12 else "AM"
    display_hours = hours % 12 or 12
    return f"{display_hours}:{minutes:02d} {suffix}"


def format_countdown(seconds: int) -> str:
    """Format remaining seconds as ``MM:SS``; overtime gets a leading ``-``."""
    sign = "-" if seconds < 0 else ""
    seconds = abs(seconds)
    return f"{sign}{seconds // 60:02d}:{seconds % 60:02d}"


def elapsed_focus_minutes(focus_minutes: int, remaining_seconds: int) -> int:
    """Minutes spent in a focus phase, rounded up to the next whole minute."""
    elapsed_seconds = focus_minutes * 60 - remaining_seconds
    return math.ceil(elapsed_seconds / 60)


def format_duration(minutes: float) -> str:
    """Format minutes as hours and minutes."""
    hours = int(minutes // 60)
    mins = int(minutes % 60)
    if hours > 0:
        return f"{hours}h {mins}m"
    return f"{mins}m"
