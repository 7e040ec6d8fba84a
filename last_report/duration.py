"""Session duration arithmetic and the (D+HH:MM) rendering."""

from datetime import datetime, timedelta


def time_delta(earlier: datetime, later: datetime) -> timedelta:
    """Return later - earlier. May be negative for out-of-order logs."""
    return later - earlier


def format_duration(delta: timedelta) -> str:
    """Render a duration as "(HH:MM)" or "(D+HH:MM)", dropping seconds.

    Negative deltas are clamped to zero.
    """
    seconds = max(int(delta.total_seconds()), 0)
    days, seconds = divmod(seconds, 86400)
    hours, seconds = divmod(seconds, 3600)
    minutes = seconds // 60

    if days > 0:
        return f"({days}+{hours:02d}:{minutes:02d})"
    return f"({hours:02d}:{minutes:02d})"
