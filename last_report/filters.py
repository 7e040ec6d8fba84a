"""User/event name filter for report events."""

from typing import Callable, Iterable

from last_report.models import ReportEvent


def filter_by_names(event: ReportEvent, names: frozenset[str]) -> bool:
    """True if the event's user or line column matches one of names."""
    return event.user.strip() in names or event.line.strip() in names


def build_user_filter(names: Iterable[str]) -> Callable[[ReportEvent], bool] | None:
    """Build a predicate from user names, or None when no names are given.

    Matching the line column lets "system down" select shutdown entries
    the same way "shutdown" does.
    """
    wanted = frozenset(n.strip() for n in names if n.strip())
    if not wanted:
        return None
    return lambda event: filter_by_names(event, wanted)
