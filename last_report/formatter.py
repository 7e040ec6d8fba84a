"""Fixed-width report lines with C-locale timestamps."""

from datetime import datetime

from last_report.duration import format_duration
from last_report.models import ReportEvent

MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
          "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def _short(ts: datetime) -> str:
    # %b %e %H:%M
    return f"{MONTHS[ts.month - 1]} {ts.day:>2} {ts.hour:02d}:{ts.minute:02d}"


def _clock(ts: datetime) -> str:
    return f"{ts.hour:02d}:{ts.minute:02d}"


def _full(ts: datetime) -> str:
    # %a %b %e %H:%M:%S %Y
    return (f"{WEEKDAYS[ts.weekday()]} {MONTHS[ts.month - 1]} {ts.day:>2} "
            f"{ts.hour:02d}:{ts.minute:02d}:{ts.second:02d} {ts.year}")


def _iso(ts: datetime) -> str:
    return ts.replace(microsecond=0).isoformat()


def _notime(ts: datetime) -> str:
    return ""


# name -> (start renderer, end renderer, start column width)
TIME_FORMATS = {
    "short": (_short, _clock, 12),
    "full": (_full, _full, 24),
    "iso": (_iso, _iso, 25),
    "notime": (_notime, _notime, 0),
}


class LineFormatter:
    """Render ReportEvents as last(1)-style columns.

    Columns: user (8), line (12), host (16, truncated), start time,
    " - " end marker (8), duration centered in 6. Trailing
    whitespace is trimmed.
    """

    def __init__(self, time_format: str = "short", utc: bool = False):
        if time_format not in TIME_FORMATS:
            raise ValueError(
                f"Unknown time format: {time_format!r} "
                f"(expected one of {', '.join(TIME_FORMATS)})"
            )
        self.time_format = time_format
        self.utc = utc
        self._start, self._end, self._start_width = TIME_FORMATS[time_format]

    def _localize(self, ts: datetime) -> datetime:
        return ts if self.utc else ts.astimezone()

    def format_start(self, ts: datetime) -> str:
        return self._start(self._localize(ts))

    def format_end(self, ts: datetime) -> str:
        return self._end(self._localize(ts))

    def render(self, event: ReportEvent) -> str:
        end = event.end
        if end.marker is not None:
            end_text = end.marker
        elif end.ended_at is not None:
            end_text = self.format_end(end.ended_at)
        else:
            end_text = ""
        duration = format_duration(end.duration) if end.duration is not None else ""

        line = (
            f"{event.user:<8}"
            f" {event.line:<12}"
            f" {event.host[:16]:<16}"
            f" {self.format_start(event.started_at):<{self._start_width}}"
            f" - {end_text:<8}"
            f" {duration:^6}"
        )
        return line.rstrip()
