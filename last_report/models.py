"""Report event model — what the reconstructor emits and the formatter renders."""

from dataclasses import dataclass
from datetime import datetime, timedelta

from last_report.records import RecordKind

STILL_LOGGED_IN = " - still logged in"
STILL_RUNNING = " - still running"
DOWN = "down"
CRASH = "crash"


@dataclass(frozen=True)
class EndState:
    marker: str | None = None          # literal status, e.g. "crash"
    ended_at: datetime | None = None   # rendered as a clock time when marker is None
    duration: timedelta | None = None  # None for still-open sessions


@dataclass(frozen=True)
class ReportEvent:
    user: str
    line: str
    host: str
    started_at: datetime
    end: EndState
    kind: RecordKind
