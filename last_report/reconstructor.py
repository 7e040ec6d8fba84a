"""Session reconstruction — replay wtmp records newest-first and resolve end states.

The log is append-only (oldest first) but the report reads newest first.
Walking the records backwards means every logout, reboot and shutdown that
closes a session has already been seen by the time the session's login
record is reached.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterable, Iterator

from last_report.duration import time_delta
from last_report.formatter import LineFormatter
from last_report.models import (
    CRASH,
    DOWN,
    STILL_LOGGED_IN,
    STILL_RUNNING,
    EndState,
    ReportEvent,
)
from last_report.records import (
    REBOOT_USER,
    RUN_LEVEL_USER,
    SHUTDOWN_USER,
    Record,
    RecordKind,
)

logger = logging.getLogger(__name__)


@dataclass
class ReplayState:
    """Mutable state for a single replay; never shared between runs."""

    last_reboot: Record | None = None
    last_shutdown: Record | None = None
    pending_dead: dict[str, list[Record]] = field(default_factory=dict)

    def push_dead(self, record: Record) -> None:
        self.pending_dead.setdefault(record.tty_device, []).append(record)

    def pop_dead(self, tty_device: str) -> Record | None:
        """Take the most recently pushed dead record for tty_device.

        In a backwards walk that is the logout nearest in time after the
        login being resolved.
        """
        stack = self.pending_dead.get(tty_device)
        if not stack:
            return None
        dead = stack.pop()
        if not stack:
            del self.pending_dead[tty_device]
        return dead


class SessionReconstructor:
    """Turn an oldest-first record sequence into newest-first report events."""

    def __init__(
        self,
        formatter: LineFormatter | None = None,
        show_system_events: bool = False,
        user_filter: Callable[[ReportEvent], bool] | None = None,
    ):
        self.formatter = formatter or LineFormatter()
        self.show_system_events = show_system_events
        self.user_filter = user_filter

    def run(self, records: Iterable[Record]) -> list[str]:
        """Replay records and return the rendered report lines."""
        return [self.formatter.render(event) for event in self.replay(records)]

    def replay(self, records: Iterable[Record]) -> Iterator[ReportEvent]:
        """Yield report events, newest first."""
        stack = list(records)
        state = ReplayState()
        emitted = 0

        for index in range(len(stack) - 1, -1, -1):
            event = self._dispatch(stack[index], state)
            if event is None:
                continue
            if self.user_filter is not None and not self.user_filter(event):
                continue
            emitted += 1
            yield event

        logger.debug(
            "Replayed %d record(s), emitted %d event(s), %d unmatched logout(s)",
            len(stack), emitted, sum(len(v) for v in state.pending_dead.values()),
        )

    def _dispatch(self, record: Record, state: ReplayState) -> ReportEvent | None:
        kind = record.kind

        if kind is RecordKind.DEAD_PROCESS:
            state.push_dead(record)
            return None

        if kind is RecordKind.USER_SESSION:
            dead = state.pop_dead(record.tty_device)
            return self._event(record, record.user, record.tty_device,
                               resolve_end_state(record, state, dead))

        if kind is RecordKind.RUN_LEVEL:
            if not self.show_system_events:
                return None
            return self._event(record, RUN_LEVEL_USER, f"(to lvl {record.run_level})",
                               resolve_end_state(record, state))

        if kind is RecordKind.SHUTDOWN:
            event = None
            if self.show_system_events:
                event = self._event(record, SHUTDOWN_USER, "system down",
                                    resolve_end_state(record, state))
            state.last_shutdown = record
            return event

        if kind is RecordKind.REBOOT:
            event = self._event(record, REBOOT_USER, "system boot",
                                resolve_end_state(record, state))
            state.last_reboot = record
            return event

        return None

    @staticmethod
    def _event(record: Record, user: str, line: str, end: EndState) -> ReportEvent:
        return ReportEvent(
            user=user,
            line=line,
            host=record.host,
            started_at=record.login_time,
            end=end,
            kind=record.kind,
        )


def _closed(record: Record, ended_at: datetime, marker: str | None) -> EndState:
    delta = time_delta(record.login_time, ended_at)
    if delta.total_seconds() < 0:
        logger.warning(
            "End time %s precedes start %s for %r on %r; clamping duration",
            ended_at.isoformat(), record.login_time.isoformat(),
            record.user, record.tty_device,
        )
    return EndState(marker=marker, ended_at=ended_at, duration=delta)


def resolve_end_state(record: Record, state: ReplayState, dead: Record | None = None) -> EndState:
    """Work out how and when the session opened by record ended.

    A matched logout wins. Otherwise the nearest later reboot or shutdown
    decides: a shutdown strictly before the reboot means the system went
    down cleanly, anything else (no shutdown, or a reboot at or before it)
    means the session was lost to a crash. Reboot wins ties.
    """
    is_user = record.kind is RecordKind.USER_SESSION

    if dead is not None:
        return _closed(record, dead.login_time, None)

    if state.last_reboot is None and state.last_shutdown is None:
        return EndState(marker=STILL_LOGGED_IN if is_user else STILL_RUNNING)

    reboot_time = state.last_reboot.login_time if state.last_reboot else None
    shutdown_time = state.last_shutdown.login_time if state.last_shutdown else None

    if shutdown_time is not None and (reboot_time is None or shutdown_time < reboot_time):
        return _closed(record, shutdown_time, DOWN if is_user else None)
    return _closed(record, reboot_time, CRASH if is_user else None)
