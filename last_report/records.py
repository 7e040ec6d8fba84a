"""Login-accounting record model — frozen dataclass + classification."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, IntEnum

RUN_LEVEL_USER = "runlevel"
SHUTDOWN_USER = "shutdown"
REBOOT_USER = "reboot"


class EntryType(IntEnum):
    EMPTY = 0
    RUN_LVL = 1
    BOOT_TIME = 2
    NEW_TIME = 3
    OLD_TIME = 4
    INIT_PROCESS = 5
    LOGIN_PROCESS = 6
    USER_PROCESS = 7
    DEAD_PROCESS = 8
    ACCOUNTING = 9


class RecordKind(Enum):
    USER_SESSION = "user-session"
    RUN_LEVEL = "run-level"
    SHUTDOWN = "shutdown"
    REBOOT = "reboot"
    DEAD_PROCESS = "dead-process"
    OTHER = "other"


@dataclass(frozen=True)
class Record:
    ut_type: int
    pid: int
    tty_device: str
    user: str
    host: str
    login_time: datetime
    ut_id: str = ""

    @property
    def kind(self) -> RecordKind:
        return classify(self)

    @property
    def run_level(self) -> str:
        """Target run level encoded in the low byte of pid."""
        level = self.pid % 256
        # 0-9 are stored as raw numbers, anything else as an ASCII character
        if level < 10:
            return str(level)
        return chr(level)


def entry_type(value: int) -> int:
    """Map a raw ut_type to EntryType, keeping unknown values as plain ints."""
    try:
        return EntryType(value)
    except ValueError:
        return value


def classify(record: Record) -> RecordKind:
    """Classify a decoded record. Never raises; unknown shapes are OTHER."""
    if record.ut_type == EntryType.USER_PROCESS and record.user and record.tty_device:
        return RecordKind.USER_SESSION
    if record.user == RUN_LEVEL_USER:
        return RecordKind.RUN_LEVEL
    if record.user == SHUTDOWN_USER:
        return RecordKind.SHUTDOWN
    if record.user == REBOOT_USER:
        return RecordKind.REBOOT
    if record.user == "":
        return RecordKind.DEAD_PROCESS
    return RecordKind.OTHER
