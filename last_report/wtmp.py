"""Binary wtmp reader: fixed 384-byte glibc utmp records.

Record layout (little-endian, x86/x86_64 glibc):
  ut_type   int16   + 2 bytes padding
  ut_pid    int32
  ut_line   char[32]
  ut_id     char[4]
  ut_user   char[32]
  ut_host   char[256]
  ut_exit   int16 termination, int16 exit
  ut_session int32
  ut_tv     int32 sec, int32 usec
  ut_addr_v6 char[16]
  unused    char[20]
"""

import logging
import struct
from datetime import datetime, timedelta, timezone

from last_report.records import Record, entry_type

logger = logging.getLogger(__name__)

RECORD_FORMAT = "<hhi32s4s32s256shhiii16s20s"
RECORD_SIZE = struct.calcsize(RECORD_FORMAT)  # 384

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class RecordDecodeError(ValueError):
    """A wtmp file could not be split into whole records."""


def _cstring(raw: bytes) -> str:
    return raw.split(b"\x00", 1)[0].decode("utf-8", errors="replace")


def decode_record(data: bytes) -> Record:
    """Decode exactly one RECORD_SIZE chunk into a Record.

    Raises:
        RecordDecodeError: If data is not exactly RECORD_SIZE bytes.
    """
    if len(data) != RECORD_SIZE:
        raise RecordDecodeError(f"Record must be {RECORD_SIZE} bytes, got {len(data)}")

    (ut_type, _pad, pid, line, ut_id, user, host,
     _term, _exit, _session, tv_sec, tv_usec, _addr, _unused) = struct.unpack(RECORD_FORMAT, data)

    return Record(
        ut_type=entry_type(ut_type),
        pid=pid,
        tty_device=_cstring(line),
        user=_cstring(user),
        host=_cstring(host),
        login_time=EPOCH + timedelta(seconds=tv_sec, microseconds=tv_usec),
        ut_id=_cstring(ut_id),
    )


def pack_record(record: Record) -> bytes:
    """Encode a Record back into the on-disk layout."""
    stamp = record.login_time - EPOCH
    tv_sec = stamp.days * 86400 + stamp.seconds
    return struct.pack(
        RECORD_FORMAT,
        int(record.ut_type), 0, record.pid,
        record.tty_device.encode("utf-8"),
        record.ut_id.encode("utf-8"),
        record.user.encode("utf-8"),
        record.host.encode("utf-8"),
        0, 0, 0,
        tv_sec, stamp.microseconds,
        b"", b"",
    )


def read_records(filepath: str) -> list[Record]:
    """Read every record from a wtmp file, oldest first.

    The whole file is read before decoding so a missing or unreadable
    file fails before any record is produced.

    Raises:
        OSError: If the file cannot be opened or read.
        RecordDecodeError: If the file ends with a partial record.
    """
    with open(filepath, "rb") as f:
        data = f.read()

    if len(data) % RECORD_SIZE:
        offset = len(data) - len(data) % RECORD_SIZE
        raise RecordDecodeError(
            f"{filepath}: truncated record at byte offset {offset} "
            f"({len(data) - offset} of {RECORD_SIZE} bytes)"
        )

    records = [
        decode_record(data[offset:offset + RECORD_SIZE])
        for offset in range(0, len(data), RECORD_SIZE)
    ]
    logger.debug("Read %d record(s) from %s", len(records), filepath)
    return records
