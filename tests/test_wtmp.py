"""Tests for last_report/wtmp.py — record layout, decoding, file reading."""

import struct
from datetime import timedelta

import pytest

from last_report.records import EntryType, Record, RecordKind
from last_report.wtmp import (
    EPOCH,
    RECORD_FORMAT,
    RECORD_SIZE,
    RecordDecodeError,
    decode_record,
    pack_record,
    read_records,
)

from factories import at, login, logout, reboot


# ── Layout ────────────────────────────────────────────────────────


class TestLayout:
    def test_record_size_is_384(self):
        assert RECORD_SIZE == 384

    def test_format_packs_to_record_size(self):
        packed = struct.pack(RECORD_FORMAT, 7, 0, 1, b"", b"", b"", b"",
                             0, 0, 0, 0, 0, b"", b"")
        assert len(packed) == RECORD_SIZE


# ── Decoding ──────────────────────────────────────────────────────


def _raw(ut_type=7, pid=4242, line=b"pts/3", ut_id=b"ts/3", user=b"bob",
         host=b"192.168.1.20", tv_sec=1_700_000_000, tv_usec=250_000):
    return struct.pack(RECORD_FORMAT, ut_type, 0, pid, line, ut_id, user, host,
                       0, 0, 0, tv_sec, tv_usec, b"", b"")


class TestDecodeRecord:
    def test_fields(self):
        rec = decode_record(_raw())
        assert rec.ut_type is EntryType.USER_PROCESS
        assert rec.pid == 4242
        assert rec.tty_device == "pts/3"
        assert rec.ut_id == "ts/3"
        assert rec.user == "bob"
        assert rec.host == "192.168.1.20"
        assert rec.kind is RecordKind.USER_SESSION

    def test_login_time_is_utc_with_microseconds(self):
        rec = decode_record(_raw(tv_sec=86400, tv_usec=500))
        assert rec.login_time == EPOCH + timedelta(days=1, microseconds=500)
        assert rec.login_time.utcoffset() == timedelta(0)

    def test_strings_cut_at_first_nul(self):
        rec = decode_record(_raw(user=b"carol\x00garbage"))
        assert rec.user == "carol"

    def test_invalid_utf8_replaced(self):
        rec = decode_record(_raw(host=b"h\xffst"))
        assert rec.host == "h�st"

    def test_unknown_type_kept(self):
        rec = decode_record(_raw(ut_type=77))
        assert rec.ut_type == 77
        assert rec.kind is RecordKind.OTHER

    def test_wrong_size_raises(self):
        with pytest.raises(RecordDecodeError):
            decode_record(b"\x00" * 10)

    def test_decode_error_is_value_error(self):
        assert issubclass(RecordDecodeError, ValueError)


class TestPackRecord:
    def test_packed_size(self):
        assert len(pack_record(login("alice", "tty1", 0))) == RECORD_SIZE

    def test_decodes_back_to_same_record(self):
        rec = Record(EntryType.RUN_LVL, 259, "~", "runlevel", "6.1.0",
                     at(0) + timedelta(microseconds=123), ut_id="~~")
        assert decode_record(pack_record(rec)) == rec


# ── File reading ──────────────────────────────────────────────────


class TestReadRecords:
    def test_reads_in_log_order(self, write_wtmp):
        recs = [login("alice", "tty1", 0), logout("tty1", 30), reboot(60)]
        path = write_wtmp(recs)

        result = read_records(path)
        assert result == recs

    def test_empty_file(self, write_wtmp):
        assert read_records(write_wtmp([])) == []

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_records(str(tmp_path / "nope"))

    def test_truncated_file_raises(self, tmp_path):
        path = tmp_path / "wtmp"
        path.write_bytes(pack_record(reboot(0)) + b"\x00" * 100)

        with pytest.raises(RecordDecodeError) as excinfo:
            read_records(str(path))
        assert "offset 384" in str(excinfo.value)

    def test_returns_list(self, write_wtmp):
        assert isinstance(read_records(write_wtmp([reboot(0)])), list)
