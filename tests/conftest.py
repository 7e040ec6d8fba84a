"""Shared pytest fixtures for the last-report test suite."""

from __future__ import annotations

import pytest

from last_report.formatter import LineFormatter
from last_report.records import Record
from last_report.wtmp import pack_record


@pytest.fixture()
def utc_formatter() -> LineFormatter:
    """Short-format formatter that renders in UTC so output is deterministic."""
    return LineFormatter(time_format="short", utc=True)


@pytest.fixture()
def write_wtmp(tmp_path):
    """Write records to a wtmp file under tmp_path and return its path."""

    def _write(recs: list[Record], name: str = "wtmp") -> str:
        path = tmp_path / name
        path.write_bytes(b"".join(pack_record(r) for r in recs))
        return str(path)

    return _write
