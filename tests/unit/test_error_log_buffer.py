from __future__ import annotations

import json
import re
from pathlib import Path

from ledger_import.logging.error_log import ErrorLogBuffer, ErrorRecord

KEYS = {"timestamp", "file", "entity", "row", "error_type", "message"}


def test_error_record_creation_and_json_line():
    rec = ErrorRecord.create(
        file="clients.csv",
        entity="clients",
        row=10,
        error_type="INSERT_FAILED",
        message="duplicate key",
    )
    data = json.loads(rec.to_json_line())
    assert data["file"] == "clients.csv"
    assert data["entity"] == "clients"
    assert data["row"] == 10
    assert data["error_type"] == "INSERT_FAILED"
    assert data["timestamp"].endswith("Z")
    assert set(data.keys()) == KEYS


def test_json_line_keeps_non_ascii():
    rec = ErrorRecord.create("items.csv", "items", 1, "VALIDATION_ERROR", "Missing required fields: 名前")
    assert "名前" in rec.to_json_line()


def test_error_log_buffer_flush(temp_workdir: Path):
    buf = ErrorLogBuffer()
    buf.append(ErrorRecord.create("c.csv", "clients", 1, "VALIDATION_ERROR", "Missing required fields: name"))
    buf.append(ErrorRecord.create("c.csv", "clients", 2, "INSERT_FAILED", "duplicate key"))
    path = buf.flush()
    assert path is not None and path.exists()
    assert path.parent.resolve() == (temp_workdir / "logs").resolve()
    assert re.fullmatch(r"errors-\d{8}-\d{6}\.log", path.name)
    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    for raw in lines:
        assert set(json.loads(raw).keys()) == KEYS
    # buffer cleared after flush
    assert len(buf) == 0


def test_flush_appends_to_same_file(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path / "nested" / "logs")
    buf.append(ErrorRecord.create("c.csv", "clients", 1, "INSERT_FAILED", "a"))
    first = buf.flush()
    buf.append(ErrorRecord.create("c.csv", "clients", 2, "INSERT_FAILED", "b"))
    second = buf.flush()
    assert first == second
    assert len(second.read_text(encoding="utf-8").splitlines()) == 2


def test_empty_flush_writes_nothing(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path / "logs")
    assert buf.flush() is None
    assert not (tmp_path / "logs").exists()


def test_records_is_a_copy(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path)
    buf.append(ErrorRecord.create("c.csv", "clients", -1, "FILE_PARSE_ERROR", "File is empty"))
    buf.records.clear()
    assert len(buf) == 1
