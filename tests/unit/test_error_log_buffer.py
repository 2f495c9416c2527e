from __future__ import annotations

import json
from pathlib import Path

from gridcalc.logging.error_log import ErrorLogBuffer, ErrorRecord

KEYS = {"timestamp", "file", "row", "column", "cell", "error_type", "message"}


def test_error_record_creation_and_json_line():
    rec = ErrorRecord.create(
        file="grid.txt",
        row=2,
        column=3,
        cell="C2",
        error_type="CIRCULAR_REFERENCE",
        message="C2 -> A1 -> C2",
    )
    data = json.loads(rec.to_json_line())
    assert data["file"] == "grid.txt"
    assert data["row"] == 2
    assert data["column"] == 3
    assert data["cell"] == "C2"
    assert data["error_type"] == "CIRCULAR_REFERENCE"
    assert data["timestamp"].endswith("Z")
    assert set(data.keys()) == KEYS


def test_error_log_buffer_flush(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path / "logs")
    buf.append(ErrorRecord.create("g.txt", 1, 1, "A1", "MALFORMED", "unclosed '('"))
    buf.append(ErrorRecord.create("g.txt", 1, 2, "B1", "UNKNOWN_FUNCTION", "FOO"))
    path = buf.flush()
    assert path is not None and path.exists()
    assert path.parent == tmp_path / "logs"
    assert path.name.startswith("errors-") and path.suffix == ".log"
    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    for raw in lines:
        assert set(json.loads(raw).keys()) == KEYS
    assert len(buf) == 0


def test_error_log_buffer_multiple_flushes(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path)
    buf.append(ErrorRecord.create("g.txt", 1, 1, "A1", "MALFORMED", "x"))
    path = buf.flush()
    size1 = path.stat().st_size
    buf.append(ErrorRecord.create("g.txt", 2, 1, "A2", "MALFORMED", "y"))
    path2 = buf.flush()
    assert path == path2
    assert path2.stat().st_size > size1


def test_flush_without_records_writes_nothing(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path / "logs")
    assert buf.flush() is None
    assert not (tmp_path / "logs").exists()
