from __future__ import annotations

import json
import re
from pathlib import Path

from xlsxrows.excel.parser import parse_workbook
from xlsxrows.logging.error_log import ErrorLogBuffer

"""Error log contract: one JSON object per line with a fixed key set."""

EXPECTED_KEYS = {"timestamp", "file", "sheet", "stage", "error_type", "message"}
TIMESTAMP = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?Z$")
UPPER_SNAKE = re.compile(r"^[A-Z]+(_[A-Z]+)*$")


def test_error_log_lines_follow_contract(workbook_1: Path, temp_workdir: Path):
    buffer = ErrorLogBuffer(temp_workdir / "logs")
    buffer.extend(parse_workbook("data/absent.xlsx").failures)
    buffer.extend(parse_workbook(workbook_1, sheet=5).failures)
    path = buffer.flush()

    assert path is not None
    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    for line in lines:
        record = json.loads(line)
        assert set(record) == EXPECTED_KEYS
        assert TIMESTAMP.match(record["timestamp"])
        assert UPPER_SNAKE.match(record["error_type"])
        assert isinstance(record["sheet"], int)

    second = json.loads(lines[1])
    assert second["stage"] == "load"
    assert second["sheet"] == 5
    assert second["message"] == "Cannot find worksheet: 5"
