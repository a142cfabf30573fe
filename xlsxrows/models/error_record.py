from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for structured error logging.

Each failed parse stage produces one ErrorRecord. The human-readable
``message`` is what ``Parser.errors`` exposes; the full record is what the
error log writes as JSON Lines.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Workbook path being parsed ("" when no file was given)
        sheet: 1-based worksheet number
        stage: Parse stage that failed (see ParseStage)
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Human-readable description
    """
    timestamp: str  # ISO8601 UTC
    file: str
    sheet: int
    stage: str
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, sheet: int, stage: str, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            sheet=sheet,
            stage=stage,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        """Serialize to a single JSON line with exactly the dataclass keys."""
        return json.dumps(asdict(self), ensure_ascii=False)
