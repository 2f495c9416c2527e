from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the failed-cell log.

One record per cell that ended in FAILED state. Records are written as JSON
Lines with a fixed key set (no extra keys). Row and column are 1-based so
they match what a user sees in the source file.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Grid file name being evaluated
        row: Row number (1-based)
        column: Column number (1-based)
        cell: A1-style cell address
        error_type: Error kind in UPPER_SNAKE_CASE format
        message: Diagnostic detail
    """
    timestamp: str  # ISO8601 UTC
    file: str
    row: int
    column: int
    cell: str
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, row: int, column: int, cell: str, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            row=row,
            column=column,
            cell=cell,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        """Serialize to one JSON line without extra keys."""
        return json.dumps(asdict(self), ensure_ascii=False)
