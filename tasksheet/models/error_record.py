from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for error logging.

Structured record written as one JSON line per sheet/file failure. column=-1
is the sentinel for failures that are not tied to a specific task column
(sheet-level or file-level errors).
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: workbook filename being processed
        sheet: worksheet name ("<FILE_LEVEL>" when the workbook itself failed)
        column: 0-based column index, or -1 when unknown
        error_type: error classification in UPPER_SNAKE_CASE format
        message: exception message or description
    """
    timestamp: str  # ISO8601 UTC
    file: str
    sheet: str
    column: int  # 列号, 未知时为 -1
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, sheet: str, column: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            sheet=sheet,
            column=column,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        # dataclass -> dict; keys are fixed by the dataclass fields
        return json.dumps(asdict(self), ensure_ascii=False)
