from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the task-definition extractor.

Separate from the YAML loader in tasksheet/config/loader.py; these only carry
typed, defaulted settings through the pipeline.
"""

__all__ = [
    "EXPORT_FORMATS",
    "DEFAULT_TASK_NUMBER",
    "DEFAULT_MIN_SHEET_ROWS",
    "ExtractConfig",
]

EXPORT_FORMATS = ("json", "ini", "template")

# Task number used when a single-task sheet has no 任务号 row. It is the value
# the common concentrator template ships with; kept as a named default.
DEFAULT_TASK_NUMBER = 45

# Sheets shorter than this cannot hold a task template and are skipped.
DEFAULT_MIN_SHEET_ROWS = 10


@dataclass(frozen=True)
class ExtractConfig:
    """Root configuration object for an extraction run."""
    source_directory: str  # Directory scanned for .xlsx when no path is given
    output_directory: str  # Where exports are written
    formats: tuple[str, ...] = EXPORT_FORMATS
    min_sheet_rows: int = DEFAULT_MIN_SHEET_ROWS
    default_task_number: int = DEFAULT_TASK_NUMBER
    logs_directory: str = "./logs"
    target_sheets: frozenset[str] | None = field(default=None)  # None -> all sheets
