from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .task import Task

"""Processing result models for the task-definition extractor.

ExtractionResult is the outcome of one workbook; BatchResult aggregates the
workbooks of one CLI run. Stats are derived from the task map and are never
authoritative on their own.
"""

__all__ = [
    "SheetStatus",
    "FileStatus",
    "SheetStat",
    "ExtractionStats",
    "ExtractionResult",
    "FileStat",
    "BatchResult",
]


class SheetStatus(Enum):
    """Outcome of one worksheet.

    - EXTRACTED: at least one task emitted
    - EMPTY: structure analyzed but no task could be enumerated
    - SKIPPED: too few rows to hold a task template
    - FAILED: an exception was raised while processing the sheet
    """
    EXTRACTED = "extracted"
    EMPTY = "empty"
    SKIPPED = "skipped"
    FAILED = "failed"


class FileStatus(Enum):
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class SheetStat:
    sheet_name: str
    status: SheetStatus
    task_count: int = 0
    error: str | None = None


@dataclass(frozen=True)
class ExtractionStats:
    """Aggregate counts shown to the user after a successful parse."""
    total_sheets: int
    sheet_names: list[str]
    total_tasks: int
    tasks_by_sheet: dict[str, int]

    @staticmethod
    def from_tasks(sheet_names: list[str], tasks_by_sheet: dict[str, list[Task]]) -> ExtractionStats:
        counts = {name: len(tasks) for name, tasks in tasks_by_sheet.items()}
        return ExtractionStats(
            total_sheets=len(sheet_names),
            sheet_names=list(sheet_names),
            total_tasks=sum(counts.values()),
            tasks_by_sheet=counts,
        )


@dataclass(frozen=True)
class ExtractionResult:
    """Tasks of one workbook keyed by worksheet (sheets without tasks omitted)."""
    file_name: str
    tasks_by_sheet: dict[str, list[Task]]
    stats: ExtractionStats
    sheet_stats: list[SheetStat] = field(default_factory=list)
    start_time: datetime | None = None
    end_time: datetime | None = None
    elapsed_seconds: float = 0.0

    @property
    def all_tasks(self) -> list[Task]:
        return [t for tasks in self.tasks_by_sheet.values() for t in tasks]

    @property
    def failed_sheets(self) -> list[str]:
        return [s.sheet_name for s in self.sheet_stats if s.status is SheetStatus.FAILED]


@dataclass(frozen=True)
class FileStat:
    """Per-workbook line of a batch run."""
    file_name: str
    status: str  # success/failed
    sheets: int  # sheets read from the workbook
    tasks: int
    elapsed_seconds: float
    error: str | None = None


@dataclass(frozen=True)
class BatchResult:
    """Aggregated results of one run over several workbooks."""
    success_files: int
    failed_files: int
    total_sheets: int
    total_tasks: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    results: list[ExtractionResult] = field(default_factory=list)
    file_stats: list[FileStat] | None = None

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files
