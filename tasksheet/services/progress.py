from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

from ..models.processing_result import FileStat, FileStatus, SheetStat, SheetStatus

"""Progress display with tqdm (TTY only).

One tqdm bar over the workbooks of a run, with running success/failed/task
totals as postfix, plus one status line per worksheet. Both are silent when
stdout is not a TTY.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
    "SheetProgressIndicator",
]

_SHEET_MARKS = {
    SheetStatus.EXTRACTED: "✓",
    SheetStatus.EMPTY: "- no tasks",
    SheetStatus.SKIPPED: "- skipped",
    SheetStatus.FAILED: "✗",
}


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    """Workbook-level bar; ``finish_file`` folds each FileStat into the totals shown."""

    def __init__(self, total_files: int, *, description: str = "Extracting workbooks") -> None:
        self.description = description
        self.success = 0
        self.failed = 0
        self.tasks = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None = None
        if self.enabled:
            self.pbar = tqdm(
                total=total_files,
                desc=description,
                unit="workbook",
                leave=True,
                ncols=80,
                ascii=True,
            )

    def start_file(self, file_path: Path) -> None:
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({file_path.name})")

    def finish_file(self, stat: FileStat) -> None:
        if stat.status == FileStatus.SUCCESS.value:
            self.success += 1
            self.tasks += stat.tasks
        else:
            self.failed += 1
        if self.pbar is not None:
            self.pbar.update(1)
            self.pbar.set_description(self.description)
            self.pbar.set_postfix(success=self.success, failed=self.failed, tasks=self.tasks)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


class SheetProgressIndicator:
    """Per-sheet status line within one workbook.

    Sheets are fast to analyze, so this prints a line per sheet instead of
    driving a nested bar.
    """

    def __init__(self, file_name: str, total_sheets: int) -> None:
        self.file_name = file_name
        self.total_sheets = total_sheets
        self.current_sheet = 0
        self.enabled = is_tty_enabled()

    def start_sheet(self, sheet_name: str) -> None:
        self.current_sheet += 1
        if self.enabled:
            print(f"  [{self.current_sheet}/{self.total_sheets}] {sheet_name}", end="", flush=True)

    def finish_sheet(self, stat: SheetStat) -> None:
        if not self.enabled:
            return
        mark = _SHEET_MARKS[stat.status]
        if stat.status is SheetStatus.EXTRACTED:
            print(f" - {stat.task_count} tasks {mark}")
        elif stat.status is SheetStatus.FAILED:
            print(f" {mark} {stat.error}")
        else:
            print(f" {mark}")
