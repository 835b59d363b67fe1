from __future__ import annotations

from ..models.processing_result import BatchResult, ExtractionResult

"""SUMMARY line rendering.

    SUMMARY files={total}/{total} success={s} failed={f} sheets={k} tasks={t} elapsed_sec={e}
"""

__all__ = [
    "format_elapsed",
    "render_summary_line",
    "render_sheet_counts",
]


def format_elapsed(seconds: float) -> str:
    """Elapsed seconds without scientific notation or a trailing '.0'."""
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return str(round(seconds, 3))


def render_summary_line(total_files: int, result: BatchResult) -> str:
    """Render the SUMMARY line of a batch run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = BatchResult(
        ...     success_files=1, failed_files=0, total_sheets=2, total_tasks=14,
        ...     start_time=start, end_time=end, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(1, result)
        'SUMMARY files=1/1 success=1 failed=0 sheets=2 tasks=14 elapsed_sec=2'
    """
    return (
        f"SUMMARY files={total_files}/{total_files} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"sheets={result.total_sheets} "
        f"tasks={result.total_tasks} "
        f"elapsed_sec={format_elapsed(result.elapsed_seconds)}"
    )


def render_sheet_counts(result: ExtractionResult) -> list[str]:
    """Per-sheet success lines ("  <sheet>: N tasks") for one workbook."""
    return [f"  {name}: {count} tasks" for name, count in result.stats.tasks_by_sheet.items()]
