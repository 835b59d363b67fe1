from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from ..excel.merge import fill_merged_cells
from ..excel.reader import WorkbookReadError, read_workbook
from ..excel.structure import analyze_structure
from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import ExtractConfig
from ..models.grid import SheetGrid
from ..models.processing_result import (
    BatchResult,
    ExtractionResult,
    ExtractionStats,
    FileStat,
    FileStatus,
    SheetStat,
    SheetStatus,
)
from ..models.task import Task
from .enumeration import enumerate_sheet_tasks
from .exporters import write_exports
from .progress import ProgressTracker, SheetProgressIndicator
from .search import filter_tasks

"""Extraction orchestration.

extract_workbook() runs the per-sheet pipeline (merge expansion -> structure
analysis -> enumeration) over one workbook. A failing sheet is logged,
recorded in the error log and skipped; the workbook only fails when it cannot
be read or when no sheet yields a task. process_all() drives a batch of
workbooks, writes the exports of each successful one and aggregates the
counts for the SUMMARY line.
"""

__all__ = [
    "ProcessingError",
    "ExtractionError",
    "FILE_LEVEL_SHEET",
    "EXCEL_SUFFIXES",
    "extract_sheet",
    "extract_workbook",
    "scan_excel_files",
    "process_all",
]

logger = logging.getLogger(__name__)

FILE_LEVEL_SHEET = "<FILE_LEVEL>"
EXCEL_SUFFIXES = (".xlsx", ".xlsm")


class ProcessingError(Exception):
    """Fatal batch error (source directory missing or unreadable)."""


class ExtractionError(ProcessingError):
    """A whole workbook produced no result."""


def extract_sheet(sheet: SheetGrid, config: ExtractConfig) -> list[Task]:
    """Tasks of one worksheet; [] for sheets too short to hold a template."""
    if sheet.row_count < config.min_sheet_rows:
        return []
    grid = fill_merged_cells(sheet.rows, sheet.merges)
    structure = analyze_structure(grid)
    logger.debug("sheet=%s structure=%s", sheet.name, structure)
    return enumerate_sheet_tasks(
        sheet.name,
        grid,
        structure,
        default_task_number=config.default_task_number,
    )


def extract_workbook(
    path: Path,
    config: ExtractConfig,
    error_log: ErrorLogBuffer | None = None,
) -> ExtractionResult:
    """Extract every task of the workbook at ``path``.

    Raises:
        ExtractionError: the file cannot be read, or no sheet yields a task
    """
    path = Path(path)
    start_time = datetime.now(UTC)
    try:
        sheets = read_workbook(path, config.target_sheets)
    except WorkbookReadError as e:
        raise ExtractionError(str(e)) from e

    tasks_by_sheet: dict[str, list[Task]] = {}
    sheet_stats: list[SheetStat] = []
    progress = SheetProgressIndicator(file_name=path.name, total_sheets=len(sheets))

    for name, sheet in sheets.items():
        progress.start_sheet(name)
        if sheet.row_count < config.min_sheet_rows:
            logger.debug("sheet=%s skipped: %d rows", name, sheet.row_count)
            sheet_stats.append(SheetStat(sheet_name=name, status=SheetStatus.SKIPPED))
            progress.finish_sheet(sheet_stats[-1])
            continue
        try:
            tasks = extract_sheet(sheet, config)
        except Exception as e:  # sheet boundary: one broken sheet never aborts the workbook
            logger.warning(f"file={path.name} sheet={name} failed: {e}")
            if error_log is not None:
                error_log.record(
                    file=path.name,
                    sheet=name,
                    column=-1,
                    error_type="SHEET_PROCESSING_ERROR",
                    message=str(e),
                )
            sheet_stats.append(SheetStat(sheet_name=name, status=SheetStatus.FAILED, error=str(e)))
            progress.finish_sheet(sheet_stats[-1])
            continue

        if tasks:
            tasks_by_sheet[name] = tasks
            sheet_stats.append(SheetStat(sheet_name=name, status=SheetStatus.EXTRACTED, task_count=len(tasks)))
        else:
            sheet_stats.append(SheetStat(sheet_name=name, status=SheetStatus.EMPTY))
        progress.finish_sheet(sheet_stats[-1])

    if not tasks_by_sheet:
        raise ExtractionError("no tasks could be extracted from any worksheet")

    end_time = datetime.now(UTC)
    return ExtractionResult(
        file_name=path.name,
        tasks_by_sheet=tasks_by_sheet,
        stats=ExtractionStats.from_tasks(list(sheets), tasks_by_sheet),
        sheet_stats=sheet_stats,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
    )


def scan_excel_files(directory: Path) -> list[Path]:
    """Workbooks directly under ``directory`` (sorted; Excel lock files ignored).

    Raises:
        ProcessingError: the directory does not exist or cannot be read
    """
    directory = Path(directory)
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    try:
        return sorted(
            p for p in directory.iterdir()
            if p.is_file() and p.suffix.lower() in EXCEL_SUFFIXES and not p.name.startswith("~$")
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def _file_error_type(error: Exception) -> str:
    if isinstance(error, ExtractionError):
        if isinstance(error.__cause__, WorkbookReadError):
            return "WORKBOOK_READ_ERROR"
        return "NO_TASKS_EXTRACTED"
    return "EXPORT_WRITE_ERROR"


def _record_file_failure(
    error_log: ErrorLogBuffer,
    file_path: Path,
    error: Exception,
    file_start: datetime,
) -> FileStat:
    logger.error(f"file={file_path.name} {error}")
    error_log.record(
        file=file_path.name,
        sheet=FILE_LEVEL_SHEET,
        column=-1,
        error_type=_file_error_type(error),
        message=str(error),
    )
    return FileStat(
        file_name=file_path.name,
        status=FileStatus.FAILED.value,
        sheets=0,
        tasks=0,
        elapsed_seconds=(datetime.now(UTC) - file_start).total_seconds(),
        error=str(error),
    )


def process_all(
    config: ExtractConfig,
    paths: Iterable[Path] | None = None,
    *,
    query: str | None = None,
) -> BatchResult:
    """Extract and export a batch of workbooks.

    Args:
        config: run configuration
        paths: explicit workbooks; None scans ``config.source_directory``
        query: search filter restricting the template export

    Raises:
        ProcessingError: the source directory cannot be scanned
    """
    start_time = datetime.now(UTC)
    error_log = ErrorLogBuffer(config.logs_directory)
    file_paths = list(paths) if paths is not None else scan_excel_files(Path(config.source_directory))
    out_dir = Path(config.output_directory)

    results: list[ExtractionResult] = []
    file_stats: list[FileStat] = []
    success_count = 0
    failed_count = 0
    total_sheets = 0
    total_tasks = 0

    with ProgressTracker(len(file_paths)) as progress:
        for file_path in file_paths:
            file_path = Path(file_path)
            progress.start_file(file_path)
            file_start = datetime.now(UTC)
            try:
                result = extract_workbook(file_path, config, error_log)
                selected = filter_tasks(result.all_tasks, query) if query else None
                write_exports(result, out_dir, config.formats, tasks=selected)
            except (ExtractionError, OSError) as e:
                failed_count += 1
                file_stats.append(_record_file_failure(error_log, file_path, e, file_start))
                progress.finish_file(file_stats[-1])
                continue

            success_count += 1
            total_sheets += result.stats.total_sheets
            total_tasks += result.stats.total_tasks
            results.append(result)
            logger.info(
                f"file={result.file_name} sheets={result.stats.total_sheets} tasks={result.stats.total_tasks}"
                + (f" selected={len(selected)}" if selected is not None else "")
            )
            if result.failed_sheets:
                logger.warning(f"file={result.file_name} failed_sheets={','.join(result.failed_sheets)}")
            file_stats.append(
                FileStat(
                    file_name=result.file_name,
                    status=FileStatus.SUCCESS.value,
                    sheets=result.stats.total_sheets,
                    tasks=result.stats.total_tasks,
                    elapsed_seconds=result.elapsed_seconds,
                )
            )
            progress.finish_file(file_stats[-1])

    # Flush error log once per run
    try:
        log_path = error_log.flush()
    except OSError as e:
        logger.warning(f"error log could not be written: {e}")
    else:
        if log_path is not None:
            logger.info(f"error log: {log_path}")

    end_time = datetime.now(UTC)
    return BatchResult(
        success_files=success_count,
        failed_files=failed_count,
        total_sheets=total_sheets,
        total_tasks=total_tasks,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        results=results,
        file_stats=file_stats,
    )
