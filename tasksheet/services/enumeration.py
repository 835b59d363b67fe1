from __future__ import annotations

import logging

from ..codec.task_param import format_task_param, generate_task_param
from ..excel.merge import cell
from ..excel.structure import extract_measurement_ranges, is_column_multi_row
from ..models.config_models import DEFAULT_TASK_NUMBER
from ..models.grid import Grid
from ..models.structure import NOT_FOUND, ColumnMode, SheetStructure
from ..models.task import Task, TaskInfo
from ..parsers.values import parse_int_prefix, parse_measurement_points, parse_task_number_cell
from .extractor import extract_task_info, is_boilerplate

"""Task enumeration engine.

Walks the task columns of one analyzed sheet and emits Task records. Each
column is classified on its own (mixed sheets exist): columns with task
numbers in the mapping table emit one task per distinct number, all other
columns emit a single task. Work is linear in columns x mapping rows.
"""

__all__ = [
    "START_COLUMN_SCAN_LIMIT",
    "detect_start_column",
    "is_label_column",
    "classify_column",
    "collect_task_numbers",
    "enumerate_sheet_tasks",
]

logger = logging.getLogger(__name__)

START_COLUMN_SCAN_LIMIT = 25

_RANGE_JOINER = ", "


def detect_start_column(grid: Grid, structure: SheetStructure) -> int:
    """First column (1..24) of the task-name row (row 0 if none) holding a task name."""
    row = structure.task_name_row if structure.task_name_row != NOT_FOUND else 0
    if row >= len(grid):
        return 1
    for col in range(1, min(START_COLUMN_SCAN_LIMIT, len(grid[row]))):
        value = cell(grid, row, col)
        if value and not is_boilerplate(value):
            return col
    return 1


def is_label_column(info: TaskInfo) -> bool:
    """Columns whose 'name' is a header echo ("任务名称", "任务系统", "A") carry no task."""
    name = info.task_name
    return not name or "任务名称" in name or "任务系统" in name or name == "A"


def collect_task_numbers(grid: Grid, structure: SheetStructure, col: int) -> dict[int, list[str]]:
    """Task number -> mapping-table range labels assigned to it in column ``col``."""
    numbers: dict[int, list[str]] = {}
    for rng in extract_measurement_ranges(grid, structure.task_mapping_start_row):
        number = parse_task_number_cell(cell(grid, rng.row_index, col))
        if number is not None:
            numbers.setdefault(number, []).append(rng.label)
    return numbers


def classify_column(grid: Grid, structure: SheetStructure, col: int) -> ColumnMode:
    if structure.has_mapping_table:
        for rng in extract_measurement_ranges(grid, structure.task_mapping_start_row):
            if parse_task_number_cell(cell(grid, rng.row_index, col)) is not None:
                return ColumnMode.MULTI_ROW_MAPPING
    if is_column_multi_row(grid, structure.measurement_point_row, col):
        return ColumnMode.MULTI_ROW_MAPPING
    return ColumnMode.SINGLE_TASK


def _build_task(sheet_name: str, col: int, task_number: int, points_label: str, info: TaskInfo) -> Task:
    points = parse_measurement_points(points_label)
    param = format_task_param(generate_task_param(info, points))
    return Task(
        worksheet=sheet_name,
        column_index=col,
        task_number=task_number,
        measurement_points=points_label,
        parsed_measurement_points=tuple(points),
        info=info,
        task_param=param,
    )


def _single_task_number(grid: Grid, structure: SheetStructure, col: int, default: int) -> int:
    if structure.task_number_row == NOT_FOUND:
        return default
    number = parse_int_prefix(cell(grid, structure.task_number_row, col))
    return default if number is None else number


def enumerate_sheet_tasks(
    sheet_name: str,
    grid: Grid,
    structure: SheetStructure,
    *,
    default_task_number: int = DEFAULT_TASK_NUMBER,
) -> list[Task]:
    """Emit the tasks of one merge-expanded, analyzed sheet.

    Columns are not deduplicated: the same task number may come from two
    columns and both tasks are kept (their keys differ by column index).
    """
    tasks: list[Task] = []
    max_cols = max((len(r) for r in grid), default=0)
    start_col = detect_start_column(grid, structure)
    logger.debug("sheet=%s start_col=%d max_cols=%d", sheet_name, start_col, max_cols)

    for col in range(start_col, max_cols):
        info = extract_task_info(grid, col, structure)
        if is_label_column(info):
            continue

        mode = classify_column(grid, structure, col)
        if mode is ColumnMode.MULTI_ROW_MAPPING:
            numbers = collect_task_numbers(grid, structure, col)
            if not numbers:
                logger.debug("sheet=%s col=%d no task numbers in mapping table, skipped", sheet_name, col)
                continue
            for number, labels in numbers.items():
                tasks.append(_build_task(sheet_name, col, number, _RANGE_JOINER.join(labels), info))
        else:
            number = _single_task_number(grid, structure, col, default_task_number)
            tasks.append(_build_task(sheet_name, col, number, info.measurement_point_id, info))

    logger.debug("sheet=%s tasks=%d", sheet_name, len(tasks))
    return tasks
