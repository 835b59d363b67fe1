from __future__ import annotations

from ..excel.merge import cell
from ..excel.structure import MEASUREMENT_POINT_LABEL
from ..models.grid import Grid
from ..models.structure import NOT_FOUND, SheetStructure
from ..models.task import TaskInfo
from ..parsers.data_items import parse_data_items
from ..parsers.values import (
    parse_data_structure_type,
    parse_extraction_ratio,
    parse_period_unit,
    parse_period_value,
    parse_time_format,
)

"""Task column extractor: one grid column -> TaskInfo."""

__all__ = [
    "MEASUREMENT_POINT_SCAN_ROWS",
    "is_boilerplate",
    "extract_task_info",
    "find_measurement_point_id",
]

MEASUREMENT_POINT_SCAN_ROWS = 20

_LABEL_WORDS = ("任务名称", MEASUREMENT_POINT_LABEL)
_BOILERPLATE_WORDS = ("集中器", "模板")


def is_boilerplate(value: str) -> bool:
    """Template titles and column-0 label echoes are never task names."""
    return any(w in value for w in _LABEL_WORDS) or any(w in value for w in _BOILERPLATE_WORDS)


def _value(grid: Grid, row: int, col: int) -> str:
    if row == NOT_FOUND:
        return ""
    return cell(grid, row, col)


def _resolve_task_name(grid: Grid, col: int, structure: SheetStructure) -> str:
    name = _value(grid, structure.task_name_row, col)
    if any(w in name for w in _LABEL_WORDS):
        name = ""
    if name:
        return name

    # 没有任务名称行时, 从任务类型行向上找
    if structure.task_type_row != NOT_FOUND:
        for i in range(structure.task_type_row - 1, -1, -1):
            candidate = cell(grid, i, col)
            if candidate and not is_boilerplate(candidate):
                return candidate

    for i in (0, 1):
        candidate = cell(grid, i, col)
        if candidate and not is_boilerplate(candidate):
            return candidate
    return ""


def find_measurement_point_id(grid: Grid, col: int, structure: SheetStructure) -> str:
    """Column's cell on the first exact 测量点号 row that is not the task-name row."""
    for i in range(min(MEASUREMENT_POINT_SCAN_ROWS, len(grid))):
        if i == structure.task_name_row or cell(grid, i, 0) != MEASUREMENT_POINT_LABEL:
            continue
        value = cell(grid, i, col)
        if value and value != MEASUREMENT_POINT_LABEL:
            return value
    return ""


def extract_task_info(grid: Grid, col: int, structure: SheetStructure) -> TaskInfo:
    """Assemble the TaskInfo of column ``col``.

    Absent rows (-1) read as "" and therefore parse to None / "" / {}.
    """
    raw_data_structure = _value(grid, structure.data_structure_row, col)
    raw_sampling_base_time = _value(grid, structure.sampling_base_time_row, col)
    raw_sampling_period = _value(grid, structure.sampling_period_row, col)
    raw_sampling_unit = _value(grid, structure.sampling_period_unit_row, col)
    raw_report_base_time = _value(grid, structure.report_base_time_row, col)
    raw_report_period = _value(grid, structure.report_period_row, col)
    raw_report_unit = _value(grid, structure.report_period_unit_row, col)
    raw_ratio = _value(grid, structure.extraction_ratio_row, col)
    raw_data_items = _value(grid, structure.data_items_row, col)

    return TaskInfo(
        task_name=_resolve_task_name(grid, col, structure),
        task_type=_value(grid, structure.task_type_row, col),
        data_structure_type=parse_data_structure_type(raw_data_structure),
        data_structure_type_original=raw_data_structure,
        sampling_base_time=parse_time_format(raw_sampling_base_time),
        sampling_base_time_original=raw_sampling_base_time,
        sampling_period=parse_period_value(raw_sampling_period),
        sampling_period_original=raw_sampling_period,
        sampling_period_unit=parse_period_unit(raw_sampling_unit),
        sampling_period_unit_original=raw_sampling_unit,
        report_base_time=parse_time_format(raw_report_base_time),
        report_base_time_original=raw_report_base_time,
        report_period=parse_period_value(raw_report_period),
        report_period_original=raw_report_period,
        report_period_unit=parse_period_unit(raw_report_unit),
        report_period_unit_original=raw_report_unit,
        extraction_ratio=parse_extraction_ratio(raw_ratio),
        extraction_ratio_original=raw_ratio,
        measurement_point_id=find_measurement_point_id(grid, col, structure),
        execution_count=_value(grid, structure.execution_count_row, col),
        data_items=parse_data_items(raw_data_items),
        data_items_original=raw_data_items,
    )
