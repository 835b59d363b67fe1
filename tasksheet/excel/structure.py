from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import NamedTuple

from ..models.grid import Grid
from ..models.structure import NO_MAPPING_TABLE, NOT_FOUND, SheetStructure
from ..parsers.values import parse_task_number_cell
from .merge import cell

"""Worksheet structure analyzer.

The task templates have no schema: field names live in column 0 as Chinese
labels whose exact wording varies between template authors, and task
columns follow to the right. analyze_structure() locates each labelled row
with an ordered keyword rule table and classifies the sheet layout:

- single-task sheets: one task per column, points in the 测量点号 row
- mapping-table sheets: a lower table lists measurement-point ranges down
  column 0 and assigns task numbers per column

Rules are evaluated for every scanned row. A later row overwrites an earlier
match of the same field (last match wins) unless the rule is keep_first.
New template variants are supported by adding rows to _ROW_RULES.
"""

__all__ = [
    "STRUCTURE_SCAN_ROWS",
    "MAPPING_SCAN_ROWS",
    "analyze_structure",
    "is_column_multi_row",
    "has_measurement_point_description",
    "is_mapping_terminator",
    "extract_measurement_ranges",
    "MeasurementRange",
]

STRUCTURE_SCAN_ROWS = 40
MAPPING_SCAN_ROWS = 50
LEGACY_MAPPING_SCAN_COLS = 5

MEASUREMENT_POINT_LABEL = "测量点号"
TASK_NUMBER_LABEL = "任务号"

_CJK = re.compile(r"[\u4e00-\u9fff]")
_SIMPLE_RANGE = re.compile(r"^[\d\-,，\s]+$")
_RANGE_LABEL = re.compile(r"^\d+-\d+$")
_NUMBER_LABEL = re.compile(r"^\d+$")
_LEADING_DIGIT = re.compile(r"^\d")
_MAPPING_TERMINATORS = ("说明", "注", "备注")


def _contains(*words: str) -> Callable[[str], bool]:
    return lambda label: any(w in label for w in words)


def _contains_without(word: str, excluded: str) -> Callable[[str], bool]:
    return lambda label: word in label and excluded not in label


@dataclass(frozen=True)
class _RowRule:
    field: str
    matches: Callable[[str], bool]
    keep_first: bool = False


_ROW_RULES: tuple[_RowRule, ...] = (
    _RowRule("task_name_row", _contains("任务名称")),
    # 集中器任务模板: "任务名称/测量点号" 合并在同一行
    _RowRule("measurement_point_row", lambda s: "任务名称" in s and MEASUREMENT_POINT_LABEL in s),
    _RowRule("task_number_row", lambda s: s == TASK_NUMBER_LABEL),
    _RowRule("task_type_row", _contains("任务类型")),
    _RowRule("data_structure_row", _contains("数据结构方式", "数据格式", "是否有效")),
    _RowRule("sampling_base_time_row", _contains("采样基准时间")),
    _RowRule("sampling_period_row", _contains_without("定时采样周期", "单位")),
    _RowRule("sampling_period_unit_row", _contains("定时采样周期单位", "采样周期单位")),
    _RowRule("report_base_time_row", _contains("上报基准时间")),
    _RowRule("report_period_row", _contains_without("定时上报周期", "单位")),
    _RowRule("report_period_unit_row", _contains("定时上报周期单位", "上报周期单位")),
    _RowRule("extraction_ratio_row", _contains("数据抽取倍率")),
    _RowRule("measurement_point_row", _contains(MEASUREMENT_POINT_LABEL), keep_first=True),
    _RowRule("execution_count_row", _contains("执行次数")),
    _RowRule("data_items_row", _contains("数据项", "数据源")),
)


class MeasurementRange(NamedTuple):
    row_index: int
    label: str


def is_mapping_terminator(label: str) -> bool:
    """Empty labels and notes (说明/注/备注) end a mapping table."""
    return not label or any(word in label for word in _MAPPING_TERMINATORS)


def extract_measurement_ranges(grid: Grid, start_row: int) -> list[MeasurementRange]:
    """Range labels of the mapping table starting at ``start_row``."""
    ranges: list[MeasurementRange] = []
    if start_row < 0:
        return ranges
    for i in range(start_row, len(grid)):
        label = cell(grid, i, 0)
        if is_mapping_terminator(label):
            break
        ranges.append(MeasurementRange(i, label))
    return ranges


def is_column_multi_row(grid: Grid, measurement_point_row: int, col: int) -> bool:
    """True when the column's 测量点号 cell is a Chinese description.

    '251-300' or '1,2,3' are plain point lists; '台区总表及分路表' is a
    description whose points come from the mapping table instead.
    """
    if measurement_point_row == NOT_FOUND or col == 0:
        return False
    value = cell(grid, measurement_point_row, col)
    if not value:
        return False
    return bool(_CJK.search(value)) and not _SIMPLE_RANGE.match(value)


def has_measurement_point_description(grid: Grid, measurement_point_row: int) -> bool:
    if measurement_point_row == NOT_FOUND or measurement_point_row >= len(grid):
        return False
    width = len(grid[measurement_point_row])
    return any(is_column_multi_row(grid, measurement_point_row, c) for c in range(1, width))


def _scan_field_rows(grid: Grid) -> dict[str, int]:
    rows: dict[str, int] = {}
    for i in range(min(STRUCTURE_SCAN_ROWS, len(grid))):
        label = cell(grid, i, 0)
        if not label:
            continue
        for rule in _ROW_RULES:
            if not rule.matches(label):
                continue
            if rule.keep_first and rows.get(rule.field, NOT_FOUND) != NOT_FOUND:
                continue
            rows[rule.field] = i
    return rows


def _first_row_after(grid: Grid, start: int, accept: Callable[[str], bool]) -> int:
    for j in range(start, len(grid)):
        label = cell(grid, j, 0)
        if label and accept(label):
            return j
    return NOT_FOUND


def _find_mapping_start(grid: Grid) -> int:
    """Locate the task-number <-> measurement-point mapping table.

    The table sits under a second exact 测量点号 label. A first 测量点号 row
    whose column 1 reads 任务号 is a table header as well.
    """
    seen = 0
    for i in range(min(MAPPING_SCAN_ROWS, len(grid))):
        if cell(grid, i, 0) != MEASUREMENT_POINT_LABEL:
            continue
        seen += 1
        if seen == 2:
            return _first_row_after(
                grid,
                i + 1,
                lambda s: "测量点" in s or bool(_RANGE_LABEL.match(s)) or bool(_NUMBER_LABEL.match(s)),
            )
        if cell(grid, i, 1) == TASK_NUMBER_LABEL:
            return _first_row_after(
                grid,
                i + 1,
                lambda s: bool(_RANGE_LABEL.match(s)) or bool(_NUMBER_LABEL.match(s)),
            )
    return NOT_FOUND


def _find_legacy_mapping_start(grid: Grid) -> int:
    """Older templates: first labelled row carrying a task number in columns 1-4."""
    for i in range(min(STRUCTURE_SCAN_ROWS, len(grid))):
        label = cell(grid, i, 0)
        if not ("测量点" in label or "类别" in label or _LEADING_DIGIT.match(label)):
            continue
        if any(
            parse_task_number_cell(cell(grid, i, c)) is not None
            for c in range(1, min(LEGACY_MAPPING_SCAN_COLS, len(grid[i])))
        ):
            return i
    return NOT_FOUND


def analyze_structure(grid: Grid) -> SheetStructure:
    """Infer the SheetStructure of a merge-expanded grid.

    Missing labels leave their row at -1. When no mapping table exists on a
    sheet with task fields, task_mapping_start_row is -2 (single-task layout
    without table) rather than -1.
    """
    rows = _scan_field_rows(grid)

    mapping_start = _find_mapping_start(grid)
    if mapping_start == NOT_FOUND:
        mapping_start = _find_legacy_mapping_start(grid)

    task_name_row = rows.get("task_name_row", NOT_FOUND)
    task_type_row = rows.get("task_type_row", NOT_FOUND)
    task_number_row = rows.get("task_number_row", NOT_FOUND)
    has_basic_task_info = task_name_row != NOT_FOUND or task_type_row != NOT_FOUND
    has_mapping_table = mapping_start != NOT_FOUND
    has_task_number_row = task_number_row != NOT_FOUND

    is_single_task_mode = False
    if has_basic_task_info and has_mapping_table and not has_task_number_row:
        # 有映射表却没有任务号行: 多任务
        is_single_task_mode = False
    elif has_basic_task_info and (not has_mapping_table or has_task_number_row):
        is_single_task_mode = True
        if not has_mapping_table:
            mapping_start = NO_MAPPING_TABLE

    measurement_point_row = rows.get("measurement_point_row", NOT_FOUND)
    return SheetStructure(
        task_name_row=task_name_row,
        task_number_row=task_number_row,
        task_type_row=task_type_row,
        data_structure_row=rows.get("data_structure_row", NOT_FOUND),
        sampling_base_time_row=rows.get("sampling_base_time_row", NOT_FOUND),
        sampling_period_row=rows.get("sampling_period_row", NOT_FOUND),
        sampling_period_unit_row=rows.get("sampling_period_unit_row", NOT_FOUND),
        report_base_time_row=rows.get("report_base_time_row", NOT_FOUND),
        report_period_row=rows.get("report_period_row", NOT_FOUND),
        report_period_unit_row=rows.get("report_period_unit_row", NOT_FOUND),
        extraction_ratio_row=rows.get("extraction_ratio_row", NOT_FOUND),
        measurement_point_row=measurement_point_row,
        execution_count_row=rows.get("execution_count_row", NOT_FOUND),
        data_items_row=rows.get("data_items_row", NOT_FOUND),
        task_mapping_start_row=mapping_start,
        is_single_task_mode=is_single_task_mode,
        is_multi_row_mode=has_measurement_point_description(grid, measurement_point_row),
    )
