from __future__ import annotations

import time

import pytest

from tasksheet.excel.merge import fill_merged_cells
from tasksheet.excel.structure import analyze_structure
from tasksheet.models.grid import MergeRegion
from tasksheet.services.enumeration import enumerate_sheet_tasks

"""Enumeration throughput on a wide generated sheet.

Work is linear in columns x mapping rows; a 120-column sheet with a
200-row mapping table must stay well inside an interactive budget.
"""

COLUMNS = 120
MAPPING_ROWS = 200


def _wide_sheet(columns: int, mapping_rows: int) -> list[list[str]]:
    def row(label: str, value: str) -> list[str]:
        return [label] + [value] * columns

    grid = [
        ["集中器任务模板"],
        ["任务名称"] + [f"任务{c}" for c in range(1, columns + 1)],
        row("任务类型", "集中器任务"),
        row("数据结构方式", "1：按任务定义"),
        row("采样基准时间", "2401080000"),
        row("定时采样周期", "15"),
        row("定时采样周期单位", "分"),
        row("上报基准时间", "2401080100"),
        row("定时上报周期", "1"),
        row("定时上报周期单位", "日"),
        row("测量点号", "台区总表及分路表"),
        row("数据项", "02010100 A相电压,02010200 B相电压,02010300 C相电压"),
        row("测量点号", "任务号"),
    ]
    for i in range(mapping_rows):
        start = i * 4 + 1
        # 每列分配两个任务号
        grid.append([f"{start}-{start + 3}"] + [str(c % 250 + 1 + (i % 2)) for c in range(1, columns + 1)])
    grid.append(["说明：自动生成"])
    return grid


@pytest.mark.perf
def test_wide_mapping_sheet_enumeration_budget():
    grid = _wide_sheet(COLUMNS, MAPPING_ROWS)
    merges = [MergeRegion(0, 0, 0, COLUMNS)]

    start = time.perf_counter()
    expanded = fill_merged_cells(grid, merges)
    structure = analyze_structure(expanded)
    tasks = enumerate_sheet_tasks("wide", expanded, structure)
    elapsed = time.perf_counter() - start

    assert len(tasks) == COLUMNS * 2
    assert all(t.measurement_points_count == MAPPING_ROWS // 2 * 4 for t in tasks)
    assert elapsed < 10.0, f"enumeration too slow: {elapsed:.3f}s"
