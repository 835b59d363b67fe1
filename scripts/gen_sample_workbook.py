#!/usr/bin/env python3
"""Sample task-template workbook generator.

Writes a workbook with the three layouts the extractor understands, for
manual runs and throughput checks:

- 单任务: one task per column, task numbers in a 任务号 row
- 映射表: mapping table (range labels x task numbers) below the fields
- 混合: mapping-table columns next to plain single-task columns

Usage:
    python scripts/gen_sample_workbook.py data/sample.xlsx
    python scripts/gen_sample_workbook.py data/wide.xlsx --columns 200 --ranges 40
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import pandas as pd

Rows = list[list[object]]
# (start_row, start_col, end_row, end_col), 0-based inclusive
Merge = tuple[int, int, int, int]

DATA_ITEM_SAMPLES = [
    "05060101（上1次）日冻结正向有功电能、05060201（上1次）日冻结反向有功电能",
    "02010100 A相电压,02010200 B相电压,02010300 C相电压",
    "05060101、05060102；日冻结正向有功电能",
    "E1008030（上日）停电总次数、E1008031（上日）停电总时间",
]

FIELD_LABELS = [
    "任务类型",
    "数据结构方式",
    "采样基准时间",
    "定时采样周期",
    "定时采样周期单位",
    "上报基准时间",
    "定时上报周期",
    "定时上报周期单位",
    "数据抽取倍率",
]


def _field_rows(columns: int) -> Rows:
    values = {
        "任务类型": lambda c: "表端任务" if c % 2 else "集中器任务",
        "数据结构方式": lambda c: "1：按任务定义",
        "采样基准时间": lambda c: "2024-01-08 00:00",
        "定时采样周期": lambda c: 15,
        "定时采样周期单位": lambda c: "分",
        "上报基准时间": lambda c: "2024-01-08 01:30",
        "定时上报周期": lambda c: 1,
        "定时上报周期单位": lambda c: "日",
        "数据抽取倍率": lambda c: 1,
    }
    return [[label] + [values[label](c) for c in range(1, columns + 1)] for label in FIELD_LABELS]


def single_task_sheet(columns: int = 3) -> tuple[Rows, list[Merge]]:
    rows: Rows = [
        ["集中器任务模板"] + [""] * columns,
        ["任务名称"] + [f"日冻结任务{c}" for c in range(1, columns + 1)],
        ["任务号"] + [c for c in range(1, columns + 1)],
    ]
    rows += _field_rows(columns)
    rows += [
        ["测量点号"] + [f"{c}-{c + 2}" for c in range(1, columns + 1)],
        ["执行次数"] + [0] * columns,
        ["数据项"] + [DATA_ITEM_SAMPLES[c % len(DATA_ITEM_SAMPLES)] for c in range(columns)],
    ]
    return rows, [(0, 0, 0, columns)]


def mapping_table_sheet(columns: int = 3, ranges: int = 4, *, mixed: bool = False) -> tuple[Rows, list[Merge]]:
    """Mapping-table layout; with ``mixed`` the last column is a plain single task."""
    mapped = columns - 1 if mixed else columns
    rows: Rows = [
        ["集中器任务模板"] + [""] * columns,
        ["任务名称"] + [f"曲线任务{c}" for c in range(1, columns + 1)],
    ]
    rows += _field_rows(columns)
    rows += [
        ["测量点号"] + ["台区总表及分路表"] * mapped + (["1"] if mixed else []),
        ["执行次数"] + [0] * columns,
        ["数据项"] + [DATA_ITEM_SAMPLES[c % len(DATA_ITEM_SAMPLES)] for c in range(columns)],
        [""],
        ["测量点号"] + ["任务号"] * mapped,
    ]
    for r in range(ranges):
        label = f"{r * 50 + 1}-{(r + 1) * 50}"
        # 每两个范围共用一个任务号
        rows.append([label] + [10 + c * 10 + r // 2 for c in range(mapped)])
    rows.append(["说明：测量点范围按台区分配"])
    merges: list[Merge] = [(0, 0, 0, columns)]
    if mapped > 1:
        # 测量点号描述横向合并
        mp_row = 2 + len(FIELD_LABELS)
        merges.append((mp_row, 1, mp_row, mapped))
    return rows, merges


def write_workbook(path: Path, sheets: dict[str, tuple[Rows, list[Merge]]]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for name, (rows, merges) in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=name, header=False, index=False)
            ws = writer.sheets[name]
            for r1, c1, r2, c2 in merges:
                ws.merge_cells(start_row=r1 + 1, start_column=c1 + 1, end_row=r2 + 1, end_column=c2 + 1)
    return path


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    p.add_argument("output", type=Path, help="Workbook path to write (.xlsx)")
    p.add_argument("--columns", type=int, default=3, help="Task columns per sheet")
    p.add_argument("--ranges", type=int, default=4, help="Mapping-table rows")
    args = p.parse_args(argv)

    if args.columns < 2:
        print("--columns must be at least 2", file=sys.stderr)
        return 1
    sheets = {
        "单任务": single_task_sheet(args.columns),
        "映射表": mapping_table_sheet(args.columns, args.ranges),
        "混合": mapping_table_sheet(args.columns, args.ranges, mixed=True),
    }
    path = write_workbook(args.output, sheets)
    print(f"written: {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
