from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import date, datetime
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl import load_workbook

from ..models.grid import Grid, MergeRegion, SheetGrid

"""Excel workbook reader.

Values are read with pandas (openpyxl engine, no header row, object dtype) so
every cell keeps its original type until cell_text() renders it. pandas drops
merge information, so merged ranges are read separately from the openpyxl
workbook and handed back as 0-based MergeRegion objects.
"""

__all__ = [
    "WorkbookReadError",
    "read_workbook",
    "read_merge_regions",
    "frame_to_grid",
    "cell_text",
]


class WorkbookReadError(Exception):
    """Raised when a workbook cannot be opened or parsed."""


def cell_text(value: Any) -> str:
    """Render a raw cell value as the string the analyzers see.

    NaN/None -> "", integral floats without the trailing '.0' (task numbers
    are stored as floats by Excel), datetimes as 'YYYY-MM-DD HH:MM:SS'.
    """
    if value is None or value is pd.NaT:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, pd.Timestamp):
        if pd.isna(value):
            return ""
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d 00:00:00")
    return str(value).strip()


def frame_to_grid(df: pd.DataFrame) -> Grid:
    """Header-less DataFrame -> list of string rows (trailing blanks trimmed)."""
    grid: Grid = []
    for raw in df.itertuples(index=False, name=None):
        row = [cell_text(v) for v in raw]
        while row and row[-1] == "":
            row.pop()
        grid.append(row)
    return grid


def read_merge_regions(path: Path, target_sheets: Iterable[str] | None = None) -> dict[str, list[MergeRegion]]:
    """Merged ranges per sheet, converted to 0-based inclusive coordinates."""
    wanted = set(target_sheets) if target_sheets is not None else None
    merges: dict[str, list[MergeRegion]] = {}
    wb = load_workbook(path, read_only=False, data_only=True)
    try:
        for ws in wb.worksheets:
            if wanted is not None and ws.title not in wanted:
                continue
            merges[ws.title] = [
                MergeRegion(
                    start_row=rng.min_row - 1,
                    start_col=rng.min_col - 1,
                    end_row=rng.max_row - 1,
                    end_col=rng.max_col - 1,
                )
                for rng in ws.merged_cells.ranges
            ]
    finally:
        wb.close()
    return merges


def read_workbook(path: Path, target_sheets: Iterable[str] | None = None) -> dict[str, SheetGrid]:
    """Read every (or only the targeted) worksheet of ``path``.

    Parameters
    ----------
    path: workbook path (.xlsx / .xlsm)
    target_sheets: restrict to these sheet names (None = all sheets)

    Raises
    ------
    WorkbookReadError: the file is missing, not a workbook, or corrupt.
    """
    path = Path(path)
    wanted = set(target_sheets) if target_sheets is not None else None
    try:
        merges = read_merge_regions(path, wanted)
        sheets: dict[str, SheetGrid] = {}
        with pd.ExcelFile(path, engine="openpyxl") as xls:
            for name in xls.sheet_names:
                if wanted is not None and str(name) not in wanted:
                    continue
                # 保留 "NA" 等原文, 空单元格由 cell_text 转为 ""
                df = xls.parse(name, header=None, dtype=object, keep_default_na=False)
                sheets[str(name)] = SheetGrid(
                    name=str(name),
                    rows=frame_to_grid(df),
                    merges=list(merges.get(str(name), [])),
                )
    except FileNotFoundError as e:
        raise WorkbookReadError(f"workbook not found: {path}") from e
    except Exception as e:  # openpyxl/zipfile raise a wide range of types for corrupt files
        raise WorkbookReadError(f"cannot read workbook {path.name}: {e}") from e
    return sheets
