from __future__ import annotations

from collections.abc import Iterable

from ..models.grid import Grid, MergeRegion

"""Merged-cell expansion.

Spreadsheet readers only report a merged range's value on its top-left cell.
The templates use merges heavily (one task name spanning several columns,
one label spanning several rows), so the grid is densified before analysis.
"""

__all__ = [
    "fill_merged_cells",
    "cell",
]


def cell(grid: Grid, row: int, col: int) -> str:
    """Trimmed text at (row, col); "" for anything outside the grid."""
    if row < 0 or col < 0 or row >= len(grid):
        return ""
    line = grid[row]
    if col >= len(line):
        return ""
    value = line[col]
    return value.strip() if isinstance(value, str) else ("" if value is None else str(value).strip())


def fill_merged_cells(rows: Grid, merges: Iterable[MergeRegion]) -> Grid:
    """Return a copy of ``rows`` with every merge region filled.

    Each cell of a region receives the region's top-left value as it was
    before any expansion. Rows/columns the region covers but the grid lacks
    are created (gaps padded with ""). The input grid is not modified.
    """
    filled: Grid = [list(r) for r in rows]
    # 先取出全部左上角原值, 避免重叠区域读到已填充的值
    regions = [(m, cell(rows, m.start_row, m.start_col)) for m in merges]

    for region, value in regions:
        for r in range(region.start_row, region.end_row + 1):
            while len(filled) <= r:
                filled.append([])
            line = filled[r]
            if len(line) <= region.end_col:
                line.extend([""] * (region.end_col + 1 - len(line)))
            for c in range(region.start_col, region.end_col + 1):
                line[c] = value
    return filled
