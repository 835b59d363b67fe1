from __future__ import annotations

from dataclasses import dataclass, field

"""Grid-level models for worksheet contents.

A SheetGrid is what the workbook reader hands to the extraction pipeline:
every cell already converted to trimmed text (empty cell -> ""), plus the
merged ranges of the sheet expressed as 0-based inclusive rectangles.
Rows may have unequal length; consumers treat missing cells as "".
"""

__all__ = [
    "MergeRegion",
    "SheetGrid",
    "Grid",
]

Grid = list[list[str]]


@dataclass(frozen=True)
class MergeRegion:
    """Inclusive merged-cell rectangle (0-based row/column indices)."""
    start_row: int
    start_col: int
    end_row: int
    end_col: int


@dataclass(frozen=True)
class SheetGrid:
    """Raw worksheet as read from the workbook (before merge expansion)."""
    name: str
    rows: Grid
    merges: list[MergeRegion] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def max_columns(self) -> int:
        return max((len(r) for r in self.rows), default=0)
