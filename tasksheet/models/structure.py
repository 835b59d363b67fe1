from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""SheetStructure model and per-column mode variant.

SheetStructure records where each labelled field lives in a worksheet. It is
derived once per sheet by the structure analyzer and read-only afterwards.
Row indices use NOT_FOUND (-1) when a label was not seen; downstream code
treats -1 as "field absent", never as an error.
"""

__all__ = [
    "NOT_FOUND",
    "NO_MAPPING_TABLE",
    "SheetStructure",
    "ColumnMode",
]

NOT_FOUND = -1
# 单任务模式且没有映射表 (intentionally absent, distinct from "not found")
NO_MAPPING_TABLE = -2


class ColumnMode(Enum):
    """How the task(s) of a single column are enumerated.

    - SINGLE_TASK: one task, measurement points from the column's own cell
    - MULTI_ROW_MAPPING: one task per task number found in the mapping table
    """
    SINGLE_TASK = "single_task"
    MULTI_ROW_MAPPING = "multi_row_mapping"


@dataclass(frozen=True)
class SheetStructure:
    task_name_row: int = NOT_FOUND
    task_number_row: int = NOT_FOUND
    task_type_row: int = NOT_FOUND
    data_structure_row: int = NOT_FOUND
    sampling_base_time_row: int = NOT_FOUND
    sampling_period_row: int = NOT_FOUND
    sampling_period_unit_row: int = NOT_FOUND
    report_base_time_row: int = NOT_FOUND
    report_period_row: int = NOT_FOUND
    report_period_unit_row: int = NOT_FOUND
    extraction_ratio_row: int = NOT_FOUND
    measurement_point_row: int = NOT_FOUND
    execution_count_row: int = NOT_FOUND
    data_items_row: int = NOT_FOUND
    task_mapping_start_row: int = NOT_FOUND
    measurement_range_column: int = 0
    is_single_task_mode: bool = False
    is_multi_row_mode: bool = False

    @property
    def has_mapping_table(self) -> bool:
        return self.task_mapping_start_row >= 0
