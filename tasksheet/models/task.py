from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""TaskInfo / Task domain models.

TaskInfo is the parsed field set of one task column, independent of which
task number(s) use it. Task binds a TaskInfo to its enumeration identity
(worksheet, column, task number, measurement-point set) and the encoded
task parameter. Both are frozen; tasks are produced only by the enumeration
engine and never mutated afterwards.
"""

__all__ = [
    "TaskInfo",
    "Task",
    "task_key",
]


@dataclass(frozen=True)
class TaskInfo:
    """Typed field set extracted from one task column.

    Every parsed field keeps its raw cell text in the matching ``*_original``
    attribute. Parsed numeric fields are None when the cell was absent or
    unparseable.
    """
    task_name: str = ""
    task_type: str = ""
    data_structure_type: int | None = None
    data_structure_type_original: str = ""
    sampling_base_time: str = ""  # YYMMDDhhmm
    sampling_base_time_original: str = ""
    sampling_period: int | None = None
    sampling_period_original: str = ""
    sampling_period_unit: int | None = None  # 0:分 1:时 2:日 3:月
    sampling_period_unit_original: str = ""
    report_base_time: str = ""  # YYMMDDhhmm
    report_base_time_original: str = ""
    report_period: int | None = None
    report_period_original: str = ""
    report_period_unit: int | None = None
    report_period_unit_original: str = ""
    extraction_ratio: int | None = None
    extraction_ratio_original: str = ""
    measurement_point_id: str = ""  # raw cell text
    execution_count: str = ""  # raw cell text
    data_items: dict[str, str] = field(default_factory=dict)  # 8-hex id -> description
    data_items_original: str = ""
    task_param: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "taskName": self.task_name,
            "taskType": self.task_type,
            "dataStructureType": self.data_structure_type,
            "dataStructureTypeOriginal": self.data_structure_type_original,
            "samplingBaseTime": self.sampling_base_time,
            "samplingBaseTimeOriginal": self.sampling_base_time_original,
            "samplingPeriod": self.sampling_period,
            "samplingPeriodOriginal": self.sampling_period_original,
            "samplingPeriodUnit": self.sampling_period_unit,
            "samplingPeriodUnitOriginal": self.sampling_period_unit_original,
            "reportBaseTime": self.report_base_time,
            "reportBaseTimeOriginal": self.report_base_time_original,
            "reportPeriod": self.report_period,
            "reportPeriodOriginal": self.report_period_original,
            "reportPeriodUnit": self.report_period_unit,
            "reportPeriodUnitOriginal": self.report_period_unit_original,
            "extractionRatio": self.extraction_ratio,
            "extractionRatioOriginal": self.extraction_ratio_original,
            "measurementPointId": self.measurement_point_id,
            "executionCount": self.execution_count,
            "dataItems": dict(self.data_items),
            "dataItemsOriginal": self.data_items_original,
            "taskParam": self.task_param,
        }


@dataclass(frozen=True)
class Task:
    """One emitted, fully resolved task record.

    Identity key is worksheet + task number + column index; the same task
    number may legitimately appear in several columns of one worksheet.
    """
    worksheet: str
    column_index: int
    task_number: int
    measurement_points: str  # displayed range labels, e.g. "1-50, 51-100"
    parsed_measurement_points: tuple[int, ...]
    info: TaskInfo
    task_param: str = ""  # "01 12 08 ..." uppercase hex bytes

    @property
    def measurement_points_count(self) -> int:
        return len(self.parsed_measurement_points)

    @property
    def key(self) -> str:
        return task_key(self)

    def to_dict(self) -> dict[str, Any]:
        """Flatten to the JSON shape used by exports (camelCase keys)."""
        payload: dict[str, Any] = {
            "worksheet": self.worksheet,
            "columnIndex": self.column_index,
            "taskNumber": self.task_number,
            "measurementPoints": self.measurement_points,
            "parsedMeasurementPoints": list(self.parsed_measurement_points),
            "measurementPointsCount": self.measurement_points_count,
        }
        payload.update(self.info.to_dict())
        payload["taskParam"] = self.task_param
        return payload


def task_key(task: Task) -> str:
    return f"{task.worksheet}-{task.task_number}-{task.column_index}"
