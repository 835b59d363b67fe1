"""Domain models for the task-definition extractor.

Frozen dataclasses shared by the excel, parsers, codec and services layers.
"""

from .config_models import ExtractConfig
from .error_record import ErrorRecord
from .grid import MergeRegion, SheetGrid
from .processing_result import BatchResult, ExtractionResult, ExtractionStats, SheetStat, SheetStatus
from .selection import TaskSelection
from .structure import NO_MAPPING_TABLE, NOT_FOUND, ColumnMode, SheetStructure
from .task import Task, TaskInfo, task_key

__all__ = [
    # Configuration models
    "ExtractConfig",
    # Grid / structure models
    "MergeRegion",
    "SheetGrid",
    "SheetStructure",
    "ColumnMode",
    "NOT_FOUND",
    "NO_MAPPING_TABLE",
    # Task models
    "TaskInfo",
    "Task",
    "task_key",
    "TaskSelection",
    # Result models
    "ErrorRecord",
    "SheetStat",
    "SheetStatus",
    "ExtractionStats",
    "ExtractionResult",
    "BatchResult",
]
