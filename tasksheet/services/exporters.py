from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

from ..models.processing_result import ExtractionResult
from ..models.task import Task

"""Exporters over the extracted task map.

Three renderings, each a pure function returning text or a dict, plus
write_exports() which writes the requested ones next to each other:

- json      <stem>_tasks.json          full per-sheet task map
- ini       <stem>_tasks.txt           human-readable report, one block per task
- template  <stem>_task_template.json  {"BaseTask": [...], "MeterTask": [...]}
"""

__all__ = [
    "EXPORT_SUFFIXES",
    "to_json",
    "to_ini",
    "to_task_template",
    "classify_task_kind",
    "write_exports",
]

logger = logging.getLogger(__name__)

EXPORT_SUFFIXES = {
    "json": "_tasks.json",
    "ini": "_tasks.txt",
    "template": "_task_template.json",
}

_BANNER = "=" * 60
_WHITESPACE = re.compile(r"\s")
_METER_KEYWORDS = ("表端", "meter")

TasksBySheet = Mapping[str, Sequence[Task]]


def to_json(tasks_by_sheet: TasksBySheet) -> str:
    payload = {sheet: [t.to_dict() for t in tasks] for sheet, tasks in tasks_by_sheet.items()}
    return json.dumps(payload, ensure_ascii=False, indent=2)


def _text(value: Any) -> str:
    return "null" if value is None else str(value)


def _data_items_text(items: Mapping[str, str]) -> str:
    return ", ".join(f"{k}:{v}" for k, v in items.items())


def _ini_block(index: int, task: Task) -> list[str]:
    info = task.info
    fields = [
        ("工作表", task.worksheet),
        ("任务名称", info.task_name),
        ("任务号", None),
        ("测量点号", task.measurement_points),
        ("任务类型", info.task_type),
        ("数据结构方式", info.data_structure_type),
        ("采样基准时间", info.sampling_base_time),
        ("定时采样周期", info.sampling_period),
        ("定时采样周期单位", info.sampling_period_unit),
        ("上报基准时间", info.report_base_time),
        ("定时上报周期", info.report_period),
        ("定时上报周期单位", info.report_period_unit),
        ("数据抽取倍率", info.extraction_ratio),
        ("执行次数", info.execution_count),
        ("数据项", _data_items_text(info.data_items)),
        ("任务参数", task.task_param),
    ]
    body = []
    for label, value in fields:
        if label == "任务号":
            # 任务号不加引号
            body.append(f'    "{label}": {task.task_number}')
        else:
            body.append(f'    "{label}": "{_text(value)}"')
    return [
        f"---------- 任务 {index} ----------",
        "{",
        ",\n".join(body),
        "}",
        "",
    ]


def to_ini(tasks_by_sheet: TasksBySheet) -> str:
    """Plain-text report: a banner per sheet, then one pseudo-JSON block per task."""
    lines: list[str] = []
    for sheet, tasks in tasks_by_sheet.items():
        lines.extend([_BANNER, f"工作表: {sheet}", _BANNER, ""])
        for i, task in enumerate(tasks, start=1):
            lines.extend(_ini_block(i, task))
        lines.extend(["", ""])
    return "\n".join(lines)


def classify_task_kind(task: Task) -> str:
    task_type = task.info.task_type.lower()
    if any(k in task_type for k in _METER_KEYWORDS):
        return "MeterTask"
    return "BaseTask"


def to_task_template(tasks: Iterable[Task]) -> dict[str, list[dict[str, Any]]]:
    template: dict[str, list[dict[str, Any]]] = {"BaseTask": [], "MeterTask": []}
    for task in tasks:
        template[classify_task_kind(task)].append(
            {"TaskId": task.task_number, "TaskParam": _WHITESPACE.sub("", task.task_param)}
        )
    return template


def write_exports(
    result: ExtractionResult,
    out_dir: Path,
    formats: Iterable[str],
    tasks: Sequence[Task] | None = None,
) -> list[Path]:
    """Write the requested exports of ``result`` into ``out_dir``.

    ``tasks`` restricts the template export (e.g. to a search/selection
    subset); the JSON and INI reports always carry the full task map.
    Returns the written paths in format order.
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    stem = Path(result.file_name).stem
    written: list[Path] = []
    for fmt in formats:
        suffix = EXPORT_SUFFIXES.get(fmt)
        if suffix is None:
            raise ValueError(f"unknown export format: {fmt}")
        path = out_dir / f"{stem}{suffix}"
        if fmt == "json":
            text = to_json(result.tasks_by_sheet)
        elif fmt == "ini":
            text = to_ini(result.tasks_by_sheet)
        else:
            selected = result.all_tasks if tasks is None else list(tasks)
            text = json.dumps(to_task_template(selected), ensure_ascii=False, indent=2)
        path.write_text(text, encoding="utf-8")
        logger.debug("export written: %s", path)
        written.append(path)
    return written
