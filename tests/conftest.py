# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest

from tasksheet.logging.init import reset_logging
from tasksheet.models.task import Task, TaskInfo
from tasksheet.parsers.values import parse_measurement_points

Rows = list[list[object]]
Merge = tuple[int, int, int, int]  # 0-based inclusive (r1, c1, r2, c2)


# 单任务模板: 每列一个任务, 任务号行给出任务号
SINGLE_TASK_ROWS: Rows = [
    ["集中器任务模板"],
    ["任务名称", "日冻结电能", "日冻结电压"],
    ["任务号", "1", "2"],
    ["任务类型", "表端任务", "集中器任务"],
    ["数据结构方式", "1：按任务定义", "自描述格式"],
    ["采样基准时间", "2024-01-08 00:00:00", "2024-01-08"],
    ["定时采样周期", "15", "1"],
    ["定时采样周期单位", "分", "日"],
    ["上报基准时间", "2024-01-08 01:30:00", ""],
    ["定时上报周期", "1", "1"],
    ["定时上报周期单位", "日", "1：时"],
    ["数据抽取倍率", "1", ""],
    ["测量点号", "1-3", ""],
    ["执行次数", "0", "300"],
    [
        "数据项",
        "05060101（上1次）日冻结正向有功电能、05060201（上1次）日冻结反向有功电能",
        "02010100 A相电压,02010200 B相电压",
    ],
]

# 映射表模板: 第2列的任务号来自下方映射表
MAPPING_ROWS: Rows = [
    ["集中器任务模板"],
    [""],
    ["任务名称", "日冻结", "曲线数据"],
    ["任务类型", "集中器任务", "表端任务"],
    ["数据结构方式", "1：按任务定义", "1：按任务定义"],
    ["采样基准时间", "2401080000", "2401080000"],
    ["定时采样周期", "1", "15"],
    ["定时采样周期单位", "日", "分"],
    ["上报基准时间", "2401080130", "2401080130"],
    ["定时上报周期", "1", "1"],
    ["定时上报周期单位", "日", "日"],
    ["测量点号", "1", "台区总表及分路表"],
    ["执行次数", "0", "0"],
    ["数据项", "05060101", "E1008030（上日）停电总次数"],
    ["测量点号", "任务号", "任务号"],
    ["1-50", "", "3"],
    ["51-100", "", "3"],
    ["说明：按台区分配"],
]


@pytest.fixture(autouse=True)
def _reset_app_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
output_directory: ./output
formats: [json, ini, template]
min_sheet_rows: 10
default_task_number: 45
logs_directory: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "extract.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def single_task_grid() -> list[list[str]]:
    return [list(map(str, r)) for r in SINGLE_TASK_ROWS]


@pytest.fixture()
def mapping_grid() -> list[list[str]]:
    return [list(map(str, r)) for r in MAPPING_ROWS]


def write_workbook(path: Path, sheets: dict[str, Rows | tuple[Rows, list[Merge]]]) -> Path:
    """Create a real .xlsx with openpyxl (merges applied after writing values)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet_name, content in sheets.items():
            rows, merges = content if isinstance(content, tuple) else (content, [])
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
            ws = writer.sheets[sheet_name]
            for r1, c1, r2, c2 in merges:
                ws.merge_cells(start_row=r1 + 1, start_column=c1 + 1, end_row=r2 + 1, end_column=c2 + 1)
    return path


@pytest.fixture()
def make_workbook() -> Callable[..., Path]:
    return write_workbook


@pytest.fixture()
def make_task() -> Callable[..., Task]:
    """Factory for Task records with sensible defaults."""

    def _make(
        task_number: int = 1,
        worksheet: str = "Sheet1",
        column_index: int = 1,
        measurement_points: str = "1-3",
        task_param: str = "01 00",
        **info_fields,
    ) -> Task:
        info_fields.setdefault("task_name", f"任务{task_number}")
        info = TaskInfo(**info_fields)
        points = tuple(parse_measurement_points(measurement_points))
        return Task(
            worksheet=worksheet,
            column_index=column_index,
            task_number=task_number,
            measurement_points=measurement_points,
            parsed_measurement_points=points,
            info=info,
            task_param=task_param,
        )

    return _make


@pytest.fixture()
def single_task_rows() -> Rows:
    return [list(r) for r in SINGLE_TASK_ROWS]


@pytest.fixture()
def mapping_rows() -> Rows:
    return [list(r) for r in MAPPING_ROWS]
