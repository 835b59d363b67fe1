from __future__ import annotations

import json
import re
from pathlib import Path

import pytest

from tasksheet.cli.__main__ import main as cli_main
from tasksheet.config.loader import CONFIG_ENV_VAR

"""End-to-end run over real workbooks: two files, several sheets, merged cells."""

# 任务名称/任务类型 横跨两列合并, 两列由映射表分配不同任务号
MERGED_ROWS = [
    ["集中器任务模板"],
    ["任务名称", "电压曲线", ""],
    ["任务类型", "集中器任务", ""],
    ["数据结构方式", "1：按任务定义", "1：按任务定义"],
    ["采样基准时间", "2401080000", "2401080000"],
    ["定时采样周期", "15", "15"],
    ["定时采样周期单位", "分", "分"],
    ["上报基准时间", "2401080100", "2401080100"],
    ["定时上报周期", "1", "1"],
    ["定时上报周期单位", "日", "日"],
    ["测量点号", "台区总表", "分路表"],
    ["数据项", "02010100 A相电压", "02010200 B相电压"],
    ["测量点号", "任务号", "任务号"],
    ["1-8", "10", ""],
    ["9-16", "10", "11"],
    ["备注：分路表仅9-16"],
]
MERGED_REGIONS = [(0, 0, 0, 2), (1, 1, 1, 2), (2, 1, 2, 2)]


@pytest.fixture
def two_workbooks(temp_workdir: Path, write_config: Path, make_workbook, single_task_rows, mapping_rows, monkeypatch):
    monkeypatch.setenv(CONFIG_ENV_VAR, "placeholder")
    monkeypatch.delenv(CONFIG_ENV_VAR)
    data_dir = temp_workdir / "data"
    make_workbook(data_dir / "a.xlsx", {"单任务": single_task_rows, "映射": mapping_rows})
    make_workbook(data_dir / "b.xlsx", {"合并": (MERGED_ROWS, MERGED_REGIONS)})
    return temp_workdir


def test_run_success_summary_and_exports(two_workbooks: Path, capsys):
    code = cli_main([])
    out = capsys.readouterr().out

    assert code == 0
    assert re.search(r"^SUMMARY files=2/2 success=2 failed=0 sheets=3 tasks=6 elapsed_sec=\S+$", out, re.M)
    outputs = sorted(p.name for p in (two_workbooks / "output").iterdir())
    assert outputs == [
        "a_task_template.json",
        "a_tasks.json",
        "a_tasks.txt",
        "b_task_template.json",
        "b_tasks.json",
        "b_tasks.txt",
    ]
    assert not list((two_workbooks / "logs").iterdir())


def test_merged_columns_share_name_and_get_mapped_numbers(two_workbooks: Path):
    assert cli_main([]) == 0
    data = json.loads((two_workbooks / "output" / "b_tasks.json").read_text(encoding="utf-8"))
    tasks = data["合并"]

    assert [(t["columnIndex"], t["taskNumber"]) for t in tasks] == [(1, 10), (2, 11)]
    assert [t["taskName"] for t in tasks] == ["电压曲线", "电压曲线"]
    assert [t["taskType"] for t in tasks] == ["集中器任务", "集中器任务"]
    assert tasks[0]["measurementPoints"] == "1-8, 9-16"
    assert tasks[0]["measurementPointsCount"] == 16
    assert tasks[1]["parsedMeasurementPoints"] == list(range(9, 17))

    param = tasks[0]["taskParam"].split()
    assert param[19] == "10"  # 16 points
    # points 1..8 share DA block 1, points 9..16 block 2
    assert param[20:22] == ["01", "01"]
    assert param[34:36] == ["80", "01"]
    assert param[36:38] == ["01", "02"]


def test_template_groups_by_task_kind(two_workbooks: Path):
    assert cli_main([]) == 0
    template = json.loads((two_workbooks / "output" / "a_task_template.json").read_text(encoding="utf-8"))

    # 单任务: 表端任务(1) + 集中器任务(2); 映射: 集中器任务(45) + 表端任务(3)
    assert sorted(t["TaskId"] for t in template["MeterTask"]) == [1, 3]
    assert sorted(t["TaskId"] for t in template["BaseTask"]) == [2, 45]
    assert all(" " not in t["TaskParam"] for t in template["BaseTask"] + template["MeterTask"])


def test_ini_report_lists_every_task(two_workbooks: Path):
    assert cli_main([]) == 0
    text = (two_workbooks / "output" / "a_tasks.txt").read_text(encoding="utf-8")
    assert "工作表: 单任务" in text
    assert "工作表: 映射" in text
    assert text.count("---------- 任务 ") == 4
    assert '"测量点号": "1-50, 51-100",' in text
