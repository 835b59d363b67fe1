from __future__ import annotations

import json

import pytest

from tasksheet.models.processing_result import ExtractionResult, ExtractionStats
from tasksheet.services.exporters import (
    classify_task_kind,
    to_ini,
    to_json,
    to_task_template,
    write_exports,
)


def _result(tasks_by_sheet):
    return ExtractionResult(
        file_name="templates.xlsx",
        tasks_by_sheet=tasks_by_sheet,
        stats=ExtractionStats.from_tasks(list(tasks_by_sheet), tasks_by_sheet),
    )


def test_to_json_uses_camel_case_keys(make_task):
    task = make_task(task_number=3, measurement_points="1-2", task_type="表端任务")
    payload = json.loads(to_json({"S1": [task]}))
    entry = payload["S1"][0]
    assert entry["taskNumber"] == 3
    assert entry["measurementPoints"] == "1-2"
    assert entry["parsedMeasurementPoints"] == [1, 2]
    assert entry["measurementPointsCount"] == 2
    assert entry["taskType"] == "表端任务"
    assert entry["taskParam"] == "01 00"
    assert entry["dataStructureType"] is None


def test_to_json_keeps_non_ascii_text(make_task):
    text = to_json({"日冻结": [make_task(task_name="日冻结电能")]})
    assert "日冻结电能" in text


def test_to_ini_block_layout(make_task):
    task = make_task(
        task_number=7,
        worksheet="S1",
        data_items={"05060101": "日冻结正向有功电能", "05060201": ""},
        sampling_period=15,
    )
    text = to_ini({"S1": [task]})
    lines = text.split("\n")

    assert lines[0] == "=" * 60
    assert lines[1] == "工作表: S1"
    assert "---------- 任务 1 ----------" in lines
    assert '    "任务号": 7,' in lines
    assert '    "工作表": "S1",' in lines
    assert '    "定时采样周期": "15",' in lines
    assert '    "数据结构方式": "null",' in lines
    assert '    "数据项": "05060101:日冻结正向有功电能, 05060201:",' in lines
    # last field has no trailing comma
    assert '    "任务参数": "01 00"' in lines


def test_to_ini_numbers_blocks_per_sheet(make_task):
    text = to_ini({"A": [make_task(1), make_task(2)], "B": [make_task(3)]})
    assert text.count("---------- 任务 1 ----------") == 2
    assert text.count("---------- 任务 2 ----------") == 1


def test_classify_task_kind(make_task):
    assert classify_task_kind(make_task(task_type="表端任务")) == "MeterTask"
    assert classify_task_kind(make_task(task_type="Meter task")) == "MeterTask"
    assert classify_task_kind(make_task(task_type="集中器任务")) == "BaseTask"
    assert classify_task_kind(make_task(task_type="")) == "BaseTask"


def test_to_task_template_strips_whitespace(make_task):
    tasks = [
        make_task(1, task_type="集中器任务", task_param="01 02 03"),
        make_task(2, task_type="表端任务", task_param="0A 0B"),
    ]
    assert to_task_template(tasks) == {
        "BaseTask": [{"TaskId": 1, "TaskParam": "010203"}],
        "MeterTask": [{"TaskId": 2, "TaskParam": "0A0B"}],
    }


def test_to_task_template_always_has_both_groups():
    assert to_task_template([]) == {"BaseTask": [], "MeterTask": []}


def test_write_exports_names_files_after_workbook(tmp_path, make_task):
    result = _result({"S1": [make_task(1)]})
    paths = write_exports(result, tmp_path / "out", ["json", "ini", "template"])
    assert [p.name for p in paths] == [
        "templates_tasks.json",
        "templates_tasks.txt",
        "templates_task_template.json",
    ]
    assert all(p.exists() for p in paths)
    template = json.loads(paths[2].read_text(encoding="utf-8"))
    assert template["BaseTask"][0]["TaskId"] == 1


def test_write_exports_template_can_be_restricted(tmp_path, make_task):
    keep = make_task(1)
    result = _result({"S1": [keep, make_task(2)]})
    (template_path,) = write_exports(result, tmp_path, ["template"], tasks=[keep])
    template = json.loads(template_path.read_text(encoding="utf-8"))
    assert [t["TaskId"] for t in template["BaseTask"]] == [1]


def test_write_exports_rejects_unknown_format(tmp_path, make_task):
    with pytest.raises(ValueError, match="unknown export format"):
        write_exports(_result({"S1": [make_task(1)]}), tmp_path, ["csv"])
