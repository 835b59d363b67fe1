from __future__ import annotations

from tasksheet.excel.structure import analyze_structure
from tasksheet.models.structure import SheetStructure
from tasksheet.services.extractor import extract_task_info, find_measurement_point_id, is_boilerplate


def test_extract_single_task_column(single_task_grid):
    structure = analyze_structure(single_task_grid)
    info = extract_task_info(single_task_grid, 1, structure)

    assert info.task_name == "日冻结电能"
    assert info.task_type == "表端任务"
    assert info.data_structure_type == 1
    assert info.data_structure_type_original == "1：按任务定义"
    assert info.sampling_base_time == "2401080000"
    assert info.sampling_base_time_original == "2024-01-08 00:00:00"
    assert info.sampling_period == 15
    assert info.sampling_period_unit == 0
    assert info.report_base_time == "2401080130"
    assert info.report_period == 1
    assert info.report_period_unit == 2
    assert info.extraction_ratio == 1
    assert info.measurement_point_id == "1-3"
    assert info.execution_count == "0"
    assert info.data_items == {
        "05060101": "日冻结正向有功电能",
        "05060201": "日冻结反向有功电能",
    }
    assert info.task_param == ""


def test_extract_second_column_with_blank_cells(single_task_grid):
    structure = analyze_structure(single_task_grid)
    info = extract_task_info(single_task_grid, 2, structure)

    assert info.data_structure_type == 0
    assert info.sampling_base_time == "2024010800"
    assert info.report_base_time == ""
    assert info.report_period_unit == 1
    assert info.extraction_ratio is None
    assert info.extraction_ratio_original == ""
    assert info.measurement_point_id == ""
    assert info.execution_count == "300"
    assert list(info.data_items) == ["02010100", "02010200"]


def test_all_rows_absent_gives_empty_info():
    grid = [["x", "y"]]
    info = extract_task_info(grid, 1, SheetStructure())
    assert info.task_type == ""
    assert info.data_structure_type is None
    assert info.sampling_period is None
    assert info.sampling_base_time == ""
    assert info.data_items == {}
    # name falls back to row 0 of the column
    assert info.task_name == "y"


def test_task_name_label_echo_is_rejected():
    grid = [
        ["集中器任务模板", "集中器任务模板"],
        ["任务名称", "任务名称"],
        ["任务类型", "集中器任务"],
    ]
    structure = analyze_structure(grid)
    info = extract_task_info(grid, 1, structure)
    assert info.task_name == ""


def test_task_name_found_above_task_type_row():
    grid = [
        ["集中器任务模板", "集中器任务模板"],
        ["", "月冻结电能"],
        ["任务类型", "集中器任务"],
    ]
    structure = analyze_structure(grid)
    assert structure.task_name_row == -1
    info = extract_task_info(grid, 1, structure)
    assert info.task_name == "月冻结电能"


def test_task_name_from_row_1_when_row_0_is_boilerplate():
    grid = [
        ["模板", "xx模板"],
        ["", "事件任务"],
    ]
    info = extract_task_info(grid, 1, SheetStructure())
    assert info.task_name == "事件任务"


def test_measurement_point_id_skips_combined_task_name_row():
    grid = [
        ["测量点号", "日冻结"],
        ["任务类型", "集中器任务"],
        ["测量点号", "1-8"],
    ]
    structure = SheetStructure(task_name_row=0, task_type_row=1, measurement_point_row=0)
    assert find_measurement_point_id(grid, 1, structure) == "1-8"


def test_measurement_point_id_ignores_rows_after_20():
    grid = [["任务名称", "a"]] + [[""] for _ in range(20)] + [["测量点号", "5"]]
    structure = analyze_structure(grid)
    assert find_measurement_point_id(grid, 1, structure) == ""


def test_is_boilerplate():
    assert is_boilerplate("集中器任务模板")
    assert is_boilerplate("任务名称")
    assert is_boilerplate("测量点号")
    assert not is_boilerplate("日冻结电能")
