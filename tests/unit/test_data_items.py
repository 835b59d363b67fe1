from __future__ import annotations

import pytest

from tasksheet.parsers.data_items import pad_data_item_id, parse_data_items

"""Data-item parser against strings taken from real task templates."""


def test_standard_format_with_parenthesised_qualifier():
    items = parse_data_items("E1008030（上日）停电总次数、E1008031（上日）停电总时间")
    assert items == {"E1008030": "停电总次数", "E1008031": "停电总时间"}


def test_standard_format_half_width_parentheses():
    items = parse_data_items("05060101(上1次)日冻结正向有功电能,05060201(上1次)日冻结反向有功电能")
    assert list(items) == ["05060101", "05060201"]
    assert items["05060201"] == "日冻结反向有功电能"


def test_segments_share_description():
    items = parse_data_items("05060101、05060102 日冻结正向有功电能；05060201 日冻结反向有功电能")
    assert items == {
        "05060101": "日冻结正向有功电能",
        "05060102": "日冻结正向有功电能",
        "05060201": "日冻结反向有功电能",
    }


def test_segments_pad_short_ids():
    items = parse_data_items("060101 日冻结正向有功;060201 日冻结反向有功")
    assert items == {"00060101": "日冻结正向有功", "00060201": "日冻结反向有功"}


def test_items_with_space_between_id_and_text():
    items = parse_data_items("02010100 A相电压,02010200 B相电压，02010300 C相电压")
    assert items == {
        "02010100": "A相电压",
        "02010200": "B相电压",
        "02010300": "C相电压",
    }


def test_items_with_text_glued_to_id():
    items = parse_data_items("02030300C相有功功率、02030000总有功功率")
    assert items == {"02030300": "C相有功功率", "02030000": "总有功功率"}


def test_hex_ids_are_upper_cased():
    items = parse_data_items("e1008030 停电事件")
    assert items == {"E1008030": "停电事件"}


def test_positional_fallback_when_items_do_not_start_with_id():
    items = parse_data_items("抄读：05060101正向有功总电能 05060201反向有功总电能")
    assert items == {"05060101": "正向有功总电能", "05060201": "反向有功总电能"}


def test_sentence_fallback_uses_text_before_id():
    assert parse_data_items("日冻结正向有功电能05060101") == {"05060101": "日冻结正向有功电能"}


def test_bare_ids_get_empty_descriptions():
    assert parse_data_items("05060101") == {"05060101": ""}
    assert parse_data_items("05060101、05060102；") == {"05060101": "", "05060102": ""}


def test_discovery_order_is_preserved():
    items = parse_data_items("02010300 C相电压,02010100 A相电压")
    assert list(items) == ["02010300", "02010100"]


@pytest.mark.parametrize("raw", ["", "无", "按主站召测", "见附表"])
def test_text_without_ids_yields_empty_mapping(raw):
    assert parse_data_items(raw) == {}


def test_pad_data_item_id():
    assert pad_data_item_id("1ff") == "000001FF"
    assert pad_data_item_id("05060101") == "05060101"
