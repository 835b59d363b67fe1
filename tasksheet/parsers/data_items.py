from __future__ import annotations

import re
from collections.abc import Callable

"""Data-item catalog parser.

Template authors describe the data items of a task as free text mixing 4-byte
data identifiers (8 hex digits) with Chinese descriptions, in several
incompatible conventions, e.g.

    E1008030（上日）停电总次数、E1008031（上日）停电总时间
    05060101、05060102；日冻结正向有功电能
    02010100 A相电压,02020100 A相电流
    02030300C相有功功率

parse_data_items() tries an ordered list of strategies and returns the result
of the first one that finds at least one identifier. The cascade is
best-effort: free text can still split at the wrong boundary.
"""

__all__ = [
    "parse_data_items",
    "pad_data_item_id",
]

DataItems = dict[str, str]

_STANDARD = re.compile(r"([A-Fa-f0-9]{8})[（(][^)）]*[)）]([^、,，；;]+)")
_HEX_RUN = re.compile(r"([A-Fa-f0-9]{6,8})(?![A-Fa-f0-9])")
_HEX8_RUN = re.compile(r"([A-Fa-f0-9]{8})(?![A-Fa-f0-9])")
_SEGMENT_SEP = re.compile(r"[；;]")
_ITEM_SEP = re.compile(r"[、,，；;]")
_SENTENCE_SEP = re.compile(r"[；;。\n\r]")

# 描述两端的分隔符
_SEGMENT_EDGE_HEAD = re.compile(r"^[\s、,，\u3000]+")
_SEGMENT_EDGE_TAIL = re.compile(r"[\s、,，\u3000]+$")
_ITEM_EDGE_HEAD = re.compile(r"^[\s、,，：:\-—–\u3000]+")
_ITEM_EDGE_TAIL = re.compile(r"[\s、,，：:\-—–\u3000]+$")
_SENTENCE_EDGE_HEAD = re.compile(r"^[\s、,，；;：:\-—–\u3000]+")
_SENTENCE_EDGE_TAIL = re.compile(r"[\s、,，；;：:\-—–\u3000]+$")

# (pattern, id builder) pairs tried in order on a single item
_ITEM_PATTERNS: tuple[tuple[re.Pattern[str], Callable[[str], str]], ...] = (
    # "02010100 A相电压"
    (re.compile(r"^([0-9A-Fa-f]{8})\s+(.+)$"), lambda s: s.upper()),
    # "02030300C相有功功率"
    (re.compile(r"^([0-9]{8})([A-Za-z\u4e00-\u9fff].*)$"), lambda s: s.upper()),
    # 7 digits + one hex letter before the text; id padded to 8
    (re.compile(r"^([0-9]{7})[A-Fa-f]([A-Za-z\u4e00-\u9fff].*)$"), lambda s: ("0" + s).upper()),
    # generic 6-8 hex digits followed by a non-hex tail
    (re.compile(r"^([0-9A-Fa-f]{6,8})([^0-9A-Fa-f].*)$"), lambda s: s.rjust(8, "0").upper()),
)


def pad_data_item_id(hex_id: str) -> str:
    """Left-pad an identifier to 8 hex digits and upper-case it."""
    return hex_id.rjust(8, "0").upper()


def _strip(text: str, head: re.Pattern[str], tail: re.Pattern[str]) -> str:
    return tail.sub("", head.sub("", text)).strip()


def _parse_standard(value: str) -> DataItems:
    items: DataItems = {}
    for m in _STANDARD.finditer(value):
        items[m.group(1).upper()] = m.group(2).strip()
    return items


def _parse_segments(value: str) -> DataItems:
    """';'-separated segments; every id in a segment shares its description."""
    items: DataItems = {}
    for segment in _SEGMENT_SEP.split(value):
        segment = segment.strip()
        if not segment:
            continue
        ids = [pad_data_item_id(m.group(1)) for m in _HEX_RUN.finditer(segment)]
        if not ids:
            continue
        description = _strip(_HEX_RUN.sub("", segment), _SEGMENT_EDGE_HEAD, _SEGMENT_EDGE_TAIL)
        if description:
            for hex_id in ids:
                items[hex_id] = description
    return items


def _parse_items(value: str) -> DataItems:
    """Separator-delimited items, each "<id><description>"."""
    items: DataItems = {}
    for item in _ITEM_SEP.split(value):
        item = item.strip()
        if not item:
            continue
        for pattern, build_id in _ITEM_PATTERNS:
            m = pattern.match(item)
            if m:
                hex_id = build_id(m.group(1))
                description = _strip(m.group(2), _ITEM_EDGE_HEAD, _ITEM_EDGE_TAIL)
                if description:
                    items[hex_id] = description
                break
    return items


def _parse_positional(value: str) -> DataItems:
    """Description of an id is the text up to the next id."""
    items: DataItems = {}
    matches = list(_HEX_RUN.finditer(value))
    for idx, m in enumerate(matches):
        end = matches[idx + 1].start() if idx + 1 < len(matches) else len(value)
        description = _strip(value[m.end():end], _ITEM_EDGE_HEAD, _ITEM_EDGE_TAIL)
        if description:
            items[pad_data_item_id(m.group(1))] = description
    return items


def _parse_sentences(value: str) -> DataItems:
    items: DataItems = {}
    for segment in _SENTENCE_SEP.split(value):
        segment = segment.strip()
        if not segment:
            continue
        ids = [m.group(1).upper() for m in _HEX8_RUN.finditer(segment)]
        if not ids:
            continue
        description = _strip(_HEX8_RUN.sub("", segment), _SENTENCE_EDGE_HEAD, _SENTENCE_EDGE_TAIL)
        if description:
            for hex_id in ids:
                items[hex_id] = description
    return items


def _parse_bare_ids(value: str) -> DataItems:
    return {m.group(1).upper(): "" for m in _HEX8_RUN.finditer(value)}


def parse_data_items(value: str) -> DataItems:
    """Parse a data-item cell into an ordered ``{8-hex id: description}`` map.

    Strategies, first non-empty result wins:
      1. ``XXXXXXXX（…）description`` repeated
      2. text containing '；'/';': per-segment ids share the segment text
         (otherwise per-item id/description split, falling back to a
         positional split over the whole string)
      3. sentence segments with exactly-8-digit ids
      4. bare 8-digit ids with empty descriptions
    Never raises; returns {} for text without identifiers.
    """
    if not value:
        return {}

    items = _parse_standard(value)
    if items:
        return items

    if _SEGMENT_SEP.search(value):
        items = _parse_segments(value)
    else:
        items = _parse_items(value)
        if not items:
            items = _parse_positional(value)
    if items:
        return items

    items = _parse_sentences(value)
    if items:
        return items

    return _parse_bare_ids(value)
