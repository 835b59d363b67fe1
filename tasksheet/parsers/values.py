from __future__ import annotations

import math
import re

"""Field value parsers for free-text task template cells.

Every parser here is total: it never raises, and returns a neutral value
(None, "" or a documented default) for text it cannot interpret, so one
malformed cell never aborts extraction of the rest of a task or sheet.
"""

__all__ = [
    "parse_int_prefix",
    "parse_number_cell",
    "parse_task_number_cell",
    "parse_data_structure_type",
    "parse_period_value",
    "parse_period_unit",
    "parse_extraction_ratio",
    "parse_time_format",
    "parse_measurement_points",
    "DEFAULT_MEASUREMENT_POINTS",
]

_LEADING_CODE = re.compile(r"^(\d+)[：:]")
_FIRST_DIGITS = re.compile(r"(\d+)")
_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_NON_DIGIT = re.compile(r"\D")
_NON_POINT_CHARS = re.compile(r"[^\d\-]")
_POINT_SEPARATORS = re.compile(r"[,，]")

# 测量点号为空时默认测量点1
DEFAULT_MEASUREMENT_POINTS = (1,)

# 0:分 1:时 2:日 3:月
_UNIT_KEYWORDS: tuple[tuple[tuple[str, ...], int], ...] = (
    (("分",), 0),
    (("小时", "时"), 1),
    (("日",), 2),
    (("月",), 3),
)


def parse_int_prefix(value: str | None) -> int | None:
    """Leading (optionally signed) integer of ``value``; None when absent.

    "12" -> 12, " 7次" -> 7, "3.9" -> 3, "abc" -> None.
    """
    if not value:
        return None
    m = _INT_PREFIX.match(value)
    return int(m.group(1)) if m else None


def parse_number_cell(value: str | None) -> float | None:
    """Whole-cell numeric value, or None when the cell is not a plain number."""
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_task_number_cell(value: str | None) -> int | None:
    """Task number written in a mapping-table cell.

    Only numeric, non-zero cells count as an assignment; everything else
    (blank, "0", free text) means "this column has no task on this row".
    """
    number = parse_number_cell(value)
    if number is None or number == 0:
        return None
    return int(number)


def parse_data_structure_type(value: str) -> int | None:
    """'1：按任务定义' -> 1, '自描述格式' -> 0, otherwise None."""
    if not value:
        return None
    m = _LEADING_CODE.match(value)
    if m:
        return int(m.group(1))
    if "自描述" in value:
        return 0
    return None


def parse_period_value(value: str) -> int | None:
    """First run of digits anywhere in the text ('15分钟' -> 15)."""
    if not value:
        return None
    m = _FIRST_DIGITS.search(value)
    return int(m.group(1)) if m else None


def parse_period_unit(value: str) -> int | None:
    """Period unit code: leading 'N:' wins, else 分/小时|时/日/月 -> 0/1/2/3."""
    if not value:
        return None
    m = _LEADING_CODE.match(value)
    if m:
        return int(m.group(1))
    lowered = value.lower()
    for keywords, code in _UNIT_KEYWORDS:
        if any(k in lowered for k in keywords):
            return code
    return None


def parse_extraction_ratio(value: str) -> int | None:
    if not value:
        return None
    m = _FIRST_DIGITS.search(value)
    return int(m.group(1)) if m else None


def parse_time_format(value: str) -> str:
    """Normalize a date/time cell to the 10-digit ``YYMMDDhhmm`` form.

    Non-digits are stripped first, then the digit count decides:
      10 -> as is, 12 -> drop century, 14 -> drop century and seconds,
      8 -> append minutes "00", 6 -> append "0000", 4 -> append "010000".
    Other lengths: >=12 drop the century and truncate to 10; 6..11 right-pad
    with '0' to 10; shorter strings are ambiguous and returned unchanged.
    """
    if not value:
        return ""
    digits = _NON_DIGIT.sub("", value)
    if not digits:
        return ""

    n = len(digits)
    if n == 10:
        return digits
    if n == 12:
        return digits[2:]
    if n == 14:
        return digits[2:12]
    if n == 8:
        return digits + "00"
    if n == 6:
        return digits + "0000"
    if n == 4:
        return digits + "010000"
    if n >= 12:
        return digits[2:12]
    if n >= 6:
        return digits.ljust(10, "0")[:10]
    return digits


def parse_measurement_points(value: str | None) -> list[int]:
    """Expand measurement point labels into a sorted list of unique ids.

    Parts are separated by half/full-width commas. Within a part everything
    except digits and '-' is dropped, so '测量点2' -> 2 and '251-253' ->
    251, 252, 253. Reversed or half-open ranges are ignored. Empty input means
    the default point 1.
    """
    if not value:
        return list(DEFAULT_MEASUREMENT_POINTS)

    points: set[int] = set()
    for part in _POINT_SEPARATORS.split(value):
        part = part.strip()
        if not part:
            continue
        clean = _NON_POINT_CHARS.sub("", part)
        if "-" in clean:
            bounds = clean.split("-")
            start = parse_int_prefix(bounds[0])
            end = parse_int_prefix(bounds[1])
            if start is not None and end is not None and start <= end:
                points.update(range(start, end + 1))
        else:
            point = parse_int_prefix(clean)
            if point is not None:
                points.add(point)
    return sorted(points)
