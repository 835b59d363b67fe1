from __future__ import annotations

from collections.abc import Iterable

from ..models.task import TaskInfo
from ..parsers.data_items import pad_data_item_id
from ..parsers.values import parse_int_prefix, parse_measurement_points

"""Binary task-parameter encoder.

Serializes a TaskInfo plus a measurement-point set into the fixed-layout byte
sequence consumed by the firmware provisioning tools:

    offset  size  field
    0       1     validity flag (always 1)
    1       5     report base time, BCD, minute first (YYMMDDhhmm reversed)
    6       1     report period unit (0..3)
    7       1     report period
    8       1     data structure type
    9       5     sampling base time, BCD, minute first
    14      1     sampling period unit
    15      1     sampling period
    16      1     extraction ratio (default 1)
    17      2     execution count, little-endian
    19      1     measurement point count n
    20      2*n   DA-encoded point ids, ascending, low byte first
    ..      1     data item count m
    ..      4*m   data item ids, byte-reversed

Reversed BCD groups and reversed id bytes are part of the wire format and
must be preserved byte for byte. The encoder is a pure function and never
raises: missing fields fall back to their defaults.
"""

__all__ = [
    "FIXED_HEADER_SIZE",
    "to_da",
    "to_bcd",
    "time_to_bcd_bytes",
    "data_item_id_bytes",
    "generate_task_param",
    "format_task_param",
]

VALIDITY_FLAG = 1
DEFAULT_EXTRACTION_RATIO = 1
# flag + 2 * (time(5) + unit + period) + structure + ratio + exec count(2)
# + point count + item count
FIXED_HEADER_SIZE = 1 + 5 + 1 + 1 + 1 + 5 + 1 + 1 + 1 + 2 + 1 + 1

PointSelector = str | Iterable[int] | None


def to_da(value: int) -> tuple[int, int]:
    """Encode a 1-based measurement point id as a DA (block, bit) pair.

    The high byte is the 8-point block number (block 1 holds points 1..8),
    the low byte has a single bit set for the point's position in the block.
    0 and 0xFFFF are the reserved "no point" / "all points" values.
    """
    if value == 0xFFFF:
        return 0xFF, 0xFF
    if value == 0:
        return 0x00, 0x00
    low = (value - 1) % 8
    high = (value - 1) // 8
    ret = ((high + 1) << 8) | (1 << low)
    return ret & 0xFF, (ret >> 8) & 0xFF


def to_bcd(value: int) -> int:
    """Decimal 0..99 -> one BCD byte (tens in the high nibble); >99 wraps mod 100."""
    value %= 100
    return ((value // 10) << 4) | (value % 10)


def time_to_bcd_bytes(time_str: str) -> list[int]:
    """'2401081230' -> [0x24, 0x01, 0x08, 0x12, 0x30] (not yet reversed).

    Strings shorter than 10 characters encode as five zero bytes.
    """
    if not time_str or len(time_str) < 10:
        return [0, 0, 0, 0, 0]
    groups = []
    for i in range(0, 10, 2):
        number = parse_int_prefix(time_str[i:i + 2])
        groups.append(to_bcd(number or 0))
    return groups


def data_item_id_bytes(hex_id: str) -> list[int]:
    """4 bytes of a data item id in wire order (last byte of the id first)."""
    padded = pad_data_item_id(hex_id)
    try:
        raw = bytes.fromhex(padded) if len(padded) == 8 else b""
    except ValueError:
        raw = b""
    if len(raw) != 4:
        return [0, 0, 0, 0]
    return list(reversed(raw))


def _u8(value: int | None, default: int = 0) -> int:
    return (default if value is None else value) & 0xFF


def _resolve_points(info: TaskInfo, points: PointSelector) -> list[int]:
    if points is None:
        return parse_measurement_points(info.measurement_point_id)
    if isinstance(points, str):
        return parse_measurement_points(points or info.measurement_point_id)
    return sorted(set(points))


def generate_task_param(info: TaskInfo, points: PointSelector = None) -> bytes:
    """Encode ``info`` for the given measurement points.

    Args:
        info: parsed task column
        points: range label string ("1-50, 51-100"), explicit point ids, or
            None to use ``info.measurement_point_id``

    Returns:
        The task parameter bytes; identical inputs give identical output.
    """
    out = bytearray()
    out.append(VALIDITY_FLAG)
    out.extend(reversed(time_to_bcd_bytes(info.report_base_time)))
    out.append(_u8(info.report_period_unit))
    out.append(_u8(info.report_period))
    out.append(_u8(info.data_structure_type))
    out.extend(reversed(time_to_bcd_bytes(info.sampling_base_time)))
    out.append(_u8(info.sampling_period_unit))
    out.append(_u8(info.sampling_period))
    out.append(_u8(info.extraction_ratio, DEFAULT_EXTRACTION_RATIO))

    # 0 = 永久执行
    exec_count = parse_int_prefix(info.execution_count) or 0
    out.append(exec_count & 0xFF)
    out.append((exec_count >> 8) & 0xFF)

    point_ids = _resolve_points(info, points)
    out.append(len(point_ids) & 0xFF)
    for point_id in point_ids:
        out.extend(to_da(point_id))

    out.append(len(info.data_items) & 0xFF)
    for hex_id in info.data_items:
        out.extend(data_item_id_bytes(hex_id))
    return bytes(out)


def format_task_param(data: bytes) -> str:
    """b'\\x01\\x30' -> '01 30'."""
    return " ".join(f"{b:02X}" for b in data)
