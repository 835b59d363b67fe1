from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from ..models.task import Task

"""Search mini-language over extracted tasks.

    taskid:7 sheet:Sheet1 电压

``key:value`` tokens are field filters, everything else is a general term.
Values of a repeated key are OR-ed; different keys and general terms are
AND-ed. Matching is case-insensitive. A filter with an unrecognized key
matches nothing.
"""

__all__ = [
    "SearchFilters",
    "parse_search_query",
    "matches_search_criteria",
    "filter_tasks",
]

_KEY_VALUE = re.compile(r"([A-Za-z0-9_]+):(\S+)")

_Matcher = Callable[[Task, str], bool]


def _exact(getter: Callable[[Task], object]) -> _Matcher:
    def match(task: Task, value: str) -> bool:
        actual = getter(task)
        return actual is not None and str(actual) == value
    return match


def _substring(getter: Callable[[Task], str]) -> _Matcher:
    return lambda task, value: value in getter(task).lower()


_TASK_ID = _exact(lambda t: t.task_number)
_NAME = _substring(lambda t: t.info.task_name)
_SHEET = _substring(lambda t: t.worksheet)
_TYPE = _substring(lambda t: t.info.task_type)
_POINTS = _substring(lambda t: t.measurement_points)
_COUNT = _exact(lambda t: t.measurement_points_count)
_DATA = _exact(lambda t: len(t.info.data_items))
_PERIOD = _exact(lambda t: t.info.sampling_period)
_REPORT = _exact(lambda t: t.info.report_period)
_COLUMN = _exact(lambda t: t.column_index)

_MATCHERS: dict[str, _Matcher] = {
    "taskid": _TASK_ID,
    "id": _TASK_ID,
    "task": _TASK_ID,
    "name": _NAME,
    "taskname": _NAME,
    "sheet": _SHEET,
    "worksheet": _SHEET,
    "type": _TYPE,
    "tasktype": _TYPE,
    "points": _POINTS,
    "measurement": _POINTS,
    "count": _COUNT,
    "pointcount": _COUNT,
    "data": _DATA,
    "dataitems": _DATA,
    "period": _PERIOD,
    "sampling": _PERIOD,
    "report": _REPORT,
    "col": _COLUMN,
    "column": _COLUMN,
}


@dataclass(frozen=True)
class SearchFilters:
    filters: dict[str, list[str]] = field(default_factory=dict)  # lower-cased key -> lower-cased values
    general_terms: list[str] = field(default_factory=list)


def parse_search_query(query: str) -> SearchFilters:
    filters: dict[str, list[str]] = {}
    if not query or not query.strip():
        return SearchFilters()
    for m in _KEY_VALUE.finditer(query):
        filters.setdefault(m.group(1).lower(), []).append(m.group(2).lower())
    rest = _KEY_VALUE.sub(" ", query)
    return SearchFilters(filters=filters, general_terms=rest.split())


def _searchable_text(task: Task) -> str:
    info = task.info
    return " ".join(
        [
            str(task.task_number),
            info.task_name,
            info.task_type,
            task.worksheet,
            task.measurement_points,
            info.data_items_original,
            " ".join(info.data_items.keys()),
            " ".join(info.data_items.values()),
        ]
    ).lower()


def matches_search_criteria(task: Task, filters: dict[str, list[str]], general_terms: list[str]) -> bool:
    for key, values in filters.items():
        matcher = _MATCHERS.get(key)
        if matcher is None or not any(matcher(task, v) for v in values):
            return False
    if general_terms:
        text = _searchable_text(task)
        return all(term.lower() in text for term in general_terms)
    return True


def filter_tasks(tasks: Iterable[Task], query: str) -> list[Task]:
    """Tasks matching ``query`` in their original order; an empty query keeps all."""
    parsed = parse_search_query(query)
    return [t for t in tasks if matches_search_criteria(t, parsed.filters, parsed.general_terms)]
