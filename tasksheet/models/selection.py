from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .task import Task, task_key

"""TaskSelection value object.

Selection state is an explicit set of task identity keys owned by the caller.
Every operation returns a new TaskSelection; nothing is mutated in place.
"""

__all__ = [
    "TaskSelection",
]


@dataclass(frozen=True)
class TaskSelection:
    keys: frozenset[str] = field(default_factory=frozenset)

    def __len__(self) -> int:
        return len(self.keys)

    def contains(self, task: Task) -> bool:
        return task_key(task) in self.keys

    def add(self, task: Task) -> TaskSelection:
        return TaskSelection(self.keys | {task_key(task)})

    def remove(self, task: Task) -> TaskSelection:
        return TaskSelection(self.keys - {task_key(task)})

    def toggle(self, task: Task) -> TaskSelection:
        if self.contains(task):
            return self.remove(task)
        return self.add(task)

    def toggle_all(self, tasks: Iterable[Task]) -> TaskSelection:
        """Select every task in ``tasks``; if all are already selected, deselect them."""
        visible = {task_key(t) for t in tasks}
        if visible and visible <= self.keys:
            return TaskSelection(self.keys - visible)
        return TaskSelection(self.keys | visible)

    def clear(self) -> TaskSelection:
        return TaskSelection()

    def selected(self, tasks: Iterable[Task]) -> list[Task]:
        """Tasks from ``tasks`` that are selected, in their original order."""
        return [t for t in tasks if task_key(t) in self.keys]
