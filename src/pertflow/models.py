"""Data models for pertflow."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .resources import Resource

MIN_PROGRESS = 0
MAX_PROGRESS = 100


@dataclass(frozen=True)
class Task:
    """A unit of work in the project network.

    Dependencies are finish-to-start: every listed predecessor must finish
    before this task may start. ``start``/``end`` are only populated on the
    copies returned by a scheduler; the engine never changes a task's identity.
    """

    id: str
    name: str
    duration: int  # Working length in days
    dependencies: tuple[str, ...] = ()
    resources: tuple[str, ...] = ()
    progress: int = 0  # 0-100, advisory only
    start: date | None = None
    end: date | None = None  # Inclusive

    def with_dates(self, start: date, end: date) -> Task:
        """Return a copy of this task with concrete start/end dates."""
        return replace(self, start=start, end=end)


def _default_tasks() -> list[Task]:
    return []


def _default_resources() -> list[Resource]:
    return []


@dataclass
class Project:
    """A named task list plus the resources its tasks consume."""

    name: str = "Untitled project"
    tasks: list[Task] = field(default_factory=_default_tasks)
    resources: list[Resource] = field(default_factory=_default_resources)
    start_date: date | None = None
    deadline: date | None = None

    def get_task_by_id(self, task_id: str) -> Task | None:
        """Get a task by its id."""
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def get_all_ids(self) -> set[str]:
        """Get the ids of all tasks."""
        return {task.id for task in self.tasks}
