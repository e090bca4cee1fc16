"""Core dataclasses for the scheduling system."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any

from pertflow.exceptions import InvariantViolationError
from pertflow.models import Task
from pertflow.network import NetworkAnalysis


def _default_str_list() -> list[str]:
    return []


def _default_dict() -> dict[str, Any]:
    return {}


def _default_allocations() -> list[ResourceAllocation]:
    return []


def _default_overallocations() -> list[Overallocation]:
    return []


def inclusive_end(start: date, duration_days: int) -> date:
    """Last working day of a task that starts on ``start``."""
    return start + timedelta(days=duration_days - 1)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every day from start to end, both inclusive."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


@dataclass(frozen=True)
class ResourceAllocation:
    """One resource consumed by one task over an inclusive date range."""

    task_id: str
    resource_id: str
    start_date: date
    end_date: date


@dataclass(frozen=True)
class Overallocation:
    """A day on which a resource carries more tasks than it can."""

    resource_id: str
    day: date
    count: int
    capacity: int


@dataclass
class ScheduledTask:
    """A task that has been given concrete dates."""

    task_id: str
    start_date: date
    end_date: date
    duration_days: int
    resources: list[str]


@dataclass
class ScheduleResult:
    """Result of a scheduling run.

    ``tasks`` mirrors the input task list, in input order, with ``start`` and
    ``end`` populated. ``unresolved_overallocations`` is only filled by the
    leveler; overallocation is reported, never raised.
    """

    tasks: list[Task]
    allocations: list[ResourceAllocation] = field(default_factory=_default_allocations)
    unresolved_overallocations: list[Overallocation] = field(
        default_factory=_default_overallocations
    )
    warnings: list[str] = field(default_factory=_default_str_list)
    analysis: NetworkAnalysis | None = None
    metadata: dict[str, Any] = field(default_factory=_default_dict)

    @property
    def scheduled_tasks(self) -> list[ScheduledTask]:
        """Scheduled view of every task."""
        result: list[ScheduledTask] = []
        for task in self.tasks:
            if task.start is None or task.end is None:
                raise InvariantViolationError(f"Task '{task.id}' has no scheduled dates")
            result.append(
                ScheduledTask(
                    task_id=task.id,
                    start_date=task.start,
                    end_date=task.end,
                    duration_days=task.duration,
                    resources=list(task.resources),
                )
            )
        return result

    @property
    def project_start(self) -> date | None:
        """Earliest task start, if any task is scheduled."""
        starts = [task.start for task in self.tasks if task.start is not None]
        return min(starts) if starts else None

    @property
    def project_end(self) -> date | None:
        """Latest task end, if any task is scheduled."""
        ends = [task.end for task in self.tasks if task.end is not None]
        return max(ends) if ends else None

    def get_task(self, task_id: str) -> Task | None:
        """Get a scheduled task by id."""
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def allocations_for(self, resource_id: str) -> list[ResourceAllocation]:
        """Allocations of one resource, in schedule order."""
        return [a for a in self.allocations if a.resource_id == resource_id]
