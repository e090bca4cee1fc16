"""Greedy resource leveling within task slack."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import replace
from datetime import date, timedelta

from pertflow.exceptions import InvariantViolationError
from pertflow.logger import get_logger
from pertflow.models import Task
from pertflow.network import NetworkAnalysis, TaskValue
from pertflow.resources import ResourcePool

from .core import ResourceAllocation, ScheduleResult, inclusive_end
from .resources import ResourceUsage

logger = get_logger()

LEVELING_TAG = "greedy-slack"


class SlackWindows:
    """Allowed start offsets per task, narrowed as tasks are placed.

    Every task starts with the window [ES, LS]. Fixing a task at an offset
    raises the lower bound of all its descendants and lowers the upper bound
    of all its ancestors, so for every edge u -> v

        lower[v] >= lower[u] + duration[u]
        upper[u] <= upper[v] - duration[u]

    keeps holding. Any offset inside a task's window therefore keeps it in
    finish-to-start order with every task placed so far. As long as each task
    is fixed inside its own window, no unplaced task's window becomes empty.
    """

    def __init__(self, tasks: Iterable[Task], values: Mapping[str, TaskValue]):
        self._duration: dict[str, int] = {}
        self._predecessors: dict[str, list[str]] = {}
        self._successors: dict[str, list[str]] = {}
        self.lower: dict[str, int] = {}
        self.upper: dict[str, int] = {}
        self._fixed: set[str] = set()

        for task in tasks:
            self._duration[task.id] = task.duration
            self._predecessors[task.id] = list(dict.fromkeys(task.dependencies))
            self._successors.setdefault(task.id, [])
            self.lower[task.id] = values[task.id].es
            self.upper[task.id] = values[task.id].ls
        for task_id, preds in self._predecessors.items():
            for pred in preds:
                self._successors[pred].append(task_id)

    def window(self, task_id: str) -> range:
        """Start offsets still open to the task (empty only for inconsistent input)."""
        return range(self.lower[task_id], self.upper[task_id] + 1)

    def clamp(self, task_id: str, offset: int) -> int:
        """Nearest offset to ``offset`` inside the task's window."""
        return min(max(offset, self.lower[task_id]), self.upper[task_id])

    def fix(self, task_id: str, offset: int) -> None:
        """Pin a task to ``offset`` and tighten its ancestors and descendants."""
        self.lower[task_id] = self.upper[task_id] = offset
        self._fixed.add(task_id)

        stack = [task_id]
        while stack:
            node = stack.pop()
            finish = self.lower[node] + self._duration[node]
            for succ in self._successors[node]:
                if succ not in self._fixed and finish > self.lower[succ]:
                    self.lower[succ] = finish
                    stack.append(succ)

        stack = [task_id]
        while stack:
            node = stack.pop()
            for pred in self._predecessors[node]:
                latest = self.upper[node] - self._duration[pred]
                if pred not in self._fixed and latest < self.upper[pred]:
                    self.upper[pred] = latest
                    stack.append(pred)


class ResourceLeveler:
    """Best-effort leveler that moves non-critical tasks inside their slack.

    Algorithm:
    1. Count tasks per resource per day; stop if nothing is overallocated
    2. Pin tasks without allocations where they are; they never move
    3. Order the remaining tasks: critical first, then ascending slack (stable)
    4. Place them one by one, each inside its SlackWindows window:
       - critical or zero-slack tasks keep their dates
       - other tasks take the first offset in the window that fits every
         resource's capacity and availability window
       - if no offset fits, the task keeps its original start, moved into the
         window when a placed predecessor or successor requires it; the
         overallocation this causes is reported, not resolved
    5. Report whatever overallocation remains

    This is a greedy heuristic, not an optimal solver: it can leave
    overallocations that a different ordering would have resolved.
    """

    def __init__(self, resources: ResourcePool):
        """Initialize the leveler.

        Args:
            resources: Resource pool providing capacities and windows
        """
        self.pool = resources

    def level(
        self,
        schedule: ScheduleResult,
        analysis: NetworkAnalysis,
        project_start: date,
    ) -> ScheduleResult:
        """Level a schedule's resource usage.

        Args:
            schedule: Schedule to level (from schedule_by_dependencies or
                schedule_from_deadline, so every task lies within its slack)
            analysis: Network analysis of the same tasks
            project_start: Date corresponding to day offset 0

        Returns:
            New ScheduleResult; the input schedule is not modified
        """
        initial = ResourceUsage.from_allocations(schedule.allocations).overallocations(self.pool)
        metadata = {
            **schedule.metadata,
            "leveling": LEVELING_TAG,
            "best_effort": True,
            "shifted_tasks": [],
        }
        if not initial:
            logger.changes("No resource overallocation; leveling not needed")
            return replace(schedule, unresolved_overallocations=[], metadata=metadata)

        logger.changes(f"Leveling {len(initial)} overallocated resource-day(s)")

        values = analysis.values_by_id()
        tasks_by_id = {task.id: task for task in schedule.tasks}
        resources_by_task: dict[str, list[str]] = {}
        for allocation in schedule.allocations:
            resources_by_task.setdefault(allocation.task_id, []).append(allocation.resource_id)

        windows = SlackWindows(schedule.tasks, values)
        placed: dict[str, tuple[date, date]] = {}
        for task in schedule.tasks:
            if task.id not in resources_by_task:
                placed[task.id] = _interval(task)
                windows.fix(task.id, (placed[task.id][0] - project_start).days)

        order = sorted(
            resources_by_task,
            key=lambda tid: (not values[tid].is_critical, values[tid].slack),
        )

        usage = ResourceUsage()
        shifted: list[str] = []

        for task_id in order:
            task = tasks_by_id[task_id]
            value = values[task_id]
            resource_ids = resources_by_task[task_id]
            original = _interval(task)
            original_offset = (original[0] - project_start).days
            window = windows.window(task_id)

            offset: int | None = None
            reason = "leveled within slack"
            if window and not value.is_critical and value.slack > 0:
                offset = self._first_fit(task, window, resource_ids, usage, project_start)
                if offset is None:
                    logger.changes(f"  {task_id}: no free slot within {value.slack}d slack")

            if offset is None:
                offset = windows.clamp(task_id, original_offset) if window else original_offset
                reason = "kept in dependency order"

            start = project_start + timedelta(days=offset)
            interval = (start, inclusive_end(start, task.duration))
            if interval != original:
                shifted.append(task_id)
                logger.task_moved(task_id, original[0], interval[0], reason)

            placed[task_id] = interval
            windows.fix(task_id, offset)
            for resource_id in resource_ids:
                usage.add(resource_id, interval[0], interval[1])

        tasks = [
            task.with_dates(*placed[task.id]) if task.id in resources_by_task else task
            for task in schedule.tasks
        ]
        allocations = [
            ResourceAllocation(
                task_id=a.task_id,
                resource_id=a.resource_id,
                start_date=placed[a.task_id][0],
                end_date=placed[a.task_id][1],
            )
            for a in schedule.allocations
        ]
        unresolved = usage.overallocations(self.pool)
        warnings = list(schedule.warnings)
        if unresolved:
            warnings.append(
                f"Leveling left {len(unresolved)} overallocated resource-day(s) unresolved"
            )

        metadata["shifted_tasks"] = shifted
        return replace(
            schedule,
            tasks=tasks,
            allocations=allocations,
            unresolved_overallocations=unresolved,
            warnings=warnings,
            metadata=metadata,
        )

    def _first_fit(
        self,
        task: Task,
        window: range,
        resource_ids: list[str],
        usage: ResourceUsage,
        project_start: date,
    ) -> int | None:
        """Find the first start offset in the window where every resource fits."""
        for offset in window:
            start = project_start + timedelta(days=offset)
            end = inclusive_end(start, task.duration)

            blocked = next(
                (r for r in resource_ids if not self._fits(r, start, end, usage)), None
            )
            if blocked is None:
                return offset
            logger.slot_rejected(task.id, start, f"{blocked} at capacity or unavailable")

        return None

    def _fits(self, resource_id: str, start: date, end: date, usage: ResourceUsage) -> bool:
        resource = self.pool.get(resource_id)
        if resource is None:
            return True
        if not (resource.is_available_on(start) and resource.is_available_on(end)):
            return False
        return usage.fits(resource_id, start, end, self.pool.capacity(resource_id))


def _interval(task: Task) -> tuple[date, date]:
    if task.start is None or task.end is None:
        raise InvariantViolationError(f"Task '{task.id}' has no dates to level")
    return task.start, task.end
