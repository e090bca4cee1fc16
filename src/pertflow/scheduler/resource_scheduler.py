"""Calendar scheduling of a task network, with optional resource constraints."""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence
from datetime import date, timedelta

from pertflow.exceptions import InvariantViolationError, UnscheduledTaskError
from pertflow.logger import get_logger
from pertflow.models import Task
from pertflow.network import NetworkAnalysis, TaskGraph, analyze_graph
from pertflow.resources import ResourcePool

from .config import SchedulingMode
from .core import ResourceAllocation, ScheduleResult, inclusive_end
from .resources import ResourceCursors

logger = get_logger()


class ResourceScheduler:
    """Assigns concrete start/end dates to tasks.

    Three entry points:
    1. schedule_forward: ASAP in topological order, honoring dependency end
       dates and one "next available" cursor per resource
    2. schedule_by_dependencies: ASAP at earliest-start offsets, resources are
       allocated but do not constrain dates
    3. schedule_from_deadline: ALAP at latest-start offsets so the project
       finishes on a fixed date

    End dates are inclusive: a 3-day task starting on the 1st ends on the 3rd.
    Each call works on its own state; the scheduler can be reused.
    """

    def __init__(
        self,
        tasks: Sequence[Task],
        start_date: date | None = None,
        *,
        resources: ResourcePool | None = None,
    ):
        """Initialize the scheduler and validate its input.

        Args:
            tasks: Tasks to schedule, in caller order
            start_date: Anchor date for source tasks (defaults to today)
            resources: Resource pool; every resource a task names must be in it

        Raises:
            ValidationError: If the task graph or resource references are invalid
        """
        self.tasks = list(tasks)
        self.start_date = start_date or date.today()  # noqa: DTZ011
        self.pool = resources or ResourcePool()
        self.graph = TaskGraph.build(self.tasks)
        self.pool.check_references(self.tasks)
        self._analysis: NetworkAnalysis | None = None

    @property
    def analysis(self) -> NetworkAnalysis:
        """Critical path analysis of the task list (computed once)."""
        if self._analysis is None:
            self._analysis = analyze_graph(self.graph)
        return self._analysis

    def schedule_forward(self) -> ScheduleResult:
        """Schedule every task as soon as dependencies and resources allow.

        Source tasks are anchored at the start date. A task can start no
        earlier than the day after its latest predecessor ends, and no earlier
        than the cursor of each resource it uses.

        Returns:
            ScheduleResult with dates, allocations and availability warnings

        Raises:
            UnscheduledTaskError: If the traversal does not reach every task
        """
        cursors = ResourceCursors(self.pool, self.start_date)
        graph = self.graph
        n = len(graph)
        starts: list[date | None] = [None] * n
        ends: list[date | None] = [None] * n
        allocations: list[ResourceAllocation] = []
        warnings: list[str] = []

        in_degree = [len(preds) for preds in graph.predecessors]
        queue: deque[int] = deque(graph.sources)
        scheduled: set[int] = set()

        while queue:
            node = queue.popleft()
            task = self.tasks[node]

            earliest = self.start_date
            for pred in graph.predecessors[node]:
                pred_end = ends[pred]
                if pred_end is None:
                    raise InvariantViolationError(
                        f"Task '{task.id}' dequeued before predecessor '{graph.ids[pred]}'"
                    )
                earliest = max(earliest, pred_end + timedelta(days=1))

            start = cursors.earliest_start(task.resources, earliest)
            end = inclusive_end(start, graph.durations[node])
            starts[node], ends[node] = start, end
            scheduled.add(node)

            if task.resources:
                cursors.advance(task.resources, end)
                for resource_id in task.resources:
                    allocations.append(ResourceAllocation(task.id, resource_id, start, end))
                    warnings.extend(self._window_warnings(task.id, resource_id, start, end))

            if start > earliest:
                logger.task_moved(task.id, earliest, start, "waiting for resources")
            logger.checks(f"  {task.id}: {start} -> {end}")

            for succ in graph.successors[node]:
                in_degree[succ] -= 1
                if in_degree[succ] == 0:
                    queue.append(succ)

        if len(scheduled) != n:
            raise UnscheduledTaskError([graph.ids[i] for i in range(n) if i not in scheduled])

        tasks = [
            task.with_dates(start, end)  # type: ignore[arg-type]
            for task, start, end in zip(self.tasks, starts, ends, strict=True)
        ]
        return ScheduleResult(
            tasks=tasks,
            allocations=allocations,
            warnings=warnings,
            analysis=self.analysis,
            metadata={
                "mode": SchedulingMode.FORWARD.value,
                "project_start": self.start_date,
            },
        )

    def schedule_by_dependencies(self) -> ScheduleResult:
        """Place every task at its earliest start offset from the start date.

        Resources are recorded as allocations but never delay a task, so the
        result can be overallocated; this is the input the leveler expects.
        """
        analysis = self.analysis
        tasks: list[Task] = []
        allocations: list[ResourceAllocation] = []
        warnings: list[str] = []

        for task, value in zip(self.tasks, analysis.task_values, strict=True):
            start = self.start_date + timedelta(days=value.es)
            end = self.start_date + timedelta(days=value.ef - 1)
            tasks.append(task.with_dates(start, end))
            for resource_id in task.resources:
                allocations.append(ResourceAllocation(task.id, resource_id, start, end))
                warnings.extend(self._window_warnings(task.id, resource_id, start, end))

        return ScheduleResult(
            tasks=tasks,
            allocations=allocations,
            warnings=warnings,
            analysis=analysis,
            metadata={
                "mode": SchedulingMode.DEPENDENCIES.value,
                "project_start": self.start_date,
            },
        )

    def schedule_from_deadline(self, deadline: date) -> ScheduleResult:
        """Place every task as late as possible so the project ends on ``deadline``.

        The project start is ``deadline - duration + 1 day``; each task runs
        from ``project_start + LS`` through ``project_start + LF - 1``.

        Args:
            deadline: Last working day of the project (inclusive)

        Returns:
            ScheduleResult with latest-start dates
        """
        analysis = self.analysis
        project_start = deadline - timedelta(days=analysis.project_duration - 1)
        tasks: list[Task] = []
        allocations: list[ResourceAllocation] = []
        warnings: list[str] = []

        if project_start < self.start_date:
            warnings.append(
                f"Deadline {deadline} requires starting on {project_start}, "
                f"before {self.start_date}"
            )

        for task, value in zip(self.tasks, analysis.task_values, strict=True):
            start = project_start + timedelta(days=value.ls)
            end = project_start + timedelta(days=value.lf - 1)
            tasks.append(task.with_dates(start, end))
            for resource_id in task.resources:
                allocations.append(ResourceAllocation(task.id, resource_id, start, end))
                warnings.extend(self._window_warnings(task.id, resource_id, start, end))

        logger.changes(f"Deadline {deadline}: project must start on {project_start}")

        return ScheduleResult(
            tasks=tasks,
            allocations=allocations,
            warnings=warnings,
            analysis=analysis,
            metadata={
                "mode": SchedulingMode.DEADLINE.value,
                "project_start": project_start,
                "deadline": deadline,
            },
        )

    def _window_warnings(
        self, task_id: str, resource_id: str, start: date, end: date
    ) -> list[str]:
        """Describe where an interval leaves the resource's availability window."""
        resource = self.pool.get(resource_id)
        if resource is None:
            return []
        messages: list[str] = []
        if resource.available_from is not None and start < resource.available_from:
            messages.append(
                f"Task '{task_id}' starts on {start}, before {resource_id} is "
                f"available ({resource.available_from})"
            )
        if resource.available_to is not None and end > resource.available_to:
            messages.append(
                f"Task '{task_id}' ends on {end}, after {resource_id} is "
                f"available ({resource.available_to})"
            )
        return messages
