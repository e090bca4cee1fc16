"""Dependency graph construction and structural validation."""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass, field

from pertflow.exceptions import (
    CyclicDependencyError,
    DanglingDependencyError,
    DisconnectedGraphError,
    DuplicateTaskError,
    InvalidDurationError,
    UnscheduledTaskError,
)
from pertflow.logger import get_logger
from pertflow.models import Task

logger = get_logger()


def check_duration(task: Task) -> int:
    """Return the task duration, rejecting anything but an integer >= 1.

    Raises:
        InvalidDurationError: If the duration is not a positive integer
    """
    duration = task.duration
    if isinstance(duration, bool) or not isinstance(duration, int) or duration < 1:
        raise InvalidDurationError(task.id, duration)
    return duration


@dataclass(frozen=True)
class TaskGraph:
    """Immutable arena of tasks addressed by contiguous integer index.

    Index ``i`` refers to ``ids[i]``, ``durations[i]``, ``successors[i]`` and
    ``predecessors[i]``. Indices follow the order of the input task list, so
    successor lists are in task-list order as well. ``positions`` maps each id
    back to its index.
    """

    ids: tuple[str, ...]
    durations: tuple[int, ...]
    successors: tuple[tuple[int, ...], ...]
    predecessors: tuple[tuple[int, ...], ...]
    sources: tuple[int, ...]
    sinks: tuple[int, ...]
    topological_order: tuple[int, ...]
    positions: dict[str, int] = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "positions", {task_id: i for i, task_id in enumerate(self.ids)})

    def __len__(self) -> int:
        return len(self.ids)

    @property
    def edge_count(self) -> int:
        """Total number of distinct dependency edges."""
        return sum(len(succ) for succ in self.successors)

    def index_of(self, task_id: str) -> int:
        """Return the arena index for a task id."""
        return self.positions[task_id]

    def successor_ids(self, task_id: str) -> list[str]:
        """Ids of the tasks that depend on ``task_id``."""
        return [self.ids[j] for j in self.successors[self.index_of(task_id)]]

    def predecessor_ids(self, task_id: str) -> list[str]:
        """Ids of the tasks ``task_id`` depends on."""
        return [self.ids[j] for j in self.predecessors[self.index_of(task_id)]]

    @classmethod
    def build(cls, tasks: Sequence[Task]) -> TaskGraph:
        """Build and validate the dependency graph for a task list.

        Checks run in this order: empty input, duplicate ids, dangling
        dependencies, durations, cycles, sources/sinks.

        Args:
            tasks: Tasks in caller order

        Returns:
            A validated TaskGraph

        Raises:
            DisconnectedGraphError: If there are no tasks, sources or sinks
            DuplicateTaskError: If two tasks share an id
            DanglingDependencyError: If a dependency names an unknown task
            InvalidDurationError: If a duration is not an integer >= 1
            CyclicDependencyError: If the dependencies contain a cycle
        """
        if not tasks:
            raise DisconnectedGraphError("Cannot build a schedule from an empty task list")

        index: dict[str, int] = {}
        for i, task in enumerate(tasks):
            if task.id in index:
                raise DuplicateTaskError(task.id)
            index[task.id] = i

        n = len(tasks)
        succ_lists: list[list[int]] = [[] for _ in range(n)]
        pred_lists: list[list[int]] = [[] for _ in range(n)]

        for i, task in enumerate(tasks):
            seen: set[int] = set()
            for dep_id in task.dependencies:
                j = index.get(dep_id)
                if j is None:
                    raise DanglingDependencyError(task.id, dep_id)
                if j in seen:
                    continue
                seen.add(j)
                pred_lists[i].append(j)
                succ_lists[j].append(i)

        durations = tuple(check_duration(task) for task in tasks)
        ids = tuple(task.id for task in tasks)

        _check_cycles(ids, succ_lists)

        sources = tuple(i for i in range(n) if not pred_lists[i])
        sinks = tuple(i for i in range(n) if not succ_lists[i])
        if not sources:
            raise DisconnectedGraphError("Dependency graph has no source task")
        if not sinks:
            raise DisconnectedGraphError("Dependency graph has no sink task")

        order = _kahn_order(n, sources, succ_lists, pred_lists)
        if len(order) != n:
            done = set(order)
            raise UnscheduledTaskError(
                [ids[i] for i in range(n) if i not in done], stage="topological sort"
            )

        logger.debug(
            f"Built task graph: {n} tasks, {sum(len(s) for s in succ_lists)} edges, "
            f"{len(sources)} sources, {len(sinks)} sinks"
        )

        return cls(
            ids=ids,
            durations=durations,
            successors=tuple(tuple(s) for s in succ_lists),
            predecessors=tuple(tuple(p) for p in pred_lists),
            sources=sources,
            sinks=sinks,
            topological_order=tuple(order),
        )


def _check_cycles(ids: Sequence[str], successors: Sequence[Sequence[int]]) -> None:
    """Detect cycles with an iterative DFS and an on-path set.

    Raises:
        CyclicDependencyError: Naming the task where the cycle closes
    """
    n = len(ids)
    visited = [False] * n
    on_path = [False] * n

    for root in range(n):
        if visited[root]:
            continue

        # Stack frames are (node, next successor position)
        stack: list[tuple[int, int]] = [(root, 0)]
        path: list[int] = [root]
        visited[root] = True
        on_path[root] = True

        while stack:
            node, pos = stack[-1]
            if pos < len(successors[node]):
                stack[-1] = (node, pos + 1)
                nxt = successors[node][pos]
                if on_path[nxt]:
                    cycle = [ids[k] for k in path[path.index(nxt) :]] + [ids[nxt]]
                    raise CyclicDependencyError(ids[nxt], cycle)
                if not visited[nxt]:
                    visited[nxt] = True
                    on_path[nxt] = True
                    path.append(nxt)
                    stack.append((nxt, 0))
            else:
                stack.pop()
                path.pop()
                on_path[node] = False


def _kahn_order(
    n: int,
    sources: Sequence[int],
    successors: Sequence[Sequence[int]],
    predecessors: Sequence[Sequence[int]],
) -> list[int]:
    """Topological order by in-degree decrement, sources first in index order."""
    in_degree = [len(predecessors[i]) for i in range(n)]
    queue: deque[int] = deque(sources)
    order: list[int] = []

    while queue:
        node = queue.popleft()
        order.append(node)
        for nxt in successors[node]:
            in_degree[nxt] -= 1
            if in_degree[nxt] == 0:
                queue.append(nxt)

    return order
