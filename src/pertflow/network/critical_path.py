"""Slack computation and critical path extraction."""

from __future__ import annotations

from collections.abc import Sequence

from pertflow.exceptions import InvariantViolationError
from pertflow.logger import get_logger
from pertflow.models import Task

from .core import NetworkAnalysis, PassValues, TaskValue
from .graph import TaskGraph
from .passes import run_passes

logger = get_logger()

DEFAULT_MAX_CRITICAL_PATHS = 100


def compute_task_values(graph: TaskGraph, passes: PassValues) -> list[TaskValue]:
    """Combine pass output into per-task values with slack and criticality.

    Raises:
        InvariantViolationError: If any task ends up with negative slack
    """
    values: list[TaskValue] = []
    for i, task_id in enumerate(graph.ids):
        slack = passes.ls[i] - passes.es[i]
        if slack < 0:
            raise InvariantViolationError(f"Task '{task_id}' has negative slack {slack}")
        values.append(
            TaskValue(
                id=task_id,
                es=passes.es[i],
                ef=passes.ef[i],
                ls=passes.ls[i],
                lf=passes.lf[i],
                slack=slack,
                is_critical=slack == 0,
            )
        )
    return values


def _critical_successors(graph: TaskGraph, passes: PassValues) -> list[list[int]]:
    """Edges of the critical subgraph, per index.

    An edge belongs to the critical subgraph when both ends have zero slack
    and the successor starts exactly when the predecessor finishes.
    """
    critical = [passes.ls[i] == passes.es[i] for i in range(len(graph))]
    result: list[list[int]] = [[] for _ in range(len(graph))]
    for i in range(len(graph)):
        if not critical[i]:
            continue
        result[i] = [
            j for j in graph.successors[i] if critical[j] and passes.ef[i] == passes.es[j]
        ]
    return result


def _entry_points(graph: TaskGraph, passes: PassValues, crit_succ: list[list[int]]) -> list[int]:
    """Critical tasks with no predecessor in the critical subgraph, in task order."""
    has_critical_pred = [False] * len(graph)
    for succs in crit_succ:
        for j in succs:
            has_critical_pred[j] = True
    return [
        i
        for i in range(len(graph))
        if passes.ls[i] == passes.es[i] and not has_critical_pred[i]
    ]


def extract_critical_path(graph: TaskGraph, passes: PassValues) -> list[str]:
    """Reconstruct one critical path from a start node to an end node.

    Starts at the first entry point of the critical subgraph and keeps
    following the first critical successor in task-list order until a task
    with no critical successor is reached (the first-successor tie-break).
    """
    crit_succ = _critical_successors(graph, passes)
    entries = _entry_points(graph, passes, crit_succ)
    if not entries:
        return []

    node = entries[0]
    path = [graph.ids[node]]
    # Each step moves strictly forward in time, so this ends within n steps
    while crit_succ[node]:
        node = crit_succ[node][0]
        path.append(graph.ids[node])
    return path


def enumerate_critical_paths(
    graph: TaskGraph, passes: PassValues, limit: int = DEFAULT_MAX_CRITICAL_PATHS
) -> list[list[str]]:
    """List every entry-to-end path through the critical subgraph.

    Paths come out in the same order the first-successor walk would prefer
    them, so the first path equals ``extract_critical_path``. At most
    ``limit`` paths are returned.
    """
    crit_succ = _critical_successors(graph, passes)
    paths: list[list[str]] = []

    for entry in _entry_points(graph, passes, crit_succ):
        stack: list[tuple[int, list[int]]] = [(entry, [entry])]
        while stack:
            node, path = stack.pop()
            if not crit_succ[node]:
                paths.append([graph.ids[i] for i in path])
                if len(paths) >= limit:
                    logger.warning(f"Stopped listing critical paths after {limit}")
                    return paths
                continue
            for nxt in reversed(crit_succ[node]):
                stack.append((nxt, [*path, nxt]))

    return paths


def analyze_network(
    tasks: Sequence[Task],
    *,
    all_paths: bool = False,
    max_paths: int = DEFAULT_MAX_CRITICAL_PATHS,
) -> NetworkAnalysis:
    """Run the full critical path method on a task list.

    TaskGraph -> forward pass -> backward pass -> slack and critical path.
    The input is never modified; the same input always yields the same
    analysis.

    Args:
        tasks: Tasks in caller order
        all_paths: Also enumerate every critical path
        max_paths: Cap on the number of enumerated paths

    Returns:
        NetworkAnalysis with the critical path, task values and duration
    """
    graph = TaskGraph.build(tasks)
    return analyze_graph(graph, all_paths=all_paths, max_paths=max_paths)


def analyze_graph(
    graph: TaskGraph,
    *,
    all_paths: bool = False,
    max_paths: int = DEFAULT_MAX_CRITICAL_PATHS,
) -> NetworkAnalysis:
    """Run the passes and critical path extraction on a built graph."""
    passes = run_passes(graph)
    values = compute_task_values(graph, passes)
    critical_path = extract_critical_path(graph, passes)

    logger.checks(
        f"Network: {len(graph)} tasks, duration {passes.project_duration} days, "
        f"critical path {' -> '.join(critical_path)}"
    )

    return NetworkAnalysis(
        critical_path=critical_path,
        task_values=values,
        project_duration=passes.project_duration,
        critical_paths=enumerate_critical_paths(graph, passes, max_paths) if all_paths else [],
    )
