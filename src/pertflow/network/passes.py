"""Forward and backward passes of the critical path method."""

from __future__ import annotations

from collections import deque

from pertflow.exceptions import InvariantViolationError, UnscheduledTaskError
from pertflow.logger import get_logger

from .core import PassValues
from .graph import TaskGraph

logger = get_logger()


def forward_pass(graph: TaskGraph) -> tuple[list[int], list[int], int]:
    """Compute earliest start/finish for every task.

    A task is visited only once all of its predecessors are resolved, so
    ``ES(task) = max(EF(pred))`` is final when the task leaves the queue.
    Source tasks start at day 0.

    Args:
        graph: Validated task graph

    Returns:
        Tuple of (es, ef, project_duration), lists aligned with graph indices

    Raises:
        UnscheduledTaskError: If the traversal does not reach every task
    """
    n = len(graph)
    es = [0] * n
    ef = [0] * n
    in_degree = [len(preds) for preds in graph.predecessors]
    queue: deque[int] = deque(graph.sources)
    processed = 0

    while queue:
        node = queue.popleft()
        processed += 1
        ef[node] = es[node] + graph.durations[node]

        for succ in graph.successors[node]:
            if ef[node] > es[succ]:
                es[succ] = ef[node]
            in_degree[succ] -= 1
            if in_degree[succ] == 0:
                queue.append(succ)

    if processed != n:
        raise UnscheduledTaskError(
            [graph.ids[i] for i in range(n) if in_degree[i] > 0], stage="forward pass"
        )

    project_duration = max(ef)

    for i in graph.topological_order:
        logger.pass_values("forward", graph.ids[i], es[i], ef[i])
    logger.debug(f"  project duration: {project_duration} days")

    return es, ef, project_duration


def backward_pass(graph: TaskGraph, project_duration: int) -> tuple[list[int], list[int]]:
    """Compute latest start/finish for every task.

    Runs the same in-degree traversal on the reversed graph. Every task
    without successors is seeded with ``LF = project_duration``; all others
    take ``LF = min(LS(succ))``.

    Args:
        graph: Validated task graph
        project_duration: Project duration from the forward pass

    Returns:
        Tuple of (ls, lf), lists aligned with graph indices

    Raises:
        UnscheduledTaskError: If the traversal does not reach every task
        InvariantViolationError: If any LS < 0 or LF > project_duration
    """
    n = len(graph)
    lf = [project_duration] * n
    ls = [0] * n
    out_degree = [len(succs) for succs in graph.successors]
    # Tasks with no successors are sinks even if the graph did not list them
    queue: deque[int] = deque(i for i in range(n) if out_degree[i] == 0)
    processed = 0

    while queue:
        node = queue.popleft()
        processed += 1
        ls[node] = lf[node] - graph.durations[node]

        for pred in graph.predecessors[node]:
            if ls[node] < lf[pred]:
                lf[pred] = ls[node]
            out_degree[pred] -= 1
            if out_degree[pred] == 0:
                queue.append(pred)

    if processed != n:
        raise UnscheduledTaskError(
            [graph.ids[i] for i in range(n) if out_degree[i] > 0], stage="backward pass"
        )

    for i in range(n):
        if ls[i] < 0 or lf[i] > project_duration:
            raise InvariantViolationError(
                f"Task '{graph.ids[i]}' has LS={ls[i]}, LF={lf[i]} outside "
                f"[0, {project_duration}]"
            )

    for i in reversed(graph.topological_order):
        logger.pass_values("backward", graph.ids[i], ls[i], lf[i])

    return ls, lf


def run_passes(graph: TaskGraph) -> PassValues:
    """Run the forward pass, then the backward pass seeded by its duration."""
    es, ef, project_duration = forward_pass(graph)
    ls, lf = backward_pass(graph, project_duration)
    return PassValues(
        es=tuple(es),
        ef=tuple(ef),
        ls=tuple(ls),
        lf=tuple(lf),
        project_duration=project_duration,
    )
