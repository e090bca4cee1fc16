"""Pytest configuration and fixtures for pertflow tests."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date
from typing import Any

import pytest

from pertflow.logger import reset_logger
from pertflow.models import Task
from pertflow.network import TaskGraph
from pertflow.resources import Resource, ResourcePool
from pertflow.scheduler import ResourceUsage

START = date(2025, 1, 6)


@pytest.fixture(autouse=True)
def isolate_global_state() -> Iterator[None]:
    """Reset the shared logger around each test."""
    reset_logger()
    yield
    reset_logger()


def task(
    task_id: str,
    duration: int,
    *dependencies: str,
    resources: tuple[str, ...] = (),
    name: str | None = None,
) -> Task:
    """Create a Task with terse positional dependencies.

    Example:
        task("b", 2, "a")  # b takes 2 days and depends on a
    """
    return Task(
        id=task_id,
        name=name or task_id.upper(),
        duration=duration,
        dependencies=tuple(dependencies),
        resources=resources,
    )


def pool(*resources: Resource) -> ResourcePool:
    """Create a ResourcePool from resources."""
    return ResourcePool.of(resources)


@pytest.fixture
def chain_tasks() -> list[Task]:
    """Linear chain a(3) -> b(2) -> c(4), nine days end to end."""
    return [task("a", 3), task("b", 2, "a"), task("c", 4, "b")]


@pytest.fixture
def diamond_tasks() -> list[Task]:
    """Diamond a(2) -> {b(3), c(1)} -> d(2); c has two days of slack."""
    return [task("a", 2), task("b", 3, "a"), task("c", 1, "a"), task("d", 2, "b", "c")]


@pytest.fixture
def cycle_behind_source() -> TaskGraph:
    """Hand-built graph that skips build-time checks: s -> a <-> b, end standalone.

    s and end are sources, end is the only sink. Traversals starting from
    either side stall on the a/b cycle.
    """
    return TaskGraph(
        ids=("s", "a", "b", "end"),
        durations=(1, 2, 3, 1),
        successors=((1,), (2,), (1,), ()),
        predecessors=((), (0, 2), (1,), ()),
        sources=(0, 3),
        sinks=(3,),
        topological_order=(0, 3),
    )


def assert_valid_schedule(
    result: Any,
    resources: ResourcePool | None = None,
    *,
    check_capacity: bool = True,
) -> None:
    """Assert that every task is dated, follows its dependencies and fits capacity.

    Capacity is only checked when a pool is given.
    """
    by_id = {t.id: t for t in result.tasks}

    for t in result.tasks:
        assert t.start is not None and t.end is not None, f"Task {t.id} not scheduled"
        assert (t.end - t.start).days == t.duration - 1, f"Task {t.id} has wrong length"
        for dep_id in t.dependencies:
            dep = by_id[dep_id]
            assert dep.end is not None
            assert t.start > dep.end, (
                f"Task {t.id} starts at {t.start} but dependency {dep_id} ends at {dep.end}"
            )

    if resources is not None and check_capacity:
        overallocated = ResourceUsage.from_allocations(result.allocations).overallocations(
            resources
        )
        assert not overallocated, f"Overallocated: {overallocated}"
