"""Project loading with full validation."""

from __future__ import annotations

from pathlib import Path

from .exceptions import InvalidDurationError, ValidationError
from .models import MAX_PROGRESS, MIN_PROGRESS, Project
from .network import TaskGraph, check_duration
from .parser import ProjectParser
from .resources import ResourcePool


def load_project(path: Path | str) -> Project:
    """Load a project file and reject structural problems.

    This is the main entry point for reading projects. It handles:
    1. YAML/JSON parsing and schema validation
    2. Graph validation (duplicates, dangling dependencies, durations, cycles)
    3. Resource reference validation

    Args:
        path: Path to the project file

    Returns:
        Fully validated Project

    Raises:
        ParseError: If the file cannot be read or fails schema validation
        ValidationError: On the first structural problem found
    """
    project = ProjectParser().parse_file(path)
    TaskGraph.build(project.tasks)
    ResourcePool.of(project.resources).check_references(project.tasks)
    return project


def validate_project(project: Project) -> list[str]:  # noqa: PLR0912 - one check per rule
    """Collect every problem in a project instead of stopping at the first.

    Cycles are only looked for once no task has a duplicate id, a dangling
    dependency or a bad duration, since those make the graph unbuildable.

    Returns:
        Human-readable messages; empty if the project is valid
    """
    errors: list[str] = []
    structural = False

    if not project.name.strip():
        errors.append("Project must have a name")
    if not project.tasks:
        errors.append("Project has no tasks")
        return errors

    all_ids = project.get_all_ids()
    resource_ids = {resource.id for resource in project.resources}
    seen: set[str] = set()

    for index, task in enumerate(project.tasks):
        label = task.name or task.id
        if task.id in seen:
            errors.append(f"Duplicate task id '{task.id}'")
            structural = True
        seen.add(task.id)

        if not task.name.strip():
            errors.append(f"Task at index {index} ('{task.id}') must have a name")

        try:
            check_duration(task)
        except InvalidDurationError as e:
            errors.append(str(e))
            structural = True

        if not MIN_PROGRESS <= task.progress <= MAX_PROGRESS:
            errors.append(
                f"Task '{label}' has progress {task.progress}, expected "
                f"{MIN_PROGRESS}-{MAX_PROGRESS}"
            )

        if task.start is not None and task.end is not None and task.start > task.end:
            errors.append(f"Task '{label}' ends ({task.end}) before it starts ({task.start})")

        for dep_id in task.dependencies:
            if dep_id not in all_ids:
                errors.append(f"Task '{task.id}' depends on unknown task '{dep_id}'")
                structural = True

        for resource_id in task.resources:
            if resource_id not in resource_ids:
                errors.append(f"Task '{task.id}' uses unknown resource '{resource_id}'")

    if not structural:
        try:
            TaskGraph.build(project.tasks)
        except ValidationError as e:
            errors.append(str(e))

    return errors
