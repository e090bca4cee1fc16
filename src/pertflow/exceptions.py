"""Custom exceptions for pertflow."""

from __future__ import annotations

from collections.abc import Sequence


class PertflowError(Exception):
    """Base exception for all pertflow errors."""

    pass


class ValidationError(PertflowError):
    """Raised when the task or resource input is structurally invalid."""

    pass


class InvalidDurationError(ValidationError):
    """Raised when a task duration is not a positive integer number of days."""

    def __init__(self, task_id: str, duration: object) -> None:
        self.task_id = task_id
        self.duration = duration
        super().__init__(
            f"Task '{task_id}' has invalid duration {duration!r}: "
            "duration must be an integer number of days >= 1"
        )


class DanglingDependencyError(ValidationError):
    """Raised when a task depends on a task id that does not exist."""

    def __init__(self, task_id: str, missing_id: str) -> None:
        self.task_id = task_id
        self.missing_id = missing_id
        super().__init__(f"Task '{task_id}' depends on unknown task '{missing_id}'")


class DanglingResourceError(ValidationError):
    """Raised when a task references a resource id that does not exist."""

    def __init__(self, task_id: str, missing_id: str) -> None:
        self.task_id = task_id
        self.missing_id = missing_id
        super().__init__(f"Task '{task_id}' uses unknown resource '{missing_id}'")


class DuplicateTaskError(ValidationError):
    """Raised when two tasks share the same id."""

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"Duplicate task id '{task_id}'")


class CyclicDependencyError(ValidationError):
    """Raised when the dependency graph contains a cycle."""

    def __init__(self, task_id: str, cycle: Sequence[str] = ()) -> None:
        self.task_id = task_id
        self.cycle = list(cycle)
        if self.cycle:
            path = " -> ".join(self.cycle)
            message = f"Circular dependency detected at task '{task_id}': {path}"
        else:
            message = f"Circular dependency detected at task '{task_id}'"
        super().__init__(message)


class DisconnectedGraphError(ValidationError):
    """Raised when the graph has no source task or no sink task."""

    pass


class SchedulingError(PertflowError):
    """Raised when a scheduling computation cannot complete."""

    pass


class UnscheduledTaskError(SchedulingError):
    """Raised when a topological traversal stops before covering every task."""

    def __init__(self, unscheduled: Sequence[str], stage: str = "scheduling") -> None:
        self.unscheduled = list(unscheduled)
        self.stage = stage
        super().__init__(
            f"{stage.capitalize()} left {len(self.unscheduled)} task(s) unprocessed: "
            + ", ".join(self.unscheduled)
        )


class InvariantViolationError(SchedulingError):
    """Raised when a computed network value breaks a CPM invariant."""

    pass


class ParseError(PertflowError):
    """Raised when a project or config file cannot be parsed."""

    pass
