"""Core dataclasses for network analysis."""

from __future__ import annotations

from dataclasses import dataclass, field


def _default_paths() -> list[list[str]]:
    return []


@dataclass(frozen=True)
class TaskValue:
    """Forward/backward pass values for one task, as day offsets from day 0."""

    id: str
    es: int  # Earliest start
    ef: int  # Earliest finish (exclusive)
    ls: int  # Latest start
    lf: int  # Latest finish (exclusive)
    slack: int
    is_critical: bool


@dataclass(frozen=True)
class PassValues:
    """Raw per-index pass output, aligned with TaskGraph indices."""

    es: tuple[int, ...]
    ef: tuple[int, ...]
    ls: tuple[int, ...]
    lf: tuple[int, ...]
    project_duration: int


@dataclass
class NetworkAnalysis:
    """Complete critical-path analysis of a task network.

    ``critical_path`` is a single chain chosen with the first-successor
    tie-break: when several critical successors exist, the one listed first in
    the task list is followed. It is deterministic but not necessarily the only
    critical path; ``critical_paths`` holds all of them when requested.
    """

    critical_path: list[str]
    task_values: list[TaskValue]
    project_duration: int
    critical_paths: list[list[str]] = field(default_factory=_default_paths)

    @property
    def slack_table(self) -> dict[str, int]:
        """Map task id to slack."""
        return {value.id: value.slack for value in self.task_values}

    @property
    def critical_task_ids(self) -> list[str]:
        """Ids of every zero-slack task, in task-list order."""
        return [value.id for value in self.task_values if value.is_critical]

    def get_value(self, task_id: str) -> TaskValue | None:
        """Get the computed values for a task."""
        for value in self.task_values:
            if value.id == task_id:
                return value
        return None

    def values_by_id(self) -> dict[str, TaskValue]:
        """Index the computed values by task id."""
        return {value.id: value for value in self.task_values}
