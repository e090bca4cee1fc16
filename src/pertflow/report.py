"""Rendering of analysis and schedule results for output."""

from __future__ import annotations

import json
from typing import Any

from .network import NetworkAnalysis
from .scheduler import ScheduleResult


def analysis_to_dict(analysis: NetworkAnalysis) -> dict[str, Any]:
    """Convert an analysis to the boundary format (camelCase keys)."""
    data: dict[str, Any] = {
        "criticalPath": list(analysis.critical_path),
        "taskValues": [
            {
                "id": value.id,
                "es": value.es,
                "ef": value.ef,
                "ls": value.ls,
                "lf": value.lf,
                "slack": value.slack,
                "isCritical": value.is_critical,
            }
            for value in analysis.task_values
        ],
        "projectDuration": analysis.project_duration,
    }
    if analysis.critical_paths:
        data["criticalPaths"] = [list(path) for path in analysis.critical_paths]
    return data


def schedule_to_dict(result: ScheduleResult) -> dict[str, Any]:
    """Convert a schedule to the boundary format with ISO-8601 dates."""
    tasks: list[dict[str, Any]] = []
    for task in result.tasks:
        tasks.append(
            {
                "id": task.id,
                "name": task.name,
                "duration": task.duration,
                "progress": task.progress,
                "dependencies": list(task.dependencies),
                "resources": list(task.resources),
                "start": task.start.isoformat() if task.start else None,
                "end": task.end.isoformat() if task.end else None,
            }
        )

    data: dict[str, Any] = {
        "tasks": tasks,
        "allocations": [
            {
                "taskId": a.task_id,
                "resourceId": a.resource_id,
                "startDate": a.start_date.isoformat(),
                "endDate": a.end_date.isoformat(),
            }
            for a in result.allocations
        ],
        "unresolvedOverallocations": [
            {
                "resourceId": o.resource_id,
                "date": o.day.isoformat(),
                "count": o.count,
                "capacity": o.capacity,
            }
            for o in result.unresolved_overallocations
        ],
        "warnings": list(result.warnings),
    }
    if result.analysis is not None:
        data["criticalPath"] = list(result.analysis.critical_path)
        data["projectDuration"] = result.analysis.project_duration
    return data


def to_json(data: dict[str, Any]) -> str:
    """Serialize boundary data as indented JSON."""
    return json.dumps(data, indent=2)


def format_analysis(analysis: NetworkAnalysis) -> str:
    """Render an analysis as a plain-text table."""
    lines = [
        f"Project duration: {analysis.project_duration} days",
        f"Critical path: {' -> '.join(analysis.critical_path)}",
    ]
    if len(analysis.critical_paths) > 1:
        lines.append(f"All critical paths ({len(analysis.critical_paths)}):")
        lines.extend(f"  {' -> '.join(path)}" for path in analysis.critical_paths)

    width = max([len("Task"), *(len(v.id) for v in analysis.task_values)])
    lines.append("")
    lines.append(f"{'Task':<{width}}  {'ES':>4} {'EF':>4} {'LS':>4} {'LF':>4} {'Slack':>5}")
    for value in analysis.task_values:
        marker = "*" if value.is_critical else ""
        lines.append(
            f"{value.id:<{width}}  {value.es:>4} {value.ef:>4} {value.ls:>4} "
            f"{value.lf:>4} {value.slack:>5}  {marker}".rstrip()
        )
    return "\n".join(lines)


def format_schedule(result: ScheduleResult) -> str:
    """Render a schedule as a plain-text table."""
    critical = set(result.analysis.critical_task_ids) if result.analysis else set()
    width = max([len("Task"), *(len(t.id) for t in result.tasks)])
    lines = [f"{'Task':<{width}}  {'Start':<10}  {'End':<10}  Resources"]
    for task in result.tasks:
        start = task.start.isoformat() if task.start else "-"
        end = task.end.isoformat() if task.end else "-"
        resources = ", ".join(task.resources)
        marker = " *" if task.id in critical else ""
        lines.append(f"{task.id:<{width}}  {start:<10}  {end:<10}  {resources}{marker}".rstrip())

    if result.unresolved_overallocations:
        lines.append("")
        lines.append("Unresolved overallocations:")
        for o in result.unresolved_overallocations:
            lines.append(f"  {o.resource_id} on {o.day}: {o.count} tasks (capacity {o.capacity})")

    if result.warnings:
        lines.append("")
        lines.append("Warnings:")
        lines.extend(f"  {warning}" for warning in result.warnings)

    return "\n".join(lines)
