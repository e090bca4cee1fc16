"""Write computed dates back into a project file."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ruamel.yaml import YAML

from .exceptions import ParseError
from .logger import get_logger
from .scheduler import ScheduleResult

logger = get_logger()


def write_schedule(file_path: Path, result: ScheduleResult) -> int:
    """Update each task's ``start``/``end`` in a YAML project file in place.

    Comments, key order and quoting are preserved by the round-trip loader;
    only the two date keys of scheduled tasks are touched.

    Args:
        file_path: Project file to update
        result: Schedule whose dates are written

    Returns:
        Number of task entries updated

    Raises:
        ParseError: If the file is JSON or has no task list to update
    """
    if file_path.suffix.lower() == ".json":
        raise ParseError("Writing dates back is only supported for YAML project files")

    yaml_rt = YAML()
    yaml_rt.preserve_quotes = True  # type: ignore[assignment]

    with file_path.open(encoding="utf-8") as f:
        data: Any = yaml_rt.load(f)  # type: ignore[no-untyped-call]

    if not isinstance(data, dict) or not isinstance(data.get("tasks"), list):
        raise ParseError(f"No 'tasks' list found in {file_path}")

    dates = {task.id: (task.start, task.end) for task in result.tasks}
    updated = 0
    for entry in data["tasks"]:
        if not isinstance(entry, dict):
            continue
        task_id = str(entry.get("id"))
        if task_id not in dates:
            logger.warning(f"Task '{task_id}' in {file_path.name} was not scheduled")
            continue
        start, end = dates[task_id]
        entry["start"] = start
        entry["end"] = end
        updated += 1

    with file_path.open("w", encoding="utf-8") as f:
        yaml_rt.dump(data, f)  # type: ignore[no-untyped-call]

    logger.changes(f"Wrote dates for {updated} task(s) to {file_path}")
    return updated
