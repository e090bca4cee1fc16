"""YAML/JSON parser for pertflow project files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ParseError
from .models import Project, Task
from .resources import ResourcePool
from .schemas import ProjectSchema


class ProjectParser:
    """Parser for project files.

    This parser only handles file parsing and model creation. Structural
    checks (cycles, dangling references) are left to the engine; use
    load_project() from pertflow.loader for a fully validated project.
    """

    def parse_file(self, file_path: Path | str) -> Project:
        """Parse a YAML or JSON file into a Project."""
        path = Path(file_path)
        if not path.exists():
            raise ParseError(f"File not found: {file_path}")

        try:
            # JSON is valid YAML, so one loader covers both formats
            with path.open(encoding="utf-8") as f:
                data: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ParseError(f"Failed to parse {path.name}: {e}") from e

        if not isinstance(data, dict):
            raise ParseError("Project file must contain a mapping at the root level")

        return self.parse_data(data)  # type: ignore[arg-type]

    def parse_data(self, data: dict[str, Any]) -> Project:
        """Validate raw data and convert it into a Project."""
        try:
            schema = ProjectSchema.model_validate(data)
            pool = ResourcePool(resources=schema.resources)
        except PydanticValidationError as e:
            raise ParseError(f"Invalid project data: {e}") from e

        tasks = [
            Task(
                id=task.id,
                name=task.name,
                duration=task.duration,
                dependencies=tuple(task.dependencies),
                resources=tuple(task.resources),
                progress=task.progress,
                start=task.start,
                end=task.end,
            )
            for task in schema.tasks
        ]

        return Project(
            name=schema.project.name,
            tasks=tasks,
            resources=list(pool.resources),
            start_date=schema.project.start_date,
            deadline=schema.project.deadline,
        )
