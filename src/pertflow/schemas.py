"""Pydantic schemas for project file validation."""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .resources import Resource


class TaskSchema(BaseModel):
    """Schema for one task entry."""

    id: str
    name: str
    # Range is checked by the engine so bad durations raise InvalidDurationError
    duration: int
    progress: int = Field(default=0, ge=0, le=100)
    dependencies: list[str] = Field(default_factory=list)
    resources: list[str] = Field(default_factory=list)
    start: date | None = None
    end: date | None = None

    @field_validator("id", "name", mode="before")
    @classmethod
    def coerce_to_string(cls, v: Any) -> Any:
        """Allow bare numbers as ids and names."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("dependencies", "resources", mode="before")
    @classmethod
    def ensure_list(cls, v: Any) -> list[str]:
        """Ensure value is a list of strings."""
        if v is None:
            return []
        if isinstance(v, list):
            return [str(item) for item in v]  # type: ignore[misc]
        return [str(v)]


class ProjectMetaSchema(BaseModel):
    """Schema for the ``project`` header section."""

    name: str = "Untitled project"
    start_date: date | None = None
    deadline: date | None = None


class ProjectSchema(BaseModel):
    """Schema for an entire project file."""

    project: ProjectMetaSchema = Field(default_factory=ProjectMetaSchema)
    resources: list[Resource] = Field(default_factory=list[Resource])
    tasks: list[TaskSchema] = Field(default_factory=list[TaskSchema])
