"""Resource definitions for resource-aware scheduling.

This module handles:
- Individual resources and their availability windows
- Concurrency limits (how many tasks a resource can carry on one day)
- The ordered, id-indexed pool the schedulers look resources up in
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from pydantic import BaseModel, Field, model_validator

from .exceptions import DanglingResourceError
from .models import Task


class Resource(BaseModel):
    """A person, team, or piece of equipment tasks can be assigned to."""

    id: str
    name: str | None = None
    available_from: date | None = None
    available_to: date | None = None
    max_concurrent_tasks: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def validate_window(self) -> Resource:
        """Ensure the availability window is not reversed."""
        if (
            self.available_from is not None
            and self.available_to is not None
            and self.available_to < self.available_from
        ):
            raise ValueError("available_to must not be before available_from")
        return self

    @property
    def display_name(self) -> str:
        """Name for reports, falling back to the id."""
        return self.name or self.id

    def is_available_on(self, day: date) -> bool:
        """Check whether a day falls inside the availability window."""
        if self.available_from is not None and day < self.available_from:
            return False
        return not (self.available_to is not None and day > self.available_to)


class ResourcePool(BaseModel):
    """Ordered collection of resources with unique ids."""

    resources: list[Resource] = Field(default_factory=list[Resource])

    @model_validator(mode="after")
    def validate_unique_ids(self) -> ResourcePool:
        """Ensure no two resources share an id."""
        seen: set[str] = set()
        for resource in self.resources:
            if resource.id in seen:
                raise ValueError(f"Duplicate resource id '{resource.id}'")
            seen.add(resource.id)
        return self

    @classmethod
    def of(cls, resources: Iterable[Resource]) -> ResourcePool:
        """Build a pool from any iterable of resources."""
        return cls(resources=list(resources))

    def __len__(self) -> int:
        return len(self.resources)

    def __contains__(self, resource_id: object) -> bool:
        return any(r.id == resource_id for r in self.resources)

    def get(self, resource_id: str) -> Resource | None:
        """Look up a resource by id."""
        for resource in self.resources:
            if resource.id == resource_id:
                return resource
        return None

    def capacity(self, resource_id: str) -> int:
        """Maximum number of tasks the resource can carry on one day."""
        resource = self.get(resource_id)
        return resource.max_concurrent_tasks if resource else 1

    def get_resource_order(self) -> list[str]:
        """Resource ids in definition order."""
        return [r.id for r in self.resources]

    def check_references(self, tasks: Iterable[Task]) -> None:
        """Reject tasks that use resources missing from the pool.

        Raises:
            DanglingResourceError: On the first unknown resource id
        """
        known = set(self.get_resource_order())
        for task in tasks:
            for resource_id in task.resources:
                if resource_id not in known:
                    raise DanglingResourceError(task.id, resource_id)
