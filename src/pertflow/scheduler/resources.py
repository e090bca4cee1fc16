"""Resource tracking utilities used within a single scheduling call."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, timedelta

from pertflow.logger import get_logger
from pertflow.resources import ResourcePool

from .core import Overallocation, ResourceAllocation, iter_days

logger = get_logger()


class ResourceCursors:
    """Tracks a single "next available" date per resource.

    This is deliberately not a calendar: a resource becomes free the day after
    the last task placed on it ends, and earlier gaps are never reused.
    """

    def __init__(self, pool: ResourcePool, anchor: date) -> None:
        """Initialize every cursor at the resource's availability start.

        Args:
            pool: Resources to track
            anchor: Default start for resources without ``available_from``
        """
        self._next_free: dict[str, date] = {
            resource.id: resource.available_from or anchor for resource in pool.resources
        }

    def next_available(self, resource_id: str) -> date:
        """Date the resource becomes free."""
        return self._next_free[resource_id]

    def earliest_start(self, resource_ids: Iterable[str], not_before: date) -> date:
        """Earliest day on which every listed resource is free.

        Args:
            resource_ids: Resources the task needs
            not_before: Earliest date allowed by dependencies

        Returns:
            The later of ``not_before`` and every resource cursor
        """
        start = not_before
        for resource_id in resource_ids:
            free = self.next_available(resource_id)
            if free > start:
                logger.checks(f"    {resource_id} busy until {free - timedelta(days=1)}")
                start = free
        return start

    def advance(self, resource_ids: Iterable[str], end: date) -> None:
        """Mark resources busy through ``end`` (inclusive)."""
        for resource_id in resource_ids:
            self._next_free[resource_id] = end + timedelta(days=1)


class ResourceUsage:
    """Per-resource, per-day count of tasks in progress."""

    def __init__(self) -> None:
        self._counts: dict[str, dict[date, int]] = {}

    @classmethod
    def from_allocations(cls, allocations: Iterable[ResourceAllocation]) -> ResourceUsage:
        """Build a usage table from existing allocations."""
        usage = cls()
        for allocation in allocations:
            usage.add(allocation.resource_id, allocation.start_date, allocation.end_date)
        return usage

    def add(self, resource_id: str, start: date, end: date) -> None:
        """Count one more task on the resource for every day in [start, end]."""
        timeline = self._counts.setdefault(resource_id, {})
        for day in iter_days(start, end):
            timeline[day] = timeline.get(day, 0) + 1

    def count(self, resource_id: str, day: date) -> int:
        """Number of tasks on the resource on one day."""
        return self._counts.get(resource_id, {}).get(day, 0)

    def fits(self, resource_id: str, start: date, end: date, capacity: int) -> bool:
        """Check that one more task over [start, end] stays within capacity."""
        return all(self.count(resource_id, day) < capacity for day in iter_days(start, end))

    def overallocations(self, pool: ResourcePool) -> list[Overallocation]:
        """Every (resource, day) whose count exceeds the resource capacity.

        Ordered by resource definition order, then by day.
        """
        result: list[Overallocation] = []
        for resource_id in pool.get_resource_order():
            capacity = pool.capacity(resource_id)
            timeline = self._counts.get(resource_id, {})
            for day in sorted(timeline):
                count = timeline[day]
                if count > capacity:
                    result.append(
                        Overallocation(
                            resource_id=resource_id,
                            day=day,
                            count=count,
                            capacity=capacity,
                        )
                    )
        return result
