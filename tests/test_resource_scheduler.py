"""Tests for calendar scheduling in forward, dependency and deadline modes."""

from datetime import date

import pytest

from pertflow.exceptions import (
    DanglingResourceError,
    DisconnectedGraphError,
    InvariantViolationError,
    UnscheduledTaskError,
)
from pertflow.models import Task
from pertflow.network import TaskGraph
from pertflow.resources import Resource
from pertflow.scheduler import ResourceAllocation, ResourceScheduler, ScheduleResult, inclusive_end
from tests.conftest import START, assert_valid_schedule, pool, task


def dates(result: object, task_id: str) -> tuple[date, date]:
    """Start and end of a scheduled task."""
    t = result.get_task(task_id)  # type: ignore[attr-defined]
    assert t is not None and t.start is not None and t.end is not None
    return t.start, t.end


class TestForwardScheduling:
    """Test ASAP scheduling with resource cursors."""

    def test_linear_chain(self, chain_tasks: list[Task]) -> None:
        """End dates are inclusive and successors start the next day."""
        result = ResourceScheduler(chain_tasks, START).schedule_forward()

        assert dates(result, "a") == (date(2025, 1, 6), date(2025, 1, 8))
        assert dates(result, "b") == (date(2025, 1, 9), date(2025, 1, 10))
        assert dates(result, "c") == (date(2025, 1, 11), date(2025, 1, 14))
        assert result.project_start == START
        assert result.project_end == date(2025, 1, 14)
        assert_valid_schedule(result)

    def test_shared_resource_serializes(self) -> None:
        """Two independent tasks on one resource run back to back."""
        resources = pool(Resource(id="alice"))
        tasks = [
            task("a", 2, resources=("alice",)),
            task("b", 3, resources=("alice",)),
            task("c", 1, "a"),
        ]

        result = ResourceScheduler(tasks, START, resources=resources).schedule_forward()

        assert dates(result, "a") == (date(2025, 1, 6), date(2025, 1, 7))
        assert dates(result, "b") == (date(2025, 1, 8), date(2025, 1, 10))
        assert dates(result, "c") == (date(2025, 1, 8), date(2025, 1, 8))
        assert_valid_schedule(result, resources)

    def test_cursor_never_reuses_gaps(self) -> None:
        """A later task on a resource waits for the cursor even if an earlier gap is free."""
        resources = pool(Resource(id="r"))
        tasks = [
            task("long", 5),
            task("quick", 1),
            task("after", 1, "long", resources=("r",)),
            task("free", 1, "quick", resources=("r",)),
        ]

        result = ResourceScheduler(tasks, START, resources=resources).schedule_forward()

        # "after" leaves the queue first and pushes the cursor past Jan 7-10
        assert dates(result, "after") == (date(2025, 1, 11), date(2025, 1, 11))
        assert dates(result, "free") == (date(2025, 1, 12), date(2025, 1, 12))

    def test_allocations_recorded(self) -> None:
        """Every (task, resource) pair produces one allocation."""
        resources = pool(Resource(id="r1"), Resource(id="r2"))
        tasks = [task("a", 2, resources=("r1", "r2"))]

        result = ResourceScheduler(tasks, START, resources=resources).schedule_forward()

        assert result.allocations == [
            ResourceAllocation("a", "r1", START, date(2025, 1, 7)),
            ResourceAllocation("a", "r2", START, date(2025, 1, 7)),
        ]
        assert result.allocations_for("r2") == [result.allocations[1]]

    def test_available_from_delays_start(self) -> None:
        """A resource cursor starts at its availability date."""
        resources = pool(Resource(id="r", available_from=date(2025, 1, 10)))
        tasks = [task("a", 1, resources=("r",))]

        result = ResourceScheduler(tasks, START, resources=resources).schedule_forward()

        assert dates(result, "a") == (date(2025, 1, 10), date(2025, 1, 10))
        assert result.warnings == []

    def test_available_to_breach_warns(self) -> None:
        """Running past the availability window is a warning, not an error."""
        resources = pool(Resource(id="r", available_to=date(2025, 1, 7)))
        tasks = [task("a", 5, resources=("r",))]

        result = ResourceScheduler(tasks, START, resources=resources).schedule_forward()

        assert dates(result, "a") == (START, date(2025, 1, 10))
        assert len(result.warnings) == 1
        assert "after r is available" in result.warnings[0]

    def test_preserves_input_order_and_identity(self, diamond_tasks: list[Task]) -> None:
        """Scheduled tasks are copies in input order; the input is untouched."""
        result = ResourceScheduler(diamond_tasks, START).schedule_forward()

        assert [t.id for t in result.tasks] == ["a", "b", "c", "d"]
        assert all(t.start is None for t in diamond_tasks)
        assert result.metadata["mode"] == "forward"

    def test_reusable(self, diamond_tasks: list[Task]) -> None:
        """Scheduling twice gives the same result."""
        scheduler = ResourceScheduler(diamond_tasks, START)

        assert scheduler.schedule_forward().tasks == scheduler.schedule_forward().tasks


class TestDependencyScheduling:
    """Test earliest-start scheduling that ignores resource limits."""

    def test_dates_match_earliest_start(self, diamond_tasks: list[Task]) -> None:
        """Each task starts at the anchor plus its earliest start offset."""
        result = ResourceScheduler(diamond_tasks, START).schedule_by_dependencies()

        assert dates(result, "a") == (date(2025, 1, 6), date(2025, 1, 7))
        assert dates(result, "b") == (date(2025, 1, 8), date(2025, 1, 10))
        assert dates(result, "c") == (date(2025, 1, 8), date(2025, 1, 8))
        assert dates(result, "d") == (date(2025, 1, 11), date(2025, 1, 12))
        assert result.metadata["mode"] == "dependencies"

    def test_resources_do_not_constrain(self) -> None:
        """Two tasks on one resource overlap."""
        resources = pool(Resource(id="r"))
        tasks = [task("a", 2, resources=("r",)), task("b", 2, resources=("r",))]

        result = ResourceScheduler(tasks, START, resources=resources).schedule_by_dependencies()

        assert dates(result, "a") == dates(result, "b")
        assert len(result.allocations) == 2
        assert result.unresolved_overallocations == []

    def test_window_warning(self) -> None:
        """Starting before a resource is available produces a warning."""
        resources = pool(Resource(id="r", available_from=date(2025, 1, 8)))
        tasks = [task("a", 1, resources=("r",))]

        result = ResourceScheduler(tasks, START, resources=resources).schedule_by_dependencies()

        assert dates(result, "a") == (START, START)
        assert "before r is available" in result.warnings[0]


class TestDeadlineScheduling:
    """Test as-late-as-possible scheduling from a fixed finish date."""

    def test_chain_ends_on_deadline(self, chain_tasks: list[Task]) -> None:
        """The last task ends on the deadline and the first starts D - 1 days earlier."""
        deadline = date(2025, 1, 31)

        result = ResourceScheduler(chain_tasks, date(2025, 1, 1)).schedule_from_deadline(deadline)

        assert dates(result, "a") == (date(2025, 1, 23), date(2025, 1, 25))
        assert dates(result, "b") == (date(2025, 1, 26), date(2025, 1, 27))
        assert dates(result, "c") == (date(2025, 1, 28), date(2025, 1, 31))
        assert result.metadata["project_start"] == date(2025, 1, 23)
        assert result.metadata["deadline"] == deadline
        assert result.warnings == []

    def test_slack_task_starts_late(self, diamond_tasks: list[Task]) -> None:
        """A task with slack is placed at its latest start."""
        result = ResourceScheduler(diamond_tasks, date(2025, 1, 1)).schedule_from_deadline(
            date(2025, 1, 20)
        )

        # Project starts 2025-01-14; c has LS=4, LF=5
        assert dates(result, "c") == (date(2025, 1, 18), date(2025, 1, 18))
        assert dates(result, "d") == (date(2025, 1, 19), date(2025, 1, 20))
        assert_valid_schedule(result)

    def test_deadline_too_early_warns(self, chain_tasks: list[Task]) -> None:
        """A deadline that needs a start before the anchor is reported."""
        result = ResourceScheduler(chain_tasks, START).schedule_from_deadline(date(2025, 1, 10))

        assert result.project_start == date(2025, 1, 2)
        assert any("before 2025-01-06" in w for w in result.warnings)


class TestSchedulerValidation:
    """Test input validation at construction."""

    def test_dangling_resource(self) -> None:
        """A task naming an unknown resource is rejected."""
        with pytest.raises(DanglingResourceError) as exc_info:
            ResourceScheduler([task("a", 1, resources=("ghost",))], START)

        assert exc_info.value.missing_id == "ghost"

    def test_empty(self) -> None:
        """There is nothing to schedule in an empty task list."""
        with pytest.raises(DisconnectedGraphError):
            ResourceScheduler([], START)


class TestForwardTraversalGuards:
    """Test the forward scheduler against graphs that bypassed validation."""

    def test_stalled_traversal(self, cycle_behind_source: TaskGraph) -> None:
        """Tasks the traversal never reaches are reported, not left undated."""
        scheduler = ResourceScheduler(
            [task("s", 1), task("a", 2, "s"), task("b", 3, "a"), task("end", 1)], START
        )
        scheduler.graph = cycle_behind_source

        with pytest.raises(UnscheduledTaskError) as exc_info:
            scheduler.schedule_forward()

        assert exc_info.value.unscheduled == ["a", "b"]

    def test_predecessor_not_yet_dated(self) -> None:
        """A task dequeued ahead of its predecessor is an invariant violation."""
        scheduler = ResourceScheduler([task("a", 1), task("b", 1, "a")], START)
        scheduler.graph = TaskGraph(
            ids=("a", "b"),
            durations=(1, 1),
            successors=((), ()),
            predecessors=((), (0,)),
            sources=(1, 0),
            sinks=(0, 1),
            topological_order=(0, 1),
        )

        with pytest.raises(InvariantViolationError, match="before predecessor 'a'"):
            scheduler.schedule_forward()


class TestDateHelpers:
    """Test date arithmetic helpers."""

    @pytest.mark.parametrize(
        ("duration", "expected"),
        [(1, date(2025, 1, 6)), (3, date(2025, 1, 8)), (30, date(2025, 2, 4))],
    )
    def test_inclusive_end(self, duration: int, expected: date) -> None:
        """A one-day task ends on its start day."""
        assert inclusive_end(START, duration) == expected


class TestScheduleResult:
    """Test the scheduled view of a result."""

    def test_scheduled_tasks(self, chain_tasks: list[Task]) -> None:
        """Every task appears with its dates and duration."""
        result = ResourceScheduler(chain_tasks, START).schedule_forward()

        view = result.scheduled_tasks
        assert [s.task_id for s in view] == ["a", "b", "c"]
        assert (view[1].start_date, view[1].end_date) == (date(2025, 1, 9), date(2025, 1, 10))

    def test_undated_task_is_rejected(self) -> None:
        """A result holding an undated task cannot produce the scheduled view."""
        result = ScheduleResult(tasks=[task("a", 1)])

        with pytest.raises(InvariantViolationError, match="'a' has no scheduled dates"):
            _ = result.scheduled_tasks
