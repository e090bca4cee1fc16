"""Tests for task graph construction and validation."""
# pyright: reportPrivateUsage=false

import pytest

from pertflow.exceptions import (
    CyclicDependencyError,
    DanglingDependencyError,
    DisconnectedGraphError,
    DuplicateTaskError,
    InvalidDurationError,
    ValidationError,
)
from pertflow.models import Task
from pertflow.network import TaskGraph, check_duration
from pertflow.network.graph import _kahn_order
from tests.conftest import task


class TestTaskGraphBuild:
    """Test building a valid graph."""

    def test_diamond_adjacency(self, diamond_tasks: list[Task]) -> None:
        """Successor and predecessor lists follow task-list order."""
        graph = TaskGraph.build(diamond_tasks)

        assert len(graph) == 4
        assert graph.ids == ("a", "b", "c", "d")
        assert graph.durations == (2, 3, 1, 2)
        assert graph.successor_ids("a") == ["b", "c"]
        assert graph.predecessor_ids("d") == ["b", "c"]
        assert graph.edge_count == 4

    def test_sources_and_sinks(self, diamond_tasks: list[Task]) -> None:
        """The diamond has one source and one sink."""
        graph = TaskGraph.build(diamond_tasks)

        assert [graph.ids[i] for i in graph.sources] == ["a"]
        assert [graph.ids[i] for i in graph.sinks] == ["d"]

    def test_topological_order(self, diamond_tasks: list[Task]) -> None:
        """Every task comes after all of its predecessors."""
        graph = TaskGraph.build(diamond_tasks)
        position = {i: pos for pos, i in enumerate(graph.topological_order)}

        assert len(graph.topological_order) == 4
        for i, preds in enumerate(graph.predecessors):
            for p in preds:
                assert position[p] < position[i]

    def test_declaration_order_independent(self) -> None:
        """A task may be listed before the task it depends on."""
        graph = TaskGraph.build([task("b", 1, "a"), task("a", 1)])

        assert graph.predecessor_ids("b") == ["a"]
        assert [graph.ids[i] for i in graph.topological_order] == ["a", "b"]

    def test_duplicate_dependency_collapses(self) -> None:
        """Listing the same dependency twice creates one edge."""
        graph = TaskGraph.build([task("a", 1), task("b", 1, "a", "a")])

        assert graph.edge_count == 1
        assert graph.predecessor_ids("b") == ["a"]

    def test_positions(self, chain_tasks: list[Task]) -> None:
        """Ids map to contiguous indices."""
        graph = TaskGraph.build(chain_tasks)

        assert graph.positions == {"a": 0, "b": 1, "c": 2}
        assert graph.index_of("c") == 2

    def test_positions_on_hand_built_graph(self, cycle_behind_source: TaskGraph) -> None:
        """The id index is filled in for graphs constructed directly too."""
        assert cycle_behind_source.index_of("end") == 3
        assert cycle_behind_source.successor_ids("b") == ["a"]
        assert cycle_behind_source.predecessor_ids("a") == ["s", "b"]

    def test_positions_ignored_in_equality(self, chain_tasks: list[Task]) -> None:
        """Two builds of the same tasks compare and hash equal."""
        first = TaskGraph.build(chain_tasks)
        second = TaskGraph.build(chain_tasks)

        assert first == second
        assert hash(first) == hash(second)

    def test_build_does_not_modify_input(self, diamond_tasks: list[Task]) -> None:
        """Building the graph leaves the task list untouched."""
        before = list(diamond_tasks)
        TaskGraph.build(diamond_tasks)

        assert diamond_tasks == before


class TestTaskGraphValidation:
    """Test structural errors."""

    def test_empty_task_list(self) -> None:
        """An empty task list has no source or sink."""
        with pytest.raises(DisconnectedGraphError):
            TaskGraph.build([])

    def test_duplicate_task_id(self) -> None:
        """Two tasks with one id are rejected."""
        with pytest.raises(DuplicateTaskError) as exc_info:
            TaskGraph.build([task("a", 1), task("a", 2)])

        assert exc_info.value.task_id == "a"

    def test_dangling_dependency(self) -> None:
        """A dependency on an unknown task is rejected."""
        with pytest.raises(DanglingDependencyError) as exc_info:
            TaskGraph.build([task("a", 1), task("b", 1, "ghost")])

        assert exc_info.value.task_id == "b"
        assert exc_info.value.missing_id == "ghost"
        assert "ghost" in str(exc_info.value)

    def test_two_task_cycle(self) -> None:
        """A depends on B and B depends on A."""
        with pytest.raises(CyclicDependencyError) as exc_info:
            TaskGraph.build([task("a", 1, "b"), task("b", 1, "a")])

        assert exc_info.value.task_id in {"a", "b"}
        assert exc_info.value.cycle[0] == exc_info.value.cycle[-1]

    def test_cycle_behind_source(self) -> None:
        """A cycle is found even when the graph also has a source and a sink."""
        tasks = [
            task("start", 1),
            task("x", 1, "start", "z"),
            task("y", 1, "x"),
            task("z", 1, "y"),
            task("end", 1, "z"),
        ]

        with pytest.raises(CyclicDependencyError) as exc_info:
            TaskGraph.build(tasks)

        assert set(exc_info.value.cycle) == {"x", "y", "z"}

    def test_self_dependency(self) -> None:
        """A task depending on itself is a cycle."""
        with pytest.raises(CyclicDependencyError):
            TaskGraph.build([task("a", 1, "a")])

    @pytest.mark.parametrize("duration", [0, -3])
    def test_non_positive_duration(self, duration: int) -> None:
        """Durations below one day are rejected."""
        with pytest.raises(InvalidDurationError) as exc_info:
            TaskGraph.build([task("a", duration)])

        assert exc_info.value.duration == duration

    @pytest.mark.parametrize("duration", [2.5, True, "3"])
    def test_non_integer_duration(self, duration: object) -> None:
        """Only plain integers count as durations."""
        bad = Task(id="a", name="A", duration=duration)  # type: ignore[arg-type]

        with pytest.raises(InvalidDurationError):
            check_duration(bad)

    def test_errors_share_base_class(self) -> None:
        """Every structural error is a ValidationError."""
        with pytest.raises(ValidationError):
            TaskGraph.build([task("a", 1, "missing")])


class TestKahnOrder:
    """Test the topological sort used by build()."""

    def test_short_order_on_cycle(self, cycle_behind_source: TaskGraph) -> None:
        """The sort stops before the cycle, leaving build() to report the gap."""
        g = cycle_behind_source
        order = _kahn_order(len(g), g.sources, g.successors, g.predecessors)

        assert order == [0, 3]
