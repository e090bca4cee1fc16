"""Network analysis package - the critical path method.

Pipeline: TaskGraph -> forward pass -> backward pass -> critical path.

Main entry points:
- analyze_network: full analysis of a task list
- TaskGraph: validated, index-addressed dependency graph
"""

from .core import NetworkAnalysis, PassValues, TaskValue
from .critical_path import (
    DEFAULT_MAX_CRITICAL_PATHS,
    analyze_graph,
    analyze_network,
    compute_task_values,
    enumerate_critical_paths,
    extract_critical_path,
)
from .graph import TaskGraph, check_duration
from .passes import backward_pass, forward_pass, run_passes

__all__ = [
    # Core dataclasses
    "NetworkAnalysis",
    "PassValues",
    "TaskValue",
    # Graph
    "TaskGraph",
    "check_duration",
    # Passes
    "forward_pass",
    "backward_pass",
    "run_passes",
    # Critical path
    "DEFAULT_MAX_CRITICAL_PATHS",
    "analyze_graph",
    "analyze_network",
    "compute_task_values",
    "enumerate_critical_paths",
    "extract_critical_path",
]
