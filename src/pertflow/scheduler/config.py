"""Configuration classes for scheduling and network analysis."""

from enum import Enum

from pydantic import BaseModel, Field

from pertflow.network import DEFAULT_MAX_CRITICAL_PATHS


class SchedulingMode(str, Enum):
    """How concrete dates are assigned to tasks."""

    FORWARD = "forward"  # ASAP with per-resource availability cursors
    DEPENDENCIES = "dependencies"  # ASAP at earliest-start offsets, resources ignored
    DEADLINE = "deadline"  # ALAP from a fixed finish date


class SchedulingConfig(BaseModel):
    """Configuration for calendar scheduling."""

    mode: SchedulingMode = SchedulingMode.FORWARD
    # Run the greedy slack-window leveler after scheduling
    level_resources: bool = False


class AnalysisConfig(BaseModel):
    """Configuration for critical path analysis."""

    # Enumerate every critical path, not just the first-successor one
    all_critical_paths: bool = False
    max_critical_paths: int = Field(default=DEFAULT_MAX_CRITICAL_PATHS, ge=1)
