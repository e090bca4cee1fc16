"""Scheduler package - calendar scheduling and resource leveling.

This package provides:
- ResourceScheduler: forward (ASAP), dependency-only and deadline (ALAP) scheduling
- ResourceLeveler: best-effort greedy leveling within task slack
- SchedulingService: high-level entry point for a Project

Configuration:
- SchedulingConfig: scheduling mode and leveling switch
- AnalysisConfig: critical path enumeration settings
"""

from .config import AnalysisConfig, SchedulingConfig, SchedulingMode
from .core import (
    Overallocation,
    ResourceAllocation,
    ScheduledTask,
    ScheduleResult,
    inclusive_end,
    iter_days,
)
from .leveling import LEVELING_TAG, ResourceLeveler
from .resource_scheduler import ResourceScheduler
from .resources import ResourceCursors, ResourceUsage
from .service import SchedulingService

__all__ = [
    # Core dataclasses
    "Overallocation",
    "ResourceAllocation",
    "ScheduledTask",
    "ScheduleResult",
    "inclusive_end",
    "iter_days",
    # Configuration
    "AnalysisConfig",
    "SchedulingConfig",
    "SchedulingMode",
    # Scheduling
    "ResourceScheduler",
    "ResourceCursors",
    "ResourceUsage",
    # Leveling
    "LEVELING_TAG",
    "ResourceLeveler",
    # High-level service
    "SchedulingService",
]
