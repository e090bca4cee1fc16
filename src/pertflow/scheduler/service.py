"""High-level scheduling service."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from pertflow.exceptions import SchedulingError
from pertflow.logger import get_logger
from pertflow.network import NetworkAnalysis, analyze_graph
from pertflow.resources import ResourcePool

from .config import AnalysisConfig, SchedulingConfig, SchedulingMode
from .core import ScheduleResult
from .leveling import ResourceLeveler
from .resource_scheduler import ResourceScheduler

if TYPE_CHECKING:
    from pertflow.models import Project

logger = get_logger()


class SchedulingService:
    """Coordinates analysis, calendar scheduling and leveling for a project.

    This service resolves which scheduling mode to run from configuration and
    the project/CLI deadline, then optionally hands the result to the
    ResourceLeveler. Every call is independent: no state is shared between
    projects or between calls.
    """

    def __init__(  # noqa: PLR0913 - needs multiple optional overrides
        self,
        project: Project,
        config: SchedulingConfig | None = None,
        *,
        analysis_config: AnalysisConfig | None = None,
        start_date: date | None = None,
        deadline: date | None = None,
    ):
        """Initialize the scheduling service.

        Args:
            project: Project to schedule
            config: Scheduling configuration (mode, leveling)
            analysis_config: Critical path analysis configuration
            start_date: Anchor date; defaults to the project start date, then today
            deadline: Fixed finish date; defaults to the project deadline
        """
        self.project = project
        self.config = config or SchedulingConfig()
        self.analysis_config = analysis_config or AnalysisConfig()
        self.start_date = start_date or project.start_date or date.today()  # noqa: DTZ011
        self.deadline = deadline or project.deadline
        self.pool = ResourcePool.of(project.resources)
        self.scheduler = ResourceScheduler(project.tasks, self.start_date, resources=self.pool)

    def resolve_mode(self) -> SchedulingMode:
        """Deadline mode wins whenever a deadline is known."""
        if self.deadline is not None:
            return SchedulingMode.DEADLINE
        return self.config.mode

    def analyze(self) -> NetworkAnalysis:
        """Run the critical path analysis."""
        return analyze_graph(
            self.scheduler.graph,
            all_paths=self.analysis_config.all_critical_paths,
            max_paths=self.analysis_config.max_critical_paths,
        )

    def schedule(self) -> ScheduleResult:
        """Schedule the project and level resources if configured.

        Returns:
            ScheduleResult with concrete dates and allocations

        Raises:
            SchedulingError: If deadline mode is configured without a deadline
        """
        mode = self.resolve_mode()
        logger.changes(f"Scheduling '{self.project.name}' ({mode.value} mode)")

        if mode == SchedulingMode.DEADLINE:
            if self.deadline is None:
                raise SchedulingError(
                    "Deadline mode needs a deadline in the project file or from --deadline"
                )
            result = self.scheduler.schedule_from_deadline(self.deadline)
        elif mode == SchedulingMode.DEPENDENCIES or self.config.level_resources:
            # Forward cursors already serialize resources, so leveling starts
            # from the unconstrained earliest-start schedule instead
            result = self.scheduler.schedule_by_dependencies()
        else:
            result = self.scheduler.schedule_forward()

        if self.config.level_resources:
            leveler = ResourceLeveler(self.pool)
            project_start: date = result.metadata["project_start"]
            result = leveler.level(result, self.scheduler.analysis, project_start)

        for warning in result.warnings:
            logger.warning(warning)

        return result
