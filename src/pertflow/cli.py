"""Command-line interface for pertflow."""

from __future__ import annotations

from datetime import date
from enum import Enum
from pathlib import Path
from typing import Annotated, NoReturn

import typer

from .exceptions import PertflowError
from .loader import load_project, validate_project
from .logger import setup_logger
from .parser import ProjectParser
from .report import (
    analysis_to_dict,
    format_analysis,
    format_schedule,
    schedule_to_dict,
    to_json,
)
from .scheduler import SchedulingMode, SchedulingService
from .unified_config import discover_config
from .writer import write_schedule

app = typer.Typer(
    name="pertflow",
    help="Critical path analysis and resource-aware scheduling for project networks",
    add_completion=False,
)


class OutputFormat(str, Enum):
    """Output formats for analysis and schedule results."""

    TEXT = "text"
    JSON = "json"


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=silent (default), 1=show changes, 2=show all checks, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config file (default: pertflow_config.yaml)",
        ),
    ] = None,
) -> None:
    """Global options for pertflow commands."""
    setup_logger(verbose)
    ctx.ensure_object(dict)["config_path"] = config


@app.command()
def validate(
    file: Annotated[Path, typer.Argument(help="Path to the project file")] = Path(
        "project.yaml"
    ),
) -> None:
    """Check a project file and list every problem found."""
    try:
        project = ProjectParser().parse_file(file)
    except PertflowError as e:
        _fail(e)

    errors = validate_project(project)
    if errors:
        for error in errors:
            typer.echo(f"- {error}", err=True)
        typer.echo(f"{len(errors)} problem(s) found in {file}", err=True)
        raise typer.Exit(1)

    typer.echo(f"{file}: {len(project.tasks)} tasks, {len(project.resources)} resources, OK")


@app.command()
def analyze(
    ctx: typer.Context,
    file: Annotated[Path, typer.Argument(help="Path to the project file")] = Path(
        "project.yaml"
    ),
    *,
    format: Annotated[  # noqa: A002 - 'format' is appropriate name for CLI option
        OutputFormat, typer.Option("--format", "-f", help="Output format")
    ] = OutputFormat.TEXT,
    all_paths: Annotated[
        bool | None,
        typer.Option("--all-paths/--first-path", help="List every critical path"),
    ] = None,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Compute ES/EF/LS/LF, slack and the critical path."""
    try:
        project = load_project(file)
        config = discover_config(file, _config_path(ctx))
        analysis_config = config.analysis
        if all_paths is not None:
            analysis_config = analysis_config.model_copy(update={"all_critical_paths": all_paths})
        service = SchedulingService(project, config.scheduler, analysis_config=analysis_config)
        analysis = service.analyze()
    except (PertflowError, FileNotFoundError) as e:
        _fail(e)

    if format == OutputFormat.JSON:
        text = to_json(analysis_to_dict(analysis))
    else:
        text = format_analysis(analysis)
    _emit(text, output)


@app.command()
def schedule(  # noqa: PLR0913 - CLI command needs multiple options
    ctx: typer.Context,
    file: Annotated[Path, typer.Argument(help="Path to the project file")] = Path(
        "project.yaml"
    ),
    *,
    start_date: Annotated[
        str | None,
        typer.Option("--start-date", help="Anchor date for source tasks (YYYY-MM-DD)"),
    ] = None,
    deadline: Annotated[
        str | None,
        typer.Option("--deadline", help="Schedule backwards from this finish date (YYYY-MM-DD)"),
    ] = None,
    mode: Annotated[
        SchedulingMode | None, typer.Option("--mode", help="Scheduling mode")
    ] = None,
    level: Annotated[
        bool | None,
        typer.Option("--level/--no-level", help="Level resources within task slack"),
    ] = None,
    format: Annotated[  # noqa: A002 - 'format' is appropriate name for CLI option
        OutputFormat, typer.Option("--format", "-f", help="Output format")
    ] = OutputFormat.TEXT,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
    write: Annotated[
        bool,
        typer.Option("--write", help="Write computed start/end dates back into the project file"),
    ] = False,
) -> None:
    """Assign calendar dates to every task."""
    start = _parse_date(start_date, "--start-date")
    finish = _parse_date(deadline, "--deadline")

    try:
        project = load_project(file)
        config = discover_config(file, _config_path(ctx))
        scheduler_config = config.scheduler
        updates: dict[str, object] = {}
        if mode is not None:
            updates["mode"] = mode
        if level is not None:
            updates["level_resources"] = level
        if updates:
            scheduler_config = scheduler_config.model_copy(update=updates)

        service = SchedulingService(
            project,
            scheduler_config,
            analysis_config=config.analysis,
            start_date=start,
            deadline=finish,
        )
        result = service.schedule()
        if write:
            write_schedule(file, result)
    except (PertflowError, FileNotFoundError) as e:
        _fail(e)

    if format == OutputFormat.JSON:
        text = to_json(schedule_to_dict(result))
    else:
        text = format_schedule(result)
    _emit(text, output)


def _config_path(ctx: typer.Context) -> Path | None:
    return (ctx.obj or {}).get("config_path")


def _parse_date(value: str | None, option: str) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        typer.echo(f"Error: Invalid date for {option}: {value}. Use YYYY-MM-DD", err=True)
        raise typer.Exit(1) from None


def _emit(text: str, output: Path | None) -> None:
    if output:
        output.write_text(text + "\n", encoding="utf-8")
        typer.echo(f"Output written to {output}")
    else:
        typer.echo(text)


def _fail(error: Exception) -> NoReturn:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(1) from error


def main() -> int:
    """Main entry point."""
    # Typer handles sys.exit() internally
    app()
    return 0


if __name__ == "__main__":
    main()
