"""Unified configuration loader for scheduling and analysis settings.

A single file (pertflow_config.yaml) holds the defaults the CLI applies to
every project:

    scheduler:
      mode: forward
      level_resources: false
    analysis:
      all_critical_paths: false
      max_critical_paths: 100
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ParseError
from .scheduler import AnalysisConfig, SchedulingConfig

CONFIG_FILENAME = "pertflow_config.yaml"


class UnifiedConfig(BaseModel):
    """Unified configuration for pertflow."""

    scheduler: SchedulingConfig = Field(default_factory=SchedulingConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)


def load_unified_config(config_path: Path | str) -> UnifiedConfig:
    """Load unified configuration from a YAML file.

    Args:
        config_path: Path to pertflow_config.yaml

    Returns:
        UnifiedConfig with scheduler and analysis sections

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ParseError: If the config is not valid YAML or fails validation
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with config_path.open(encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ParseError(f"Failed to parse config {config_path}: {e}") from e

    if not data:
        return UnifiedConfig()
    if not isinstance(data, dict):
        raise ParseError("Config file must contain a mapping at the root level")

    unknown = set(data) - {"scheduler", "analysis"}  # type: ignore[arg-type]
    if unknown:
        raise ParseError(f"Unknown config section(s): {', '.join(sorted(unknown))}")

    try:
        return UnifiedConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ParseError(f"Invalid config {config_path}: {e}") from e


def discover_config(
    project_path: Path | None = None,
    config_path: Path | None = None,
) -> UnifiedConfig:
    """Find and load the unified config, falling back to defaults.

    Search order:
    1. Explicit config_path argument (the CLI passes --config here)
    2. Project file directory / pertflow_config.yaml
    3. Current directory / pertflow_config.yaml
    """
    # An explicitly requested file must exist
    if config_path is not None:
        return load_unified_config(config_path)

    candidates: list[Path] = []
    if project_path is not None:
        candidates.append(Path(project_path).parent / CONFIG_FILENAME)
    candidates.append(Path(CONFIG_FILENAME))

    for candidate in candidates:
        if candidate.exists():
            return load_unified_config(candidate)

    return UnifiedConfig()
