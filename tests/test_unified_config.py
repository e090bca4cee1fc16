"""Tests for unified configuration loading and discovery."""

from pathlib import Path

import pytest

from pertflow.exceptions import ParseError
from pertflow.scheduler import SchedulingMode
from pertflow.unified_config import CONFIG_FILENAME, discover_config, load_unified_config


def test_load_unified_config(tmp_path: Path) -> None:
    """Test loading both sections."""
    config_path = tmp_path / CONFIG_FILENAME
    config_path.write_text(
        """
scheduler:
  mode: dependencies
  level_resources: true
analysis:
  all_critical_paths: true
  max_critical_paths: 5
"""
    )

    unified = load_unified_config(config_path)

    assert unified.scheduler.mode == SchedulingMode.DEPENDENCIES
    assert unified.scheduler.level_resources is True
    assert unified.analysis.all_critical_paths is True
    assert unified.analysis.max_critical_paths == 5


def test_load_partial_config(tmp_path: Path) -> None:
    """Test that missing sections fall back to defaults."""
    config_path = tmp_path / CONFIG_FILENAME
    config_path.write_text("scheduler:\n  mode: deadline\n")

    unified = load_unified_config(config_path)

    assert unified.scheduler.mode == SchedulingMode.DEADLINE
    assert unified.scheduler.level_resources is False
    assert unified.analysis.max_critical_paths == 100


def test_load_empty_config(tmp_path: Path) -> None:
    """Test that an empty file gives the defaults."""
    config_path = tmp_path / CONFIG_FILENAME
    config_path.write_text("")

    unified = load_unified_config(config_path)

    assert unified.scheduler.mode == SchedulingMode.FORWARD


def test_load_missing_config(tmp_path: Path) -> None:
    """Test that an explicit missing file is an error."""
    with pytest.raises(FileNotFoundError):
        load_unified_config(tmp_path / "missing.yaml")


def test_unknown_section(tmp_path: Path) -> None:
    """Test that typos in section names are caught."""
    config_path = tmp_path / CONFIG_FILENAME
    config_path.write_text("schedular:\n  mode: forward\n")

    with pytest.raises(ParseError, match="schedular"):
        load_unified_config(config_path)


def test_invalid_value(tmp_path: Path) -> None:
    """Test that invalid values are reported as parse errors."""
    config_path = tmp_path / CONFIG_FILENAME
    config_path.write_text("scheduler:\n  mode: sideways\n")

    with pytest.raises(ParseError):
        load_unified_config(config_path)


def test_invalid_path_limit(tmp_path: Path) -> None:
    """Test that the path limit must be positive."""
    config_path = tmp_path / CONFIG_FILENAME
    config_path.write_text("analysis:\n  max_critical_paths: 0\n")

    with pytest.raises(ParseError):
        load_unified_config(config_path)


class TestDiscoverConfig:
    """Test config file discovery."""

    def test_next_to_project(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """A config beside the project file is used."""
        monkeypatch.chdir(tmp_path)
        project_dir = tmp_path / "plans"
        project_dir.mkdir()
        (project_dir / CONFIG_FILENAME).write_text("scheduler:\n  level_resources: true\n")

        unified = discover_config(project_dir / "project.yaml")

        assert unified.scheduler.level_resources is True

    def test_explicit_path_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """An explicit config path takes priority over discovery."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / CONFIG_FILENAME).write_text("scheduler:\n  mode: dependencies\n")
        explicit = tmp_path / "other.yaml"
        explicit.write_text("scheduler:\n  mode: deadline\n")
        unified = discover_config(tmp_path / "project.yaml", explicit)

        assert unified.scheduler.mode == SchedulingMode.DEADLINE

    def test_current_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """The current directory is searched after the project directory."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / CONFIG_FILENAME).write_text("analysis:\n  all_critical_paths: true\n")
        elsewhere = tmp_path / "elsewhere"
        elsewhere.mkdir()

        unified = discover_config(elsewhere / "project.yaml")

        assert unified.analysis.all_critical_paths is True

    def test_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without any config file the defaults apply."""
        monkeypatch.chdir(tmp_path)

        unified = discover_config(tmp_path / "project.yaml")

        assert unified.scheduler.mode == SchedulingMode.FORWARD
        assert unified.analysis.all_critical_paths is False

    def test_explicit_missing(self, tmp_path: Path) -> None:
        """An explicitly requested config must exist."""
        with pytest.raises(FileNotFoundError):
            discover_config(config_path=tmp_path / "missing.yaml")
