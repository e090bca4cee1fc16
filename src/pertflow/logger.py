"""Logging for scheduling runs, keyed to the CLI's -v count.

Verbosity 1 reports what a scheduler decided (tasks delayed or moved by the
leveler), 2 adds every candidate date it turned down, and 3 adds the
ES/EF/LS/LF values of both passes. Messages at 3 carry their level name so
the interleaved streams stay readable.
"""

from __future__ import annotations

import logging
import sys
from datetime import date
from typing import Any, Literal, TextIO

CHANGES_LEVEL = 25  # Between INFO (20) and WARNING (30)
CHECKS_LEVEL = 15  # Between DEBUG (10) and INFO (20)

logging.addLevelName(CHANGES_LEVEL, "CHANGES")
logging.addLevelName(CHECKS_LEVEL, "CHECKS")

VERBOSITY_SILENT = 0
VERBOSITY_CHANGES = 1
VERBOSITY_CHECKS = 2
VERBOSITY_DEBUG = 3

_LEVELS = {
    VERBOSITY_SILENT: logging.ERROR,
    VERBOSITY_CHANGES: CHANGES_LEVEL,
    VERBOSITY_CHECKS: CHECKS_LEVEL,
    VERBOSITY_DEBUG: logging.DEBUG,
}

_PASS_LABELS = {"forward": ("ES", "EF"), "backward": ("LS", "LF")}


class PertflowLogger(logging.Logger):
    """Logger with one method per kind of scheduling event."""

    def changes(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a scheduling decision (verbosity 1)."""
        if self.isEnabledFor(CHANGES_LEVEL):
            self._log(CHANGES_LEVEL, msg, args, **kwargs)

    def checks(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a considered alternative (verbosity 2)."""
        if self.isEnabledFor(CHECKS_LEVEL):
            self._log(CHECKS_LEVEL, msg, args, **kwargs)

    def task_moved(self, task_id: str, old_start: date, new_start: date, reason: str) -> None:
        """Report a task that starts on a different day than first computed."""
        self.changes(f"  {task_id}: {old_start} -> {new_start} ({reason})")

    def slot_rejected(self, task_id: str, day: date, reason: str) -> None:
        """Report a candidate start date that was turned down."""
        self.checks(f"    {task_id} @ {day}: {reason}")

    def pass_values(
        self, direction: Literal["forward", "backward"], task_id: str, start: int, finish: int
    ) -> None:
        """Report one task's start/finish offsets from a CPM pass (verbosity 3)."""
        if self.isEnabledFor(logging.DEBUG):
            start_label, finish_label = _PASS_LABELS[direction]
            self.debug(f"  {direction} {task_id}: {start_label}={start} {finish_label}={finish}")


def get_logger() -> PertflowLogger:
    """Return the shared pertflow logger.

    Call setup_logger() first to attach a handler; until then only the
    default (error) level applies.
    """
    logging.setLoggerClass(PertflowLogger)
    logger = logging.getLogger("pertflow")
    if not isinstance(logger, PertflowLogger):
        raise TypeError("The 'pertflow' logger was created before PertflowLogger was installed")
    return logger


def setup_logger(verbosity: int, stream: TextIO | None = None) -> None:
    """Configure the pertflow logger for a verbosity level.

    Can be called repeatedly; existing handlers are replaced. Verbosities
    above 3 behave like 3.

    Args:
        verbosity: 0=silent (errors only), 1=changes, 2=checks, 3=debug
        stream: Output stream, defaults to sys.stderr
    """
    verbosity = min(max(verbosity, VERBOSITY_SILENT), VERBOSITY_DEBUG)
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(_LEVELS[verbosity])

    fmt = "%(levelname)-7s %(message)s" if verbosity == VERBOSITY_DEBUG else "%(message)s"
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)
    logger.propagate = False


def reset_logger() -> None:
    """Reset the logger to a clean state (used by tests)."""
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(logging.ERROR)
