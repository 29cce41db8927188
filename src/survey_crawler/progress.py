"""
Progress reporting for survey runs.

ProgressIndicator is the sink the traversal loop writes to. Every status
line becomes a LogEvent that is kept in `events`, passed to an optional
callback (the web job runner uses this), echoed to the console when
verbose and mirrored to the standard logger.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

import click

from .models.events import LogEvent, Severity


__all__ = ["ProgressIndicator", "ProgressCallback"]

logger = logging.getLogger(__name__)


ProgressCallback = Callable[[LogEvent], None]


class ProgressIndicator:
    """Helper class for progress messages."""

    ICONS = {
        Severity.INFO: "[INFO]",
        Severity.SUCCESS: "[OK]",
        Severity.ERROR: "[ERROR]",
        Severity.DEBUG: "[DEBUG]",
    }

    COLORS = {
        Severity.SUCCESS: "green",
        Severity.ERROR: "red",
        Severity.DEBUG: "bright_black",
    }

    LOG_LEVELS = {
        Severity.INFO: logging.INFO,
        Severity.SUCCESS: logging.INFO,
        Severity.ERROR: logging.ERROR,
        Severity.DEBUG: logging.DEBUG,
    }

    def __init__(
        self,
        verbose: bool = False,
        callback: Optional[ProgressCallback] = None,
        show_debug: bool = False,
    ):
        """
        Initialize progress indicator.

        Args:
            verbose: Whether to print progress messages.
            callback: Optional callback receiving every LogEvent.
            show_debug: Whether debug events are printed too.
        """
        self.verbose = verbose
        self.callback = callback
        self.show_debug = show_debug
        self.events: list[LogEvent] = []

    def update(self, severity: Severity, message: str) -> LogEvent:
        """
        Emit a progress event.

        Args:
            severity: Event severity.
            message: Progress message.

        Returns:
            The emitted event.
        """
        event = LogEvent(message=message, severity=severity)
        self.events.append(event)

        if self.verbose and (severity is not Severity.DEBUG or self.show_debug):
            line = f"{self.ICONS[severity]} {message}"
            click.echo(click.style(line, fg=self.COLORS.get(severity)))

        if self.callback:
            self.callback(event)

        logger.log(self.LOG_LEVELS[severity], message)
        return event

    def info(self, message: str) -> LogEvent:
        return self.update(Severity.INFO, message)

    def success(self, message: str) -> LogEvent:
        """Show success message."""
        return self.update(Severity.SUCCESS, message)

    def error(self, message: str) -> LogEvent:
        """Show error message."""
        return self.update(Severity.ERROR, message)

    def debug(self, message: str) -> LogEvent:
        return self.update(Severity.DEBUG, message)
