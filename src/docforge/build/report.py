"""Operator-facing status messages."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from docforge.core.errors import CompilationError, DocforgeError
from docforge.core.log import literal, logger

RULE = "=" * 40


@dataclass
class Event:
    severity: str
    message: str


@dataclass
class Reporter:
    """Severity-tagged messages routed to the logger.

    Every event is also kept in `events`. Nothing here feeds back into
    the pipeline's decisions.
    """

    events: list[Event] = field(default_factory=list)

    def _emit(self, severity: str, message: str, **attrs) -> None:
        self.events.append(Event(severity, message))
        {
            "info": logger.info,
            "success": logger.notice,
            "warning": logger.warning,
            "error": logger.error,
        }[severity](literal(message), **attrs)

    def info(self, message: str, **attrs) -> None:
        self._emit("info", message, **attrs)

    def success(self, message: str, **attrs) -> None:
        self._emit("success", message, **attrs)

    def warning(self, message: str, **attrs) -> None:
        self._emit("warning", message, **attrs)

    def error(self, message: str, **attrs) -> None:
        self._emit("error", message, **attrs)

    def header(self, title: str) -> None:
        self.info(RULE)
        self.info(title)
        self.info(RULE)

    def log_tail(self, log_file: Path | None, lines: list[str]) -> None:
        if not lines:
            return
        if log_file:
            self.info(f"Log file: {log_file}")
        self.info(f"Last {len(lines)} lines of log file:")
        for line in lines:
            self.info(line)

    def failure(self, error: DocforgeError) -> None:
        """Category, detail, log tail (if any) and remediation."""
        self.error(f"{error.category.capitalize()}: {error}")
        if isinstance(error, CompilationError):
            self.log_tail(error.log_file, error.log_tail)
        if error.remediation:
            self.info(error.remediation)

    def messages(self, severity: str | None = None) -> list[str]:
        return [
            e.message for e in self.events
            if severity is None or e.severity == severity
        ]
