"""Fatal error taxonomy.

Every error here ends the invocation. Each carries a category shown to
the operator, a remediation hint, and the process exit code.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from docforge.core.result import BuildAttempt


class DocforgeError(Exception):
    """Base class for errors that terminate a docforge command."""

    category = "error"
    remediation = ""
    exit_code = 1


class ToolNotFoundError(DocforgeError):
    """The compiler could not be resolved."""

    category = "tool not found"
    remediation = (
        "Install a LaTeX distribution first: run 'docforge install'"
    )

    def __init__(self, tool: str, searched: list[Path] | None = None):
        self.tool = tool
        self.searched = searched or []
        super().__init__(f"{tool} not found")


class SourceNotFoundError(DocforgeError):
    """The source document does not exist."""

    category = "source not found"
    remediation = (
        "Run from the directory containing the document, or set "
        "--source / config.build.source"
    )

    def __init__(self, source: Path):
        self.source = source
        super().__init__(f"{source} not found")


class OutputDirectoryError(DocforgeError):
    """The output directory cannot be created or written."""

    category = "output directory unusable"
    remediation = "Check permissions, or choose another --output-dir"

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot use output directory {path}: {reason}")


class CompilationError(DocforgeError):
    """No attempt produced the artifact.

    Either every attempt ran to completion without one, or the
    attempts were cut short by a filesystem error (`reason`).
    """

    category = "compilation failed"
    remediation = "Check the log file for errors in the document"

    def __init__(
        self,
        attempts: list[BuildAttempt],
        log_tail: list[str],
        log_file: Path | None = None,
        reason: str | None = None,
    ):
        self.attempts = attempts
        self.log_tail = log_tail
        self.log_file = log_file
        self.reason = reason
        if reason:
            self.remediation = (
                "Check free disk space and permissions in the "
                "document directory"
            )
            message = (
                f"Compilation aborted after {len(attempts)} "
                f"attempt(s): {reason}"
            )
        else:
            message = f"No output produced after {len(attempts)} attempt(s)"
        super().__init__(message)


class PromotionError(DocforgeError):
    """Copying the artifact to the output directory failed."""

    category = "promotion failed"
    remediation = "Check free disk space and output directory permissions"

    def __init__(self, source: Path, destination: Path, reason: str):
        self.source = source
        self.destination = destination
        super().__init__(f"Cannot copy {source} to {destination}: {reason}")


class InstallError(DocforgeError):
    """An installer command failed."""

    category = "installation failed"
    remediation = "Re-run with --verbose, or install LaTeX manually"

    def __init__(self, command: str, exit_code: int, output: str = ""):
        self.command = command
        self.command_exit_code = exit_code
        self.output = output
        super().__init__(f"'{command}' exited with {exit_code}")


class UnsupportedPlatformError(InstallError):
    """No installer strategy exists for this machine."""

    category = "unsupported platform"
    remediation = (
        "Install LaTeX manually: https://www.tug.org/texlive/ "
        "(Linux/Windows) or https://www.tug.org/mactex/ (macOS)"
    )

    def __init__(self, platform: str):
        self.platform = platform
        DocforgeError.__init__(
            self, f"No supported package manager found on {platform}"
        )
