"""Value objects passed through the build pipeline."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator


class BuildRequest(BaseModel):
    """Everything one build needs, with all paths absolute."""

    model_config = ConfigDict(frozen=True)

    source_path: Path
    tool: str = "pdflatex"
    tool_path: Path | None = None
    tool_args: tuple[str, ...] = ("-interaction=nonstopmode",)
    output_directory: Path
    max_attempts: int = Field(default=2, ge=1)
    label: str = "document"
    artifact_extension: str = "pdf"
    log_tail_lines: int = Field(default=20, ge=0)
    transient_extensions: tuple[str, ...] = ("aux", "log", "out")
    search_paths: tuple[Path, ...] = ()

    @property
    def workdir(self) -> Path:
        """Directory the compiler runs in."""
        return self.source_path.parent

    @property
    def derived_artifact(self) -> Path:
        """Where the compiler writes its output for this source."""
        return self.source_path.with_suffix(f".{self.artifact_extension}")

    @property
    def primary_log(self) -> Path:
        """The compiler's own log file (e.g. main.log)."""
        return self.source_path.with_suffix(".log")

    @property
    def attempt_dir(self) -> Path:
        """Transient directory holding per-attempt output captures."""
        return self.workdir / f".{self.source_path.stem}.attempts"


class BuildAttempt(BaseModel):
    """Record of one compiler run."""

    model_config = ConfigDict(frozen=True)

    attempt_number: int
    exit_code: int
    stdout_log: Path
    stderr_log: Path
    artifact_present: bool = False
    started: datetime


class BuildResult(BaseModel):
    """Outcome of one pipeline invocation. Never mutated once returned."""

    model_config = ConfigDict(frozen=True)

    success: bool
    artifact_path: Path | None = None
    attempts: tuple[BuildAttempt, ...] = ()
    size_bytes: int | None = None

    @model_validator(mode="after")
    def _artifact_iff_success(self) -> BuildResult:
        if self.success != (self.artifact_path is not None):
            raise ValueError(
                "artifact_path must be set exactly when success is true"
            )
        return self


class CleanupReport(BaseModel):
    """What cleanup removed and what it could not."""

    removed: list[Path] = Field(default_factory=list)
    failed: dict[Path, str] = Field(default_factory=dict)

    @property
    def clean(self) -> bool:
        return not self.failed
