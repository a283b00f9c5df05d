"""Compilation with bounded retry."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from docforge.core.errors import CompilationError
from docforge.core.log import literal, logger
from docforge.core.result import BuildAttempt, BuildRequest
from docforge.core.runner import Runner, join_command


def read_tail(path: Path, lines: int) -> list[str]:
    """Last `lines` lines of a text file, or [] if it is unreadable."""
    if lines <= 0:
        return []
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            return [line.rstrip("\n") for line in deque(f, maxlen=lines)]
    except OSError:
        return []


class CompileStage:
    """Run the compiler until it leaves an artifact or attempts run out.

    The artifact on disk decides success, not the exit code: LaTeX
    compilers exit non-zero on recoverable errors while still writing
    a usable PDF. Attempts are sequential because each pass reads the
    auxiliary files written by the previous one.
    """

    def __init__(
        self,
        request: BuildRequest,
        tool: Path,
        runner: Runner | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.request = request
        self.tool = tool
        self.runner = runner or Runner()
        self.clock = clock

    def command(self) -> str:
        return join_command(
            [str(self.tool), *self.request.tool_args,
             self.request.source_path.name]
        )

    def run_attempt(self, number: int) -> BuildAttempt:
        """Run the compiler once with fresh output captures."""
        attempt_dir = self.request.attempt_dir
        stdout_log = attempt_dir / f"attempt-{number}.stdout.log"
        stderr_log = attempt_dir / f"attempt-{number}.stderr.log"
        started = self.clock()

        with logger.span(
            f"Compile attempt {number}/{self.request.max_attempts}",
            source=str(self.request.source_path),
        ):
            result = self.runner.execute(
                self.command(),
                cwd=self.request.workdir,
                stdout_log=stdout_log,
                stderr_log=stderr_log,
                check=False,
            )

        return BuildAttempt(
            attempt_number=number,
            exit_code=result.exited,
            stdout_log=stdout_log,
            stderr_log=stderr_log,
            artifact_present=self.request.derived_artifact.is_file(),
            started=started,
        )

    def remove_stale_artifact(self) -> None:
        """Delete an artifact left over from an earlier invocation."""
        stale = self.request.derived_artifact
        if stale.is_file():
            logger.debug(f"Removing stale {literal(stale.name)}")
            stale.unlink()

    def run(
        self,
        on_attempt: Callable[[BuildAttempt], None] | None = None,
    ) -> list[BuildAttempt]:
        """Compile, retrying up to request.max_attempts times.

        Args:
            on_attempt: Called with each attempt as soon as it finishes

        Returns:
            All attempts; the last one produced the artifact

        Raises:
            CompilationError: If no attempt produced the artifact, or
                an attempt could not run or be captured
        """
        attempts: list[BuildAttempt] = []
        try:
            self.remove_stale_artifact()
            for number in range(1, self.request.max_attempts + 1):
                attempt = self.run_attempt(number)
                attempts.append(attempt)
                if on_attempt:
                    on_attempt(attempt)

                if attempt.artifact_present:
                    return attempts
        except OSError as e:
            log_file = self.request.primary_log
            if not log_file.is_file():
                log_file = None
            raise CompilationError(
                attempts,
                read_tail(log_file, self.request.log_tail_lines)
                if log_file else [],
                log_file=log_file,
                reason=e.strerror or str(e),
            ) from e

        raise CompilationError(
            attempts, self.failure_tail(attempts[-1]),
            log_file=self.failure_log(attempts[-1]),
        )

    def failure_log(self, attempt: BuildAttempt) -> Path:
        """The compiler's own log if it wrote one, else captured stdout."""
        if self.request.primary_log.is_file():
            return self.request.primary_log
        return attempt.stdout_log

    def failure_tail(self, attempt: BuildAttempt) -> list[str]:
        return read_tail(
            self.failure_log(attempt), self.request.log_tail_lines
        )
