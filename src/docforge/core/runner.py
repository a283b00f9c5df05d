"""Command execution on top of invoke."""

import io
import shlex
from pathlib import Path

from invoke import Context, Result

from docforge.core.log import literal, logger


def join_command(parts: list[str]) -> str:
    """Build a shell command string, quoting each part."""
    return ' '.join(shlex.quote(str(part)) for part in parts)


class Runner(Context):
    """invoke.Context with docforge's execution defaults.

    Commands never read from the terminal: stdin is the given string,
    or empty, so a tool that would prompt sees end-of-file and falls
    back to its default.
    """

    def execute(
        self,
        command: str,
        cwd: Path | None = None,
        stdin: str | None = None,
        stdout_log: Path | None = None,
        stderr_log: Path | None = None,
        log_level: str | None = None,
        check: bool = True,
        env: dict[str, str] | None = None,
    ) -> Result:
        """Run a command to completion and capture its output.

        Args:
            command: Command string to execute
            cwd: Working directory for command execution
            stdin: String to send to the command's stdin
            stdout_log: File to receive captured stdout
            stderr_log: File to receive captured stderr
            log_level: If set, echo each output line at this level
            check: If True, raise on non-zero exit code
            env: Extra environment variables (merged into os.environ)

        Returns:
            invoke.Result with stdout, stderr, exited

        Raises:
            invoke.UnexpectedExit: If check=True and the command
                returns non-zero
        """
        kwargs = {
            "hide": True,
            "warn": not check,
            "in_stream": io.StringIO(stdin or ""),
        }
        if env:
            kwargs["env"] = env

        logger.debug(
            f"Running: {literal(command)}", cwd=str(cwd) if cwd else None
        )
        if cwd:
            with self.cd(str(cwd)):
                result = self.run(command, **kwargs)
        else:
            result = self.run(command, **kwargs)

        for path, text in ((stdout_log, result.stdout),
                           (stderr_log, result.stderr)):
            if path:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(text, encoding="utf-8")

        if log_level:
            for line in (result.stdout + result.stderr).splitlines():
                logger.log(log_level, literal(line.rstrip()))

        return result

    def launch(self, command: str) -> None:
        """Start a command in the background and return immediately."""
        logger.debug(f"Launching: {literal(command)}")
        self.run(command, disown=True, hide=True, warn=True)
