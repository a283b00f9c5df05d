"""Tests for Runner command execution."""

import pytest
from invoke import UnexpectedExit

from docforge.core.runner import Runner, join_command


def test_join_command_quotes():
    assert join_command(["echo", "a b", "c"]) == "echo 'a b' c"


def test_execute_captures_output(tmp_path, posix_only):
    result = Runner().execute("echo 'Hello World'")

    assert result.exited == 0
    assert result.stdout.strip() == "Hello World"


def test_execute_writes_logs(tmp_path, posix_only):
    stdout_log = tmp_path / "logs" / "out.log"
    stderr_log = tmp_path / "logs" / "err.log"

    Runner().execute(
        "echo out; echo err >&2",
        stdout_log=stdout_log,
        stderr_log=stderr_log,
    )

    assert stdout_log.read_text().strip() == "out"
    assert stderr_log.read_text().strip() == "err"


def test_execute_in_cwd(tmp_path, posix_only):
    result = Runner().execute("pwd", cwd=tmp_path)

    assert result.stdout.strip() == str(tmp_path.resolve())


def test_execute_check_raises(posix_only):
    with pytest.raises(UnexpectedExit):
        Runner().execute("exit 3")


def test_execute_no_check(posix_only):
    result = Runner().execute("exit 3", check=False)

    assert result.exited == 3


def test_execute_stdin_closed(posix_only):
    """A command reading stdin sees end-of-file instead of hanging."""
    result = Runner().execute("cat", check=False)

    assert result.stdout == ""


def test_execute_stdin_string(posix_only):
    result = Runner().execute("cat", stdin="typed input\n")

    assert result.stdout == "typed input\n"


def test_execute_echo_at_level(posix_only):
    """Output with braces can be echoed to the log."""
    result = Runner().execute(
        "echo '\\textbf{x}'", log_level="spew"
    )

    assert result.exited == 0
