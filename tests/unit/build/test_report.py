"""Tests for operator messages."""

from pathlib import Path

from docforge.build.report import RULE, Reporter
from docforge.core.errors import CompilationError, ToolNotFoundError


def test_events_recorded_by_severity():
    reporter = Reporter()

    reporter.info("Checking for pdflatex...")
    reporter.success("pdflatex found")
    reporter.warning("Compilation attempt 1 failed")
    reporter.error("Compilation failed")

    assert [e.severity for e in reporter.events] == [
        "info", "success", "warning", "error"
    ]
    assert reporter.messages("success") == ["pdflatex found"]


def test_header():
    reporter = Reporter()

    reporter.header("Document Build")

    assert reporter.messages() == [RULE, "Document Build", RULE]


def test_braces_are_passed_through():
    """LaTeX output with braces is reported verbatim."""
    reporter = Reporter()

    reporter.info(r"! Undefined control sequence \foo{bar}")

    assert reporter.messages() == [r"! Undefined control sequence \foo{bar}"]


def test_failure_includes_remediation():
    reporter = Reporter()

    reporter.failure(ToolNotFoundError("pdflatex"))

    errors = reporter.messages("error")
    assert errors == ["Tool not found: pdflatex not found"]
    assert any("docforge install" in m for m in reporter.messages("info"))


def test_failure_includes_log_tail():
    reporter = Reporter()
    tail = [f"line {i}" for i in range(20)]
    error = CompilationError([], tail, log_file=Path("/work/main.log"))

    reporter.failure(error)

    messages = reporter.messages("info")
    assert "Log file: /work/main.log" in messages
    assert "Last 20 lines of log file:" in messages
    assert messages.index("line 0") < messages.index("line 19")
    assert messages[-1] == CompilationError.remediation


def test_log_tail_empty():
    reporter = Reporter()

    reporter.log_tail(Path("main.log"), [])

    assert reporter.events == []
