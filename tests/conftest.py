"""Pytest configuration and fixtures for docforge tests."""

import os
import sys
import tempfile
from pathlib import Path

import pytest

from docforge.core.log import ConsoleSink, setup_logger

# Stand-in for pdflatex. The last argument is the source file; MODE is
# replaced with one of the bodies below.
FAKE_TOOL = """#!/bin/sh
for last in "$@"; do :; done
stem="${last%.tex}"
echo "This is fakeTeX, processing $last"
MODE
"""

FAKE_TOOL_MODES = {
    # Writes the PDF on the first pass
    "ok": """
printf 'aux\\n' > "$stem.aux"
printf 'Output written on %s.pdf\\n' "$stem" > "$stem.log"
printf '%%PDF-1.4 fake\\n' > "$stem.pdf"
exit 0
""",
    # Never writes the PDF; leaves a 30 line log
    "fail": """
printf 'aux\\n' > "$stem.aux"
: > "$stem.log"
i=1
while [ $i -le 30 ]; do
    echo "log line $i" >> "$stem.log"
    i=$((i + 1))
done
echo "! Undefined control sequence." >&2
exit 1
""",
    # Fails until the .aux from a previous pass exists
    "second": """
if [ -f "$stem.aux" ]; then
    printf '%%PDF-1.4 fake\\n' > "$stem.pdf"
    echo "second pass" > "$stem.log"
    exit 0
fi
printf 'aux\\n' > "$stem.aux"
echo "Rerun to get cross-references right." > "$stem.log"
exit 1
""",
    # Writes the PDF but exits non-zero
    "warn": """
printf '%%PDF-1.4 fake\\n' > "$stem.pdf"
echo "LaTeX Warning: Reference undefined" > "$stem.log"
exit 1
""",
    # Fails without writing a log file
    "nolog": """
echo "fatal: cannot read $last"
exit 2
""",
    # Answers --version
    "version": """
if [ "$1" = "--version" ]; then
    echo "fakeTeX 3.141592653 (TeX Live 2025)"
    echo "kpathsea version 6.4.0"
    exit 0
fi
printf '%%PDF-1.4 fake\\n' > "$stem.pdf"
exit 0
""",
}

SAMPLE_DOCUMENT = r"""\documentclass{article}
\begin{document}
Hello, {world}.
\end{document}
"""


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    """Console-only debug logging for the whole test run."""
    test_log_root = Path(tempfile.gettempdir()) / "docforge-tests"
    setup_logger(
        log_root=test_log_root,
        run_name="test",
        console=ConsoleSink(level="debug"),
    )


@pytest.fixture
def posix_only():
    """Skip tests that run shell scripts."""
    if os.name == "nt":
        pytest.skip("POSIX-only test (fake compiler is a shell script)")


@pytest.fixture
def fake_tool(tmp_path, posix_only):
    """Factory writing an executable fake compiler for a mode."""
    def make(mode: str = "ok") -> Path:
        path = tmp_path / "bin" / f"fakelatex-{mode}"
        path.parent.mkdir(exist_ok=True)
        path.write_text(FAKE_TOOL.replace("MODE", FAKE_TOOL_MODES[mode]))
        path.chmod(0o755)
        return path
    return make


@pytest.fixture
def document(tmp_path):
    """A source document in its own directory."""
    workdir = tmp_path / "doc"
    workdir.mkdir()
    source = workdir / "main.tex"
    source.write_text(SAMPLE_DOCUMENT)
    return source


@pytest.fixture
def mock_argv():
    """Save and restore sys.argv."""
    original = sys.argv.copy()
    sys.argv = ["docforge"]
    yield
    sys.argv = original
