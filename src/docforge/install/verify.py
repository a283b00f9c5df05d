"""Post-install checks: tool presence, extras, and a test compile."""

from __future__ import annotations

import shutil
import tempfile
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from docforge.build.compile import CompileStage
from docforge.build.preflight import resolve_tool
from docforge.core.errors import CompilationError
from docforge.core.log import literal, logger
from docforge.core.result import BuildRequest
from docforge.core.runner import Runner, join_command

TEST_DOCUMENT = r"""\documentclass{article}
\usepackage[utf8]{inputenc}
\title{LaTeX Test Document}
\author{docforge}
\date{\today}

\begin{document}
\maketitle
\section{Test Section}
If you can see this PDF, your LaTeX installation is working correctly!
\end{document}
"""


@dataclass
class Verification:
    """What verify_installation found."""

    tool_path: Path
    version: str | None
    available: list[str] = field(default_factory=list)

    @property
    def working(self) -> bool:
        return self.version is not None


def verify_installation(
    runner: Runner,
    tool: str,
    companion_tools: Iterable[str] = (),
    search_paths: Iterable[Path] = (),
) -> Verification:
    """Check the compiler resolves and answers --version.

    Raises:
        ToolNotFoundError: If the compiler is still not resolvable
    """
    tool_path = resolve_tool(tool, search_paths=search_paths)

    result = runner.execute(
        join_command([str(tool_path), "--version"]), check=False
    )
    lines = result.stdout.splitlines()
    version = lines[0].strip() if result.exited == 0 and lines else None
    logger.debug(
        literal(f"{tool} --version exited with {result.exited}")
    )

    available = [name for name in companion_tools if shutil.which(name)]
    return Verification(tool_path, version, available)


def install_extra_packages(
    runner: Runner,
    packages: Iterable[str],
    tlmgr: str = "tlmgr",
) -> dict[str, bool]:
    """Install each package with tlmgr; failures are only warnings.

    Returns:
        Package name -> whether its install command succeeded. Empty
        when tlmgr is unavailable.
    """
    if not shutil.which(tlmgr):
        logger.warning(
            "tlmgr not available; packages will be installed on demand"
        )
        return {}

    outcome = {}
    for package in packages:
        result = runner.execute(
            join_command([tlmgr, "install", package]), check=False
        )
        outcome[package] = result.exited == 0
        if not outcome[package]:
            logger.warning(
                literal(
                    f"Could not install {package} (may already be installed)"
                )
            )
    return outcome


def smoke_test(
    tool_path: Path,
    runner: Runner | None = None,
    workdir: Path | None = None,
) -> bool:
    """Compile TEST_DOCUMENT once in a scratch directory.

    Returns:
        True if a PDF came out
    """
    with tempfile.TemporaryDirectory(dir=workdir) as tmp:
        source = Path(tmp) / "test_latex.tex"
        source.write_text(TEST_DOCUMENT, encoding="utf-8")
        request = BuildRequest(
            source_path=source,
            tool_path=tool_path,
            output_directory=Path(tmp),
            max_attempts=1,
        )
        try:
            CompileStage(request, tool_path, runner).run()
        except CompilationError as e:
            for line in e.log_tail:
                logger.debug(literal(line))
            return False
    return True
