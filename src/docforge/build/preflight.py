"""Read-only checks run before anything is written."""

from __future__ import annotations

import os
import shutil
from collections.abc import Iterable
from pathlib import Path

from docforge.core.errors import SourceNotFoundError, ToolNotFoundError
from docforge.core.log import literal, logger


def _is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


def resolve_tool(
    tool: str,
    tool_path: Path | None = None,
    search_paths: Iterable[Path] = (),
) -> Path:
    """Locate the compiler executable.

    An explicit tool_path must exist and be executable; nothing else is
    tried. Otherwise the process PATH is searched, then each of
    search_paths in order (TeX distributions that are installed but
    not yet on PATH).

    Returns:
        Absolute path to the executable

    Raises:
        ToolNotFoundError: If no executable is found
    """
    if tool_path is not None:
        if _is_executable(tool_path):
            return tool_path.resolve()
        raise ToolNotFoundError(str(tool_path), [tool_path])

    found = shutil.which(tool)
    if found:
        return Path(found).resolve()

    searched = list(search_paths)
    for directory in searched:
        found = shutil.which(tool, path=str(directory))
        if found:
            logger.warning(
                literal(f"{tool} is not on PATH; using {found}"),
                directory=str(directory),
            )
            return Path(found).resolve()

    raise ToolNotFoundError(tool, searched)


def check_source(source: Path) -> Path:
    """Ensure the source document exists.

    Raises:
        SourceNotFoundError: If source is not a file
    """
    if not source.is_file():
        raise SourceNotFoundError(source)
    return source
