"""Output directory preparation."""

import os
import shutil
from pathlib import Path

from docforge.core.errors import OutputDirectoryError
from docforge.core.log import literal, logger
from docforge.core.runner import join_command


def prepare_output_dir(path: Path) -> Path:
    """Create path (with parents) if needed and check it is writable.

    Calling this on an existing writable directory does nothing.

    Raises:
        OutputDirectoryError: If the directory cannot be created or is
            not writable
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except FileExistsError as e:
        raise OutputDirectoryError(
            path, "exists and is not a directory"
        ) from e
    except OSError as e:
        raise OutputDirectoryError(path, e.strerror or str(e)) from e

    if not os.access(path, os.W_OK | os.X_OK):
        raise OutputDirectoryError(path, "not writable")

    return path


def open_directory(runner, path: Path, openers: list[str]) -> str | None:
    """Open path with the first available opener, in the background.

    Returns:
        The opener used, or None if none is installed or it failed
            to start
    """
    for opener in openers:
        if shutil.which(opener):
            try:
                runner.launch(join_command([opener, str(path)]))
            except OSError as e:
                logger.warning(
                    literal(f"Could not open {path} with {opener}: {e}")
                )
                return None
            return opener
    return None
