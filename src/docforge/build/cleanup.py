"""Best-effort removal of build byproducts."""

from __future__ import annotations

import shutil
from pathlib import Path

from docforge.core.log import literal, logger
from docforge.core.result import BuildRequest, CleanupReport


def transient_files(request: BuildRequest) -> list[Path]:
    """Byproducts of compiling request.source_path, existing or not."""
    paths = [
        request.source_path.with_suffix(f".{ext}")
        for ext in request.transient_extensions
    ]
    if request.derived_artifact not in paths:
        paths.append(request.derived_artifact)
    return paths


def cleanup(request: BuildRequest) -> CleanupReport:
    """Remove byproducts, the working artifact and attempt captures.

    Never raises: anything that cannot be removed is logged as a
    warning and listed in the report.
    """
    report = CleanupReport()

    for path in transient_files(request):
        if not path.exists():
            continue
        try:
            path.unlink()
            report.removed.append(path)
        except OSError as e:
            report.failed[path] = e.strerror or str(e)

    attempt_dir = request.attempt_dir
    if attempt_dir.exists():
        try:
            shutil.rmtree(attempt_dir)
            report.removed.append(attempt_dir)
        except OSError as e:
            report.failed[attempt_dir] = e.strerror or str(e)

    for path, reason in report.failed.items():
        logger.warning(literal(f"Could not remove {path}: {reason}"))
    logger.debug(f"Cleanup removed {len(report.removed)} path(s)")

    return report
