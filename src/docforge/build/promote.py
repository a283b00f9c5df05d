"""Artifact promotion to the output directory."""

from __future__ import annotations

import shutil
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from docforge.core.errors import PromotionError
from docforge.core.log import logger


def artifact_name(label: str, when: datetime, extension: str) -> str:
    """`<label>_<YYYYMMDD>_<HHMMSS>.<extension>`"""
    return f"{label}_{when.strftime('%Y%m%d_%H%M%S')}.{extension}"


def promote_artifact(
    artifact: Path,
    output_dir: Path,
    label: str,
    clock: Callable[[], datetime] = datetime.now,
) -> tuple[Path, int]:
    """Copy artifact into output_dir under a timestamped name.

    Two promotions within the same second resolve to the same name;
    the later one wins.

    Returns:
        (destination path, size in bytes)

    Raises:
        PromotionError: If the copy fails
    """
    extension = artifact.suffix.lstrip(".")
    destination = output_dir / artifact_name(label, clock(), extension)

    try:
        shutil.copyfile(artifact, destination)
        size = destination.stat().st_size
    except OSError as e:
        raise PromotionError(
            artifact, destination, e.strerror or str(e)
        ) from e

    logger.debug(
        "Artifact promoted",
        source=str(artifact),
        destination=str(destination),
        size_bytes=size,
    )
    return destination, size


def human_size(size: int) -> str:
    """Format a byte count the way `ls -lh` does (e.g. 48K, 1.2M)."""
    value = float(size)
    for unit in ("B", "K", "M", "G"):
        if value < 1024 or unit == "G":
            break
        value /= 1024
    if unit == "B":
        return f"{size}B"
    return f"{value:.1f}{unit}" if value < 10 else f"{value:.0f}{unit}"
