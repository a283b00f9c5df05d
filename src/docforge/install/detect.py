"""Package manager detection."""

from __future__ import annotations

import shutil
from collections.abc import Callable
from enum import Enum


class PackageManager(str, Enum):
    """Installer backends docforge knows how to drive."""

    APT = "apt"
    DNF = "dnf"
    YUM = "yum"
    PACMAN = "pacman"
    ZYPPER = "zypper"
    HOMEBREW = "homebrew"
    WINGET = "winget"
    NONE = "none"
    UNKNOWN = "unknown"


# Probe order on Linux; the first executable found wins
LINUX_PROBES = (
    ("apt-get", PackageManager.APT),
    ("dnf", PackageManager.DNF),
    ("yum", PackageManager.YUM),
    ("pacman", PackageManager.PACMAN),
    ("zypper", PackageManager.ZYPPER),
)


def detect_package_manager(
    system: str,
    which: Callable[[str], str | None] = shutil.which,
) -> PackageManager:
    """Pick the package manager for a platform.

    Args:
        system: platform.system() value (Linux, Darwin, Windows, ...)
        which: Executable lookup, shutil.which by default

    Returns:
        The detected manager. NONE means the OS is known but has no
        supported manager installed; UNKNOWN means the OS itself is not
        supported.
    """
    system = system.lower()

    if system == "linux":
        for executable, manager in LINUX_PROBES:
            if which(executable):
                return manager
        return PackageManager.NONE

    if system == "darwin":
        if which("brew"):
            return PackageManager.HOMEBREW
        return PackageManager.NONE

    if system == "windows" or system.startswith(("cygwin", "msys", "mingw")):
        if which("winget"):
            return PackageManager.WINGET
        return PackageManager.NONE

    return PackageManager.UNKNOWN
