"""LaTeX distribution installation."""

from docforge.install.detect import PackageManager, detect_package_manager
from docforge.install.strategy import (
    InstallerStrategy,
    InstallProfile,
    select_strategy,
)

__all__ = [
    "PackageManager",
    "detect_package_manager",
    "InstallerStrategy",
    "InstallProfile",
    "select_strategy",
]
