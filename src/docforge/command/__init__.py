"""CLI command modules for docforge."""

from docforge.command.build import BuildCommand
from docforge.command.install import InstallCommand

__all__ = ["BuildCommand", "InstallCommand"]
