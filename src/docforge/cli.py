#!/usr/bin/env python3
"""docforge CLI - install LaTeX and build timestamped PDFs."""

import asyncio
import sys

from pydantic_settings import CliApp, CliSubCommand, get_subcommand

from docforge.command.build import BuildCommand
from docforge.command.install import InstallCommand
from docforge.core.config import State
from docforge.core.log import logger


class CliState(State):
    """Build a LaTeX document into a timestamped PDF, or install the
    LaTeX toolchain it needs.

    Configuration sources (in priority order):
    1. Command-line arguments (--config.build.label value)
    2. --include files, then docforge.yaml in the current directory
    3. User config (docforge.yaml in the platform config directory)
    4. .env file
    5. Environment variables (DOCFORGE_CONFIG__BUILD__LABEL=value)
    """

    build: CliSubCommand[BuildCommand]
    install: CliSubCommand[InstallCommand]

    def cli_cmd(self):
        """Dispatch to the active subcommand, or show help if none."""
        subcommand = get_subcommand(self, is_required=False)

        if subcommand is None:
            CliApp.run(CliState, cli_args=['--help'])
            sys.exit(1)

        with logger:
            exit_code = asyncio.run(subcommand.run_workflow(self))
            raise SystemExit(exit_code)


def main():
    """Main entry point for CLI."""
    CliApp.run(CliState)


if __name__ == "__main__":
    main()
