"""Install command - provision a LaTeX distribution."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from docforge.core.errors import DocforgeError
from docforge.install.strategy import InstallProfile

if TYPE_CHECKING:
    from docforge.core.config import State


class InstallCommand(BaseModel):
    """Install LaTeX with the system package manager and verify it.

    Supports apt, dnf, yum, pacman, zypper, Homebrew and winget.
    Does nothing but verify when pdflatex is already available,
    unless --reinstall is given.
    """

    profile: InstallProfile | None = Field(
        default=None,
        description=(
            "basic, recommended, full or custom "
            "(default: config.install.profile)"
        ),
    )
    reinstall: bool = Field(
        default=False,
        description="Install even if LaTeX is already present",
    )
    extras: bool = Field(
        default=False,
        description="Also install config.install.extra_packages via tlmgr",
    )

    async def run_workflow(self, state: State) -> int:
        """Run the install workflow.

        Returns:
            Exit code (0=success, 1=failure)
        """
        install = state.runtime.install
        install.profile = self.profile
        install.reinstall = self.reinstall
        install.extras = self.extras

        from docforge.workflow.graph import create_install_workflow
        from docforge.workflow.nodes.detect import DetectPlatform

        workflow = create_install_workflow()
        try:
            async with workflow.iter(DetectPlatform(), state=state) as run:
                async for _node in run:
                    pass
        except DocforgeError as e:
            install.status = "failed"
            install.reporter.failure(e)
            return e.exit_code

        return 0 if install.status == "verified" else 1
