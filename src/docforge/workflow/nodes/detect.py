"""Detect node - identify the package manager and current install."""

from __future__ import annotations

import platform
from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from docforge.build.preflight import resolve_tool
from docforge.core.config import State
from docforge.core.errors import ToolNotFoundError
from docforge.install.detect import detect_package_manager


@dataclass
class DetectPlatform(BaseNode[State]):
    """Detect the package manager; skip installing if not needed."""

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> "InstallDistribution | VerifyInstall":
        install = ctx.state.runtime.install
        build_config = ctx.state.config.build
        reporter = install.reporter

        reporter.header("LaTeX Environment Installation")
        install.platform = install.platform or platform.system()
        manager = detect_package_manager(install.platform)
        install.package_manager = manager.value
        reporter.info(
            f"Detected OS: {install.platform} "
            f"with package manager: {manager.value}"
        )

        try:
            found = resolve_tool(
                build_config.tool, search_paths=build_config.search_paths
            )
        except ToolNotFoundError:
            found = None

        if found and not install.reinstall:
            reporter.success(
                f"LaTeX is already installed ({found}); "
                "use --reinstall to install anyway"
            )
            from docforge.workflow.nodes.verify import VerifyInstall
            return VerifyInstall()

        from docforge.workflow.nodes.install import InstallDistribution
        return InstallDistribution()
