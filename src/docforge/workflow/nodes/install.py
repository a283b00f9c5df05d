"""Install node - run the package manager."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from docforge.core.config import State
from docforge.core.runner import Runner
from docforge.install.detect import PackageManager
from docforge.install.strategy import InstallProfile, select_strategy


@dataclass
class InstallDistribution(BaseNode[State]):
    """Install LaTeX with the strategy for the detected manager.

    Raises UnsupportedPlatformError or InstallError.
    """

    async def run(self, ctx: GraphRunContext[State]) -> "VerifyInstall":
        install = ctx.state.runtime.install
        settings = ctx.state.config.install
        reporter = install.reporter
        install.status = "installing"

        manager = PackageManager(install.package_manager)
        strategy = select_strategy(
            manager,
            sudo=settings.sudo,
            templates=ctx.state.config.commands.get(manager.value),
            platform=install.platform,
        )
        requested = install.profile or settings.profile
        profile = strategy.resolve_profile(requested)

        reporter.info(
            f"Installing the '{profile.value}' profile via {strategy.name}: "
            f"{' '.join(strategy.packages(profile))}"
        )
        if profile == InstallProfile.FULL:
            reporter.warning("This will download several gigabytes")

        strategy.install(Runner(), requested)
        install.installed = True
        reporter.success("LaTeX installation completed!")

        from docforge.workflow.nodes.verify import VerifyInstall
        return VerifyInstall()
