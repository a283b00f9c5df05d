"""Verify node - confirm the compiler works, then optional extras."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from docforge.core.config import State
from docforge.core.runner import Runner
from docforge.install.verify import (
    install_extra_packages,
    smoke_test,
    verify_installation,
)


@dataclass
class VerifyInstall(BaseNode[State, None, bool]):
    """Check the installation and report what is available.

    Ends with True when the compiler answers --version and, if run,
    the test compile produced a PDF. Raises ToolNotFoundError if the
    compiler is still missing.
    """

    async def run(self, ctx: GraphRunContext[State]) -> End[bool]:
        install = ctx.state.runtime.install
        settings = ctx.state.config.install
        tool = ctx.state.config.build.tool
        reporter = install.reporter
        runner = Runner()

        reporter.header("Verifying Installation")
        verification = verify_installation(
            runner,
            tool,
            settings.companion_tools,
            ctx.state.config.build.search_paths,
        )
        install.version = verification.version
        install.available_tools = verification.available

        reporter.success(f"{tool} found: {verification.tool_path}")
        if verification.version:
            reporter.info(f"Installed version: {verification.version}")
        else:
            reporter.warning(f"{tool} found but not working properly")
        for companion in verification.available:
            reporter.success(f"{companion} available")

        if install.extras and settings.extra_packages:
            reporter.header("Installing Additional Packages")
            outcome = install_extra_packages(runner, settings.extra_packages)
            if outcome:
                reporter.success(
                    f"{sum(outcome.values())}/{len(outcome)} "
                    "additional packages installed"
                )

        ok = verification.working
        if settings.smoke_test and ok:
            reporter.info("Testing LaTeX compilation...")
            ok = smoke_test(verification.tool_path, runner)
            install.smoke_test_passed = ok
            if ok:
                reporter.success("Test compilation successful!")
            else:
                reporter.error("Test compilation failed")

        install.status = "verified" if ok else "failed"
        if ok:
            reporter.header("Installation Complete!")
            reporter.info("Next step: run 'docforge build'")
        return End(ok)
