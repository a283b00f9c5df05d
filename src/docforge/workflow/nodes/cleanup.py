"""Cleanup node - remove byproducts and produce the final result."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from docforge.build.cleanup import cleanup
from docforge.build.output import open_directory
from docforge.core.config import State
from docforge.core.result import BuildResult
from docforge.core.runner import Runner


@dataclass
class Cleanup(BaseNode[State, None, BuildResult]):
    """Remove transient files on every path, then finish.

    Cleanup problems are warnings; the verdict comes from whether an
    artifact was promoted.
    """

    async def run(self, ctx: GraphRunContext[State]) -> End[BuildResult]:
        build = ctx.state.runtime.build
        settings = ctx.state.config.build
        reporter = build.reporter
        build.status = "cleanup"

        build.cleanup = cleanup(build.request)

        success = build.error is None and build.artifact is not None
        build.result = BuildResult(
            success=success,
            artifact_path=build.artifact if success else None,
            attempts=tuple(build.attempts),
            size_bytes=build.size_bytes if success else None,
        )
        build.status = "done" if success else "failed"

        if success:
            if settings.open_output:
                open_directory(
                    Runner(), build.request.output_directory,
                    settings.openers,
                )
            reporter.header("Done! Your document is ready.")

        return End(build.result)
