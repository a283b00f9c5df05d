"""Promote node - copy the artifact to its timestamped name."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from docforge.build.promote import human_size, promote_artifact
from docforge.core.config import State
from docforge.core.errors import PromotionError


@dataclass
class Promote(BaseNode[State]):
    """Copy the produced document into the output directory.

    A failed copy is fatal and not retried; the run still goes through
    Cleanup.
    """

    async def run(self, ctx: GraphRunContext[State]) -> "Cleanup":
        build = ctx.state.runtime.build
        request = build.request
        build.status = "promoting"

        try:
            build.artifact, build.size_bytes = promote_artifact(
                request.derived_artifact,
                request.output_directory,
                request.label,
            )
        except PromotionError as e:
            build.error = e
            build.reporter.failure(e)
        else:
            kind = request.artifact_extension.upper()
            build.reporter.success(f"{kind} copied to: {build.artifact}")
            build.reporter.info(
                f"Generated {kind} size: {human_size(build.size_bytes)}",
                size_bytes=build.size_bytes,
            )

        from docforge.workflow.nodes.cleanup import Cleanup
        return Cleanup()
