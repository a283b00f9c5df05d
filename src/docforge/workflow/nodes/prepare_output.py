"""Prepare-output node."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from docforge.build.output import prepare_output_dir
from docforge.core.config import State


@dataclass
class PrepareOutput(BaseNode[State]):
    """Make sure the output directory exists and is writable."""

    async def run(self, ctx: GraphRunContext[State]) -> "Compile":
        build = ctx.state.runtime.build
        build.status = "prepare_output"

        build.reporter.info("Creating output directory...")
        output_dir = prepare_output_dir(build.request.output_directory)
        build.reporter.success(f"Output directory: {output_dir}")

        from docforge.workflow.nodes.compile import Compile
        return Compile()
