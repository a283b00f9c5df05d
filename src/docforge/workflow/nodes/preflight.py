"""Preflight node - fail fast before touching the filesystem."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from docforge.build.preflight import check_source, resolve_tool
from docforge.core.config import State
from docforge.core.log import logger


@dataclass
class Preflight(BaseNode[State]):
    """Resolve the compiler and check the source document exists."""

    async def run(self, ctx: GraphRunContext[State]) -> "PrepareOutput":
        """Raises ToolNotFoundError or SourceNotFoundError on failure."""
        build = ctx.state.runtime.build
        request = build.request
        reporter = build.reporter
        build.status = "preflight"

        reporter.info(f"Checking for {request.tool}...")
        build.tool = resolve_tool(
            request.tool, request.tool_path, request.search_paths
        )
        reporter.success(f"{request.tool} found: {build.tool}")

        check_source(request.source_path)
        reporter.info(f"Using source file: {request.source_path.name}")
        logger.debug("Preflight passed", source=str(request.source_path))

        from docforge.workflow.nodes.prepare_output import PrepareOutput
        return PrepareOutput()
