"""Build command - compile the document and promote the result."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from docforge.core.errors import DocforgeError
from docforge.core.log import logger

if TYPE_CHECKING:
    from docforge.core.config import State


class BuildCommand(BaseModel):
    """Compile the document and copy the PDF to a timestamped file.

    Runs the compiler non-interactively, retrying once by default if
    no PDF comes out, copies the result to
    <output-dir>/<label>_<YYYYMMDD>_<HHMMSS>.pdf and removes auxiliary
    files. Exits 0 on success and 1 on any failure.
    """

    source: Path | None = Field(
        default=None,
        description="Document to compile (default: config.build.source)",
    )
    output_dir: Path | None = Field(
        default=None,
        alias="output-dir",
        description="Output directory (default: config.build.output_dir)",
    )
    verbose: bool = Field(
        default=False,
        description="Show debug output, including every command run",
    )

    model_config = ConfigDict(populate_by_name=True)

    async def run_workflow(
        self, state: State, base_dir: Path | None = None
    ) -> int:
        """Run the build workflow.

        Args:
            state: State instance
            base_dir: Directory relative paths are resolved against;
                the invocation directory when omitted

        Returns:
            Exit code (0=success, 1=failure)
        """
        settings = state.config.build
        if self.source is not None:
            settings.source = self.source
        if self.output_dir is not None:
            settings.output_dir = self.output_dir
        if self.verbose:
            state.config.logger.console.level = "debug"
            state.config.setup_logging()

        build = state.runtime.build
        build.request = settings.to_request(base_dir or Path.cwd())
        build.reporter.header("Document Build")

        from docforge.workflow.graph import create_build_workflow
        from docforge.workflow.nodes.preflight import Preflight

        workflow = create_build_workflow()
        try:
            async with workflow.iter(Preflight(), state=state) as run:
                async for _node in run:
                    pass
        except DocforgeError as e:
            build.status = "failed"
            build.error = e
            build.reporter.failure(e)
            return e.exit_code

        if build.error is not None:
            return build.error.exit_code

        logger.debug(
            "Build finished", artifact=str(build.result.artifact_path)
        )
        return 0
