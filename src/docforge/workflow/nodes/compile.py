"""Compile node - bounded retry of the compiler."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from docforge.build.compile import CompileStage
from docforge.build.report import RULE
from docforge.core.config import State
from docforge.core.errors import CompilationError
from docforge.core.result import BuildAttempt


@dataclass
class Compile(BaseNode[State]):
    """Run the compiler up to max_attempts times.

    Exhausting the attempts is not raised from here: the error is
    reported (including the log tail, before cleanup deletes the log),
    stored on the runtime state, and the run continues to Cleanup.
    """

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> "Promote | Cleanup":
        build = ctx.state.runtime.build
        request = build.request
        reporter = build.reporter
        build.status = "compiling"

        reporter.header(f"Compiling: {request.source_path.name}")

        def record(attempt: BuildAttempt) -> None:
            build.attempts.append(attempt)
            if attempt.artifact_present:
                if attempt.exit_code != 0:
                    reporter.warning(
                        f"Compiler exited with {attempt.exit_code} "
                        f"but produced {request.derived_artifact.name}"
                    )
            elif attempt.attempt_number < request.max_attempts:
                reporter.warning(
                    f"Compilation attempt {attempt.attempt_number} "
                    f"failed (exit {attempt.exit_code}), trying again..."
                )

        stage = CompileStage(request, build.tool)
        try:
            stage.run(on_attempt=record)
        except CompilationError as e:
            build.error = e
            reporter.info(RULE)
            reporter.failure(e)

            from docforge.workflow.nodes.cleanup import Cleanup
            return Cleanup()

        reporter.header("Compilation successful!")

        from docforge.workflow.nodes.promote import Promote
        return Promote()
