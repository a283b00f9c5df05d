"""Graph workflow definitions."""

from pydantic_graph import Graph

from docforge.core.config import State
from docforge.core.log import logger


def create_build_workflow():
    """Create the document build graph.

    Preflight → PrepareOutput → Compile → [Promote] → Cleanup → End

    Compile skips Promote when every attempt failed; both paths end
    in Cleanup.
    """
    logger.debug("Building build workflow graph")

    # Imported here so the graph can resolve the nodes' return hints
    from docforge.workflow.nodes.cleanup import Cleanup
    from docforge.workflow.nodes.compile import Compile
    from docforge.workflow.nodes.preflight import Preflight
    from docforge.workflow.nodes.prepare_output import PrepareOutput
    from docforge.workflow.nodes.promote import Promote

    return Graph(
        nodes=(Preflight, PrepareOutput, Compile, Promote, Cleanup),
        state_type=State,
    )


def create_install_workflow():
    """Create the LaTeX installation graph.

    DetectPlatform → [InstallDistribution] → VerifyInstall → End
    """
    logger.debug("Building install workflow graph")

    from docforge.workflow.nodes.detect import DetectPlatform
    from docforge.workflow.nodes.install import InstallDistribution
    from docforge.workflow.nodes.verify import VerifyInstall

    return Graph(
        nodes=(DetectPlatform, InstallDistribution, VerifyInstall),
        state_type=State,
    )
