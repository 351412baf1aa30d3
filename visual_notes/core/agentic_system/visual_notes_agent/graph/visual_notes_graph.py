"""LangGraph definition for the visual notes pipeline.

Builds and compiles a stateful graph that runs:
1. Structure generation (mandatory)
2. Icon enhancement (best-effort)
3. Verification (best-effort)
4. Layout refinement (best-effort)
5. Finalize (typography, enrichment, audit, project name)

A generation failure routes straight to END.

Dependencies: langgraph, node functions, stages, schema
System role: Graph orchestration for the visual notes pipeline
"""

import logging
from typing import TYPE_CHECKING

from langgraph.graph import END, StateGraph

from visual_notes.core.agentic_system.visual_notes_agent.agent.visual_notes_schema import (
    VisualNotesState,
)
from visual_notes.core.agentic_system.visual_notes_agent.graph.nodes import (
    best_effort_node,
    finalize_node,
    generation_node,
)
from visual_notes.core.agentic_system.visual_notes_agent.stages import (
    run_icon_enhancement_stage,
    run_layout_refinement_stage,
    run_verification_stage,
)

if TYPE_CHECKING:
    from visual_notes.configs.generation import GenerationSettings
    from visual_notes.core.agentic_system.visual_notes_agent.utilities.chat_model_client import (
        ChatModelClient,
    )

logger = logging.getLogger(__name__)


def _route_after_generation(state: VisualNotesState) -> str:
    return "end" if state.get("generation_failure") else "continue"


def create_visual_notes_graph(
    client: "ChatModelClient",
    settings: "GenerationSettings",
):
    """Create the LangGraph for the visual notes pipeline.

    Args:
        client: Model client shared by every stage
        settings: Pipeline limits and thresholds

    Returns:
        CompiledGraph: Compiled and runnable graph

    Raises:
        Exception: If graph compilation fails
    """
    try:
        logger.info(f"{__name__}:create_visual_notes_graph - Building graph")

        graph = StateGraph(VisualNotesState)

        async def generation_wrapper(state):
            return await generation_node(state, client, settings)

        async def enhancement_wrapper(state):
            return await best_effort_node(
                state, "icon_enhancement", run_icon_enhancement_stage, client, settings
            )

        async def verification_wrapper(state):
            return await best_effort_node(
                state, "verification", run_verification_stage, client, settings
            )

        async def refinement_wrapper(state):
            return await best_effort_node(
                state, "layout_refinement", run_layout_refinement_stage, client, settings
            )

        async def finalize_wrapper(state):
            return await finalize_node(state, settings)

        graph.add_node("generation", generation_wrapper)
        graph.add_node("icon_enhancement", enhancement_wrapper)
        graph.add_node("verification", verification_wrapper)
        graph.add_node("layout_refinement", refinement_wrapper)
        graph.add_node("finalize", finalize_wrapper)

        graph.set_entry_point("generation")
        graph.add_conditional_edges(
            "generation",
            _route_after_generation,
            {"continue": "icon_enhancement", "end": END},
        )
        graph.add_edge("icon_enhancement", "verification")
        graph.add_edge("verification", "layout_refinement")
        graph.add_edge("layout_refinement", "finalize")
        graph.add_edge("finalize", END)

        compiled_graph = graph.compile()
        logger.info(f"{__name__}:create_visual_notes_graph - Graph created successfully")
        return compiled_graph

    except Exception as e:
        logger.error(f"{__name__}:create_visual_notes_graph - {type(e).__name__}: {e}")
        raise
