"""LangGraph nodes for the visual notes pipeline."""

from visual_notes.core.agentic_system.visual_notes_agent.graph.nodes.finalize_node import (
    finalize_node,
)
from visual_notes.core.agentic_system.visual_notes_agent.graph.nodes.stage_nodes import (
    apply_outcome,
    best_effort_node,
    generation_node,
)

__all__ = [
    "apply_outcome",
    "best_effort_node",
    "finalize_node",
    "generation_node",
]
