"""Visual notes graph module."""

from visual_notes.core.agentic_system.visual_notes_agent.graph.visual_notes_graph import (
    create_visual_notes_graph,
)

__all__ = ["create_visual_notes_graph"]
