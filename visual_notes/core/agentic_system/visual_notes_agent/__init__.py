"""Visual notes agent module for diagram generation.

Exports the agent class and the schemas callers need.
"""

from visual_notes.core.agentic_system.visual_notes_agent.agent.visual_notes_schema import (
    GenerationContext,
    SourceKind,
    VisualNotesResult,
)
from visual_notes.core.agentic_system.visual_notes_agent.visual_notes_agent import (
    VisualNotesAgent,
)

__all__ = [
    "GenerationContext",
    "SourceKind",
    "VisualNotesAgent",
    "VisualNotesResult",
]
