"""Visual notes agent schemas and prompts."""

from visual_notes.core.agentic_system.visual_notes_agent.agent.diagram_schema import (
    ElementDict,
    normalize_bounds,
    validate_elements,
)
from visual_notes.core.agentic_system.visual_notes_agent.agent.visual_notes_schema import (
    GenerationContext,
    SourceKind,
    StageOutcome,
    StageStatus,
    VisualNotesResult,
    VisualNotesState,
)

__all__ = [
    "ElementDict",
    "GenerationContext",
    "SourceKind",
    "StageOutcome",
    "StageStatus",
    "VisualNotesResult",
    "VisualNotesState",
    "normalize_bounds",
    "validate_elements",
]
