"""Pipeline stages.

Model-backed stages share one contract:
(elements, context, client, settings) -> StageOutcome.
Generation has no element input and is the only fatal stage.
"""

from visual_notes.core.agentic_system.visual_notes_agent.stages.generation_stage import (
    run_generation_stage,
)
from visual_notes.core.agentic_system.visual_notes_agent.stages.icon_enhancement_stage import (
    run_icon_enhancement_stage,
)
from visual_notes.core.agentic_system.visual_notes_agent.stages.layout_refinement_stage import (
    run_layout_refinement_stage,
)
from visual_notes.core.agentic_system.visual_notes_agent.stages.verification_stage import (
    run_verification_stage,
)

__all__ = [
    "run_generation_stage",
    "run_icon_enhancement_stage",
    "run_verification_stage",
    "run_layout_refinement_stage",
]
