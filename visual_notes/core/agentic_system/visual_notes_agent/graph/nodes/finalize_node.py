"""Finalize node: deterministic passes over the surviving element list.

Dependencies: typography, element_enrichment, completeness_audit, project_name
System role: Last node of the visual notes graph
"""

import logging

from visual_notes.configs.generation import GenerationSettings
from visual_notes.core.agentic_system.visual_notes_agent.agent.visual_notes_schema import (
    VisualNotesState,
)
from visual_notes.core.agentic_system.visual_notes_agent.utilities.completeness_audit import (
    audit_completeness,
)
from visual_notes.core.agentic_system.visual_notes_agent.utilities.element_enrichment import (
    enrich_elements,
)
from visual_notes.core.agentic_system.visual_notes_agent.utilities.project_name import (
    suggest_project_name,
)
from visual_notes.core.agentic_system.visual_notes_agent.utilities.typography import (
    apply_typography_defaults,
)
from visual_notes.observability.log_utils import summarize_elements

logger = logging.getLogger(__name__)


async def finalize_node(state: VisualNotesState, settings: GenerationSettings) -> dict:
    """Apply typography defaults, enrich, audit and name the document.

    The audit is skipped for image sources since there is no text to count.
    """
    context = state["context"]
    elements = enrich_elements(apply_typography_defaults(state.get("elements", [])))

    audit = None
    if not context.is_image:
        audit = audit_completeness(
            context.source_text,
            elements,
            warning_ratio=settings.coverage_warning_ratio,
        )

    name = suggest_project_name(elements, context.source_text)
    logger.info(f"{__name__}:finalize_node - END {summarize_elements(elements)} name={name!r}")
    return {"elements": elements, "audit": audit, "suggested_project_name": name}
