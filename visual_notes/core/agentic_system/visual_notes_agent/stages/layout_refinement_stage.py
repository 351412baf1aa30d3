"""Layout refinement stage.

Best-effort: repositions and resizes elements to fix overlaps and spacing.
The stage may not change cardinality; a candidate whose element count
differs from the input is discarded whole.

Dependencies: chat_model_client, response_parsing, diagram_schema, prompts
System role: Last model-backed stage of the visual notes pipeline
"""

import logging

from visual_notes.configs.generation import GenerationSettings
from visual_notes.core.agentic_system.visual_notes_agent.agent.diagram_schema import (
    ElementDict,
    validate_elements,
)
from visual_notes.core.agentic_system.visual_notes_agent.agent.visual_notes_prompts import (
    get_refinement_prompt,
    palette_variables,
)
from visual_notes.core.agentic_system.visual_notes_agent.agent.visual_notes_schema import (
    GenerationContext,
    StageOutcome,
)
from visual_notes.core.agentic_system.visual_notes_agent.stages.stage_utils import (
    elements_payload,
)
from visual_notes.core.agentic_system.visual_notes_agent.utilities.chat_model_client import (
    ChatModelClient,
)
from visual_notes.core.agentic_system.visual_notes_agent.utilities.response_parsing import (
    extract_json_array,
)
from visual_notes.core.exceptions import GenerationFailureKind, ModelCallError

logger = logging.getLogger(__name__)

STAGE_NAME = "layout_refinement"


async def run_layout_refinement_stage(
    elements: list[ElementDict],
    context: GenerationContext,
    client: ChatModelClient,
    settings: GenerationSettings,
) -> StageOutcome:
    """Refine element positions and sizes without changing the element set.

    Args:
        elements: Output of the verification stage
        context: Request context (theme palette)
        client: Model client
        settings: Threshold

    Returns:
        StageOutcome: skipped below threshold; failed when the reply has a
        different number of entries than the input or any invalid entry
    """
    if len(elements) < settings.refinement_min_elements:
        return StageOutcome.skipped(
            STAGE_NAME,
            f"{len(elements)} elements is below {settings.refinement_min_elements}",
        )

    logger.info(f"{__name__}:run_layout_refinement_stage - START elements={len(elements)}")
    messages = get_refinement_prompt().format_messages(
        elements=elements_payload(elements),
        **palette_variables(context.theme),
    )
    try:
        reply = await client.complete(
            messages,
            temperature=0.2,
            max_tokens=settings.max_output_tokens,
            purpose=STAGE_NAME,
        )
        raw_elements = extract_json_array(reply)
    except ModelCallError as e:
        return StageOutcome.failed(STAGE_NAME, e.message, e.kind)

    if len(raw_elements) != len(elements):
        return StageOutcome.failed(
            STAGE_NAME,
            f"refined element count mismatch ({len(raw_elements)} != {len(elements)})",
            GenerationFailureKind.MALFORMED_RESPONSE,
        )

    # Dropping an invalid entry would silently change the element set
    candidate, rejected = validate_elements(raw_elements)
    if rejected:
        return StageOutcome.failed(
            STAGE_NAME,
            f"refinement returned {rejected} invalid element(s)",
            GenerationFailureKind.MALFORMED_RESPONSE,
        )

    logger.info(f"{__name__}:run_layout_refinement_stage - END elements={len(candidate)}")
    return StageOutcome.success(STAGE_NAME, candidate)
