"""Icon enhancement stage.

Best-effort: adds small inner-detail shapes to large shapes so concrete
objects read as icons. Never moves, removes or relabels.

Dependencies: chat_model_client, response_parsing, diagram_schema, prompts
System role: Second model-backed stage of the visual notes pipeline
"""

import logging

from visual_notes.configs.generation import GenerationSettings
from visual_notes.core.agentic_system.visual_notes_agent.agent.diagram_schema import (
    ElementDict,
    validate_elements,
)
from visual_notes.core.agentic_system.visual_notes_agent.agent.visual_notes_prompts import (
    get_icon_enhancement_prompt,
    palette_variables,
)
from visual_notes.core.agentic_system.visual_notes_agent.agent.visual_notes_schema import (
    GenerationContext,
    StageOutcome,
)
from visual_notes.core.agentic_system.visual_notes_agent.stages.stage_utils import (
    elements_payload,
    source_variables,
)
from visual_notes.core.agentic_system.visual_notes_agent.utilities.chat_model_client import (
    ChatModelClient,
)
from visual_notes.core.agentic_system.visual_notes_agent.utilities.response_parsing import (
    extract_json_array,
)
from visual_notes.core.exceptions import GenerationFailureKind, ModelCallError

logger = logging.getLogger(__name__)

STAGE_NAME = "icon_enhancement"


async def run_icon_enhancement_stage(
    elements: list[ElementDict],
    context: GenerationContext,
    client: ChatModelClient,
    settings: GenerationSettings,
) -> StageOutcome:
    """Augment a diagram with iconographic sub-shapes.

    Args:
        elements: Output of the generation stage
        context: Request context
        client: Model client
        settings: Threshold and addition ceiling

    Returns:
        StageOutcome: skipped below threshold; success only when the
        candidate keeps every element and adds no more than the ceiling
    """
    if len(elements) < settings.enhancement_min_elements:
        return StageOutcome.skipped(
            STAGE_NAME,
            f"{len(elements)} elements is below {settings.enhancement_min_elements}",
        )

    messages = get_icon_enhancement_prompt(context.is_image).format_messages(
        elements=elements_payload(elements),
        max_additions=settings.max_icon_additions,
        **palette_variables(context.theme),
        **source_variables(context),
    )
    try:
        reply = await client.complete(
            messages,
            temperature=0.3,
            max_tokens=settings.max_output_tokens,
            purpose=STAGE_NAME,
        )
        raw_elements = extract_json_array(reply)
    except ModelCallError as e:
        return StageOutcome.failed(STAGE_NAME, e.message, e.kind)

    candidate, rejected = validate_elements(raw_elements)
    upper = len(elements) + settings.max_icon_additions
    if not len(elements) <= len(candidate) <= upper:
        return StageOutcome.failed(
            STAGE_NAME,
            f"candidate has {len(candidate)} elements, expected {len(elements)}..{upper}",
            GenerationFailureKind.MALFORMED_RESPONSE,
        )

    added = len(candidate) - len(elements)
    logger.info(f"{__name__}:run_icon_enhancement_stage - END added={added} rejected={rejected}")
    return StageOutcome.success(STAGE_NAME, candidate, (f"added {added} icon element(s)",))
