"""Structure generation stage.

The only mandatory model call: turns the normalized source into a
candidate element list. Its failure aborts the pipeline.

Dependencies: chat_model_client, response_parsing, diagram_schema, prompts
System role: First model-backed stage of the visual notes pipeline
"""

import logging

from visual_notes.configs.generation import GenerationSettings
from visual_notes.core.agentic_system.visual_notes_agent.agent.diagram_schema import (
    validate_elements,
)
from visual_notes.core.agentic_system.visual_notes_agent.agent.visual_notes_prompts import (
    ELEMENT_SCHEMA,
    expand_block,
    get_generation_prompt,
    palette_variables,
)
from visual_notes.core.agentic_system.visual_notes_agent.agent.visual_notes_schema import (
    GenerationContext,
    StageOutcome,
)
from visual_notes.core.agentic_system.visual_notes_agent.stages.stage_utils import source_variables
from visual_notes.core.agentic_system.visual_notes_agent.utilities.chat_model_client import (
    ChatModelClient,
)
from visual_notes.core.agentic_system.visual_notes_agent.utilities.response_parsing import (
    extract_json_array,
)
from visual_notes.core.exceptions import GenerationFailureKind, ModelCallError
from visual_notes.observability.log_utils import summarize_elements

logger = logging.getLogger(__name__)

STAGE_NAME = "generation"


async def run_generation_stage(
    context: GenerationContext,
    client: ChatModelClient,
    settings: GenerationSettings,
) -> StageOutcome:
    """Generate candidate elements from the request source.

    Args:
        context: Request context (source, theme, expand flag)
        client: Model client
        settings: Token ceiling

    Returns:
        StageOutcome: success with validated elements, or failed with a kind
    """
    logger.info(
        f"{__name__}:run_generation_stage - START "
        f"source={context.source_kind.value} theme={context.theme} expand={context.expand_content}"
    )

    messages = get_generation_prompt(context.is_image).format_messages(
        expand_block=expand_block(context.expand_content),
        schema=ELEMENT_SCHEMA,
        **palette_variables(context.theme),
        **source_variables(context),
    )

    try:
        reply = await client.complete(
            messages,
            temperature=0.4 if context.expand_content else 0.5,
            max_tokens=settings.max_output_tokens,
            purpose=STAGE_NAME,
        )
        raw_elements = extract_json_array(reply)
    except ModelCallError as e:
        logger.error(f"{__name__}:run_generation_stage - {e.kind.value}: {e}")
        return StageOutcome.failed(STAGE_NAME, e.message, e.kind)

    elements, rejected = validate_elements(raw_elements)
    if not elements:
        return StageOutcome.failed(
            STAGE_NAME,
            "AI response contained no valid diagram elements",
            GenerationFailureKind.MALFORMED_RESPONSE,
        )

    logger.info(
        f"{__name__}:run_generation_stage - END {summarize_elements(elements)} rejected={rejected}"
    )
    notes = (f"rejected {rejected} invalid element(s)",) if rejected else ()
    return StageOutcome.success(STAGE_NAME, elements, notes)
