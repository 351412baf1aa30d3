"""Verification stage.

Best-effort: cross-checks every element against the source and prunes
what the source does not support. Strict mode removes anything absent from
the source; expand mode removes only elements unrelated to its domain.

Dependencies: chat_model_client, response_parsing, diagram_schema, prompts
System role: Third model-backed stage of the visual notes pipeline
"""

import logging
from typing import Any

from visual_notes.configs.generation import GenerationSettings
from visual_notes.core.agentic_system.visual_notes_agent.agent.diagram_schema import (
    ElementDict,
    validate_elements,
)
from visual_notes.core.agentic_system.visual_notes_agent.agent.visual_notes_prompts import (
    get_verification_prompt,
    verification_policy,
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
    extract_json_value,
)
from visual_notes.core.exceptions import GenerationFailureKind, ModelCallError

logger = logging.getLogger(__name__)

STAGE_NAME = "verification"


def _removal_notes(removed: Any) -> tuple[str, ...]:
    """Render the model's removal justifications for diagnostics."""
    if not isinstance(removed, list):
        return ()
    notes = []
    for entry in removed:
        if isinstance(entry, dict):
            label = entry.get("element") or entry.get("text") or "element"
            reason = entry.get("reason") or "no reason given"
            notes.append(f"removed {label}: {reason}")
        else:
            notes.append(f"removed {entry}")
    return tuple(notes)


async def run_verification_stage(
    elements: list[ElementDict],
    context: GenerationContext,
    client: ChatModelClient,
    settings: GenerationSettings,
) -> StageOutcome:
    """Prune elements unsupported by the source.

    Args:
        elements: Output of the icon enhancement stage
        context: Request context (source and expand flag)
        client: Model client
        settings: Threshold

    Returns:
        StageOutcome: skipped below threshold; success only when the
        candidate has no more elements than the input
    """
    if len(elements) < settings.verification_min_elements:
        return StageOutcome.skipped(
            STAGE_NAME,
            f"{len(elements)} elements is below {settings.verification_min_elements}",
        )

    messages = get_verification_prompt(context.is_image).format_messages(
        elements=elements_payload(elements),
        policy=verification_policy(context.expand_content),
        **source_variables(context),
    )
    try:
        reply = await client.complete(
            messages,
            temperature=0.1,
            max_tokens=settings.max_output_tokens,
            purpose=STAGE_NAME,
        )
        value = extract_json_value(reply)
    except ModelCallError as e:
        return StageOutcome.failed(STAGE_NAME, e.message, e.kind)

    removed: Any = []
    if isinstance(value, dict):
        raw_elements = value.get("elements")
        removed = value.get("removed", [])
    else:
        raw_elements = value

    if not isinstance(raw_elements, list):
        return StageOutcome.failed(
            STAGE_NAME,
            "verification response lacks an element array",
            GenerationFailureKind.MALFORMED_RESPONSE,
        )

    candidate, rejected = validate_elements(raw_elements)
    if len(candidate) > len(elements):
        return StageOutcome.failed(
            STAGE_NAME,
            f"verification returned {len(candidate)} elements for {len(elements)} inputs",
            GenerationFailureKind.MALFORMED_RESPONSE,
        )

    notes = _removal_notes(removed)
    for note in notes:
        logger.info(f"{__name__}:run_verification_stage - {note}")
    logger.info(
        f"{__name__}:run_verification_stage - END kept={len(candidate)}/{len(elements)} "
        f"rejected={rejected} mode={'expand' if context.expand_content else 'strict'}"
    )
    return StageOutcome.success(STAGE_NAME, candidate, notes)
