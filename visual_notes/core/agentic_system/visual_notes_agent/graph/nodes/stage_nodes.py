"""Stage nodes for the visual notes graph.

Wraps the stage functions as LangGraph nodes. This is the only place that
decides fallback: a successful outcome replaces the element list, anything
else carries the previous list forward unchanged.

Dependencies: logging, stages, schema
System role: Fallback policy of the visual notes pipeline
"""

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from visual_notes.core.agentic_system.visual_notes_agent.agent.diagram_schema import ElementDict
from visual_notes.core.agentic_system.visual_notes_agent.agent.visual_notes_schema import (
    GenerationContext,
    StageOutcome,
    StageStatus,
    VisualNotesState,
)
from visual_notes.core.agentic_system.visual_notes_agent.stages import run_generation_stage

if TYPE_CHECKING:
    from visual_notes.configs.generation import GenerationSettings
    from visual_notes.core.agentic_system.visual_notes_agent.utilities.chat_model_client import (
        ChatModelClient,
    )

logger = logging.getLogger(__name__)

BestEffortStage = Callable[
    [list[ElementDict], GenerationContext, "ChatModelClient", "GenerationSettings"],
    Awaitable[StageOutcome],
]


def apply_outcome(elements: list[ElementDict], outcome: StageOutcome) -> dict:
    """Translate a best-effort outcome into a state update."""
    if outcome.status is StageStatus.SUCCESS:
        return {"elements": outcome.elements, "outcomes": [outcome]}

    if outcome.status is StageStatus.FAILED:
        kind = outcome.failure_kind.value if outcome.failure_kind else "error"
        logger.warning(
            f"{__name__}:apply_outcome - {outcome.stage} failed ({kind}): {outcome.reason}; "
            f"keeping {len(elements)} elements"
        )
    else:
        logger.info(f"{__name__}:apply_outcome - {outcome.stage} skipped: {outcome.reason}")
    return {"outcomes": [outcome]}


async def generation_node(
    state: VisualNotesState,
    client: "ChatModelClient",
    settings: "GenerationSettings",
) -> dict:
    """Run the mandatory generation stage.

    Returns:
        dict: elements on success, generation_failure otherwise
    """
    outcome = await run_generation_stage(state["context"], client, settings)
    if outcome.succeeded:
        return {"elements": outcome.elements, "outcomes": [outcome]}

    logger.error(
        f"{__name__}:generation_node - generation failed "
        f"({outcome.failure_kind.value if outcome.failure_kind else 'error'}): {outcome.reason}"
    )
    return {"generation_failure": outcome, "outcomes": [outcome]}


async def best_effort_node(
    state: VisualNotesState,
    stage_name: str,
    stage: BestEffortStage,
    client: "ChatModelClient",
    settings: "GenerationSettings",
) -> dict:
    """Run an optional stage; no error raised inside it reaches the graph."""
    elements = state.get("elements", [])
    try:
        outcome = await stage(elements, state["context"], client, settings)
    except Exception as e:
        logger.error(
            f"{__name__}:best_effort_node - {stage_name} raised {type(e).__name__}: {e}",
            exc_info=True,
        )
        outcome = StageOutcome.failed(stage_name, f"{type(e).__name__}: {e}")
    return apply_outcome(elements, outcome)
