"""Visual notes agent with LangGraph orchestration.

Main agent class that:
1. Wraps the configured chat model in a timeout-bounded client
2. Creates the LangGraph pipeline
3. Provides an async interface that returns the final document or raises

Dependencies: langgraph, langchain_openai, schema, graph definition
System role: Main orchestrator for the visual notes pipeline
"""

import logging
from typing import TYPE_CHECKING

from visual_notes.core.agentic_system.visual_notes_agent.agent.visual_notes_schema import (
    GenerationContext,
    VisualNotesResult,
    VisualNotesState,
)
from visual_notes.core.agentic_system.visual_notes_agent.graph.visual_notes_graph import (
    create_visual_notes_graph,
)
from visual_notes.core.agentic_system.visual_notes_agent.utilities.chat_model_client import (
    ChatModelClient,
    build_chat_model,
)
from visual_notes.core.exceptions import GenerationFailedError, GenerationFailureKind

if TYPE_CHECKING:
    from visual_notes.configs import Settings
    from visual_notes.configs.generation import GenerationSettings

logger = logging.getLogger(__name__)


class VisualNotesAgent:
    """Agent that turns normalized content into a diagram document."""

    def __init__(self, client: ChatModelClient, settings: "GenerationSettings") -> None:
        """
        Args:
            client: Model client shared by every stage
            settings: Pipeline limits and thresholds
        """
        self._settings = settings
        self._graph = create_visual_notes_graph(client, settings)
        logger.info(f"{__name__}:__init__ - VisualNotesAgent initialized")

    @classmethod
    def from_settings(cls, settings: "Settings") -> "VisualNotesAgent":
        """Build an agent with a ChatOpenAI client from application settings.

        Raises:
            ModelCallError: If no API key is configured
        """
        chat_model = build_chat_model(settings)
        client = ChatModelClient(chat_model, settings.generation.request_timeout_seconds)
        return cls(client, settings.generation)

    async def ainvoke(self, context: GenerationContext) -> VisualNotesResult:
        """Run the pipeline for one request.

        Args:
            context: Normalized request context

        Returns:
            VisualNotesResult: Enriched elements, project name, stage statuses

        Raises:
            GenerationFailedError: If structure generation failed
        """
        logger.info(
            f"{__name__}:ainvoke - START source={context.source_kind.value} "
            f"chars={len(context.content)}"
        )

        initial_state: VisualNotesState = {
            "context": context,
            "elements": [],
            "outcomes": [],
        }
        final_state = await self._graph.ainvoke(initial_state)

        failure = final_state.get("generation_failure")
        if failure is not None:
            raise GenerationFailedError(
                failure.reason or "Generation failed",
                failure.failure_kind or GenerationFailureKind.SERVICE_ERROR,
            )

        statuses = {
            outcome.stage: outcome.status.value for outcome in final_state.get("outcomes", [])
        }
        result = VisualNotesResult(
            elements=final_state.get("elements", []),
            suggested_project_name=final_state.get("suggested_project_name", "Visual Notes"),
            stage_statuses=statuses,
        )
        logger.info(
            f"{__name__}:ainvoke - END elements={len(result.elements)} stages={statuses}"
        )
        return result
