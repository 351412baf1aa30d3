"""
Visualization service.

Orchestrates one visualize request end to end:
normalize -> quota reserve -> pipeline -> quota commit (or release).

Dependencies: visual_notes.core, visual_notes.application.services.quota_service
System role: Visualize request orchestration layer
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from visual_notes.application.services.caller_context import CallerContext
from visual_notes.application.services.quota_service import QuotaService
from visual_notes.core.agentic_system.visual_notes_agent import (
    GenerationContext,
    VisualNotesAgent,
    VisualNotesResult,
)
from visual_notes.core.exceptions import GenerationFailedError, ModelCallError
from visual_notes.core.input_normalizer import InputNormalizer, RawVisualizeInput

logger = logging.getLogger(__name__)

AgentProvider = Callable[[], VisualNotesAgent]


@dataclass(frozen=True)
class VisualizationOutcome:
    """Pipeline result plus the caller's allowance after this request."""

    result: VisualNotesResult
    remaining_uses: int | None
    daily_limit: int | None


class VisualizationService:
    """Run visualize requests against the pipeline under the daily quota."""

    def __init__(
        self,
        quota_service: QuotaService,
        normalizer: InputNormalizer,
        agent_provider: AgentProvider,
    ) -> None:
        """
        Args:
            quota_service: Quota gate bound to the request's db session
            normalizer: Input validation and normalization
            agent_provider: Returns the pipeline agent (built lazily so a
                missing API key surfaces as a generation failure)
        """
        self.quota_service = quota_service
        self.normalizer = normalizer
        self._agent_provider = agent_provider

    async def visualize(
        self,
        caller: CallerContext,
        raw: RawVisualizeInput,
        theme: str = "light",
        expand_content: bool = False,
    ) -> VisualizationOutcome:
        """
        Generate a diagram document for one request.

        Invalid input is rejected before quota is touched; quota is checked
        before any model call; usage is recorded only on success.

        Raises:
            InvalidInputError: Bad or missing content
            QuotaExceededError: Daily allowance used up
            GenerationFailedError: Structure generation failed
        """
        logger.info(
            f"{__name__}:visualize - START user={caller.user_id} "
            f"privileged={caller.is_privileged} theme={theme}"
        )
        normalized = await asyncio.to_thread(self.normalizer.normalize, raw)

        ticket = await self.quota_service.reserve(caller)
        try:
            agent = self._agent_provider()
            context = GenerationContext(
                source_kind=normalized.source_kind,
                content=normalized.content,
                theme="dark" if theme == "dark" else "light",
                expand_content=expand_content,
                caller_id=str(caller.user_id),
                is_privileged=caller.is_privileged,
                image_mime_type=normalized.mime_type,
            )
            result = await agent.ainvoke(context)
        except ModelCallError as e:
            await self.quota_service.release(ticket)
            raise GenerationFailedError(e.message, e.kind, details=e.details) from e
        except Exception:
            await self.quota_service.release(ticket)
            raise

        await self.quota_service.commit(ticket)

        daily_limit = None if caller.is_privileged else self.quota_service.daily_limit
        logger.info(
            f"{__name__}:visualize - END elements={len(result.elements)} "
            f"remaining={ticket.remaining_after}"
        )
        return VisualizationOutcome(
            result=result,
            remaining_uses=ticket.remaining_after,
            daily_limit=daily_limit,
        )
