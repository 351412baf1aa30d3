"""Chat-completions client used by every model-backed stage.

Wraps a LangChain chat model so stages hand over messages formatted from
their ChatPromptTemplate and get back the reply text. Each call is bounded by a timeout and every
failure is reported as a ModelCallError with a classified kind.

Dependencies: asyncio, langchain_core, langchain_openai, visual_notes.configs
System role: Outbound boundary to the generative-model service
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from langchain_core.messages import BaseMessage
from langchain_openai import ChatOpenAI
from openai import APITimeoutError

from visual_notes.core.exceptions import GenerationFailureKind, ModelCallError

if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel

    from visual_notes.configs import Settings

logger = logging.getLogger(__name__)


def build_chat_model(settings: "Settings") -> ChatOpenAI:
    """Create the LangChain chat model for the configured provider.

    Args:
        settings: Application settings

    Returns:
        ChatOpenAI: Client pointed at the OpenAI-compatible endpoint

    Raises:
        ModelCallError: If no API key is configured
    """
    provider = settings.model_provider
    if not provider.api_key:
        raise ModelCallError(
            "OPENROUTER_API_KEY is not configured",
            GenerationFailureKind.SERVICE_ERROR,
        )

    return ChatOpenAI(
        model=provider.model,
        api_key=provider.api_key,
        base_url=provider.base_url,
        timeout=settings.generation.request_timeout_seconds,
        max_retries=0,
        default_headers={
            "HTTP-Referer": provider.app_url,
            "X-Title": provider.app_title,
        },
    )


def extract_response_content(response: Any) -> str:
    """Extract text content from various LLM response formats."""
    content = getattr(response, "content", response)
    if isinstance(content, str):
        return content.strip()
    if isinstance(content, list) and content:
        parts = []
        for block in content:
            if isinstance(block, dict):
                parts.append(block.get("text", ""))
            elif hasattr(block, "text"):
                parts.append(block.text)
            else:
                parts.append(str(block))
        return "".join(parts).strip()
    return str(content or "").strip()


class ChatModelClient:
    """Timeout-bounded chat completion calls."""

    def __init__(self, chat_model: "BaseChatModel", timeout_seconds: float) -> None:
        """
        Args:
            chat_model: LangChain chat model (ChatOpenAI in production)
            timeout_seconds: Upper bound on each call
        """
        self._chat_model = chat_model
        self._timeout_seconds = timeout_seconds

    async def complete(
        self,
        messages: list[BaseMessage],
        *,
        temperature: float,
        max_tokens: int,
        purpose: str = "completion",
    ) -> str:
        """Send one formatted exchange and return the reply text.

        Args:
            messages: Output of the stage prompt's `format_messages`
            temperature: Sampling temperature for this call
            max_tokens: Output token ceiling for this call
            purpose: Label used in logs

        Returns:
            str: Non-empty reply text

        Raises:
            ModelCallError: On timeout, transport/API error, or empty reply
        """
        model = self._chat_model.bind(temperature=temperature, max_tokens=max_tokens)

        logger.debug(f"{__name__}:complete - START purpose={purpose}")
        try:
            response = await asyncio.wait_for(
                model.ainvoke(messages),
                timeout=self._timeout_seconds,
            )
        except (asyncio.TimeoutError, APITimeoutError) as e:
            raise ModelCallError(
                "Request timed out. Please try with a smaller image or simpler content.",
                GenerationFailureKind.TIMEOUT,
                details={"purpose": purpose, "timeout_seconds": self._timeout_seconds},
            ) from e
        except ModelCallError:
            raise
        except Exception as e:
            raise ModelCallError(
                f"Model service error: {type(e).__name__}",
                GenerationFailureKind.SERVICE_ERROR,
                details={"purpose": purpose, "error": str(e)[:200]},
            ) from e

        content = extract_response_content(response)
        if not content:
            raise ModelCallError(
                "No response from AI",
                GenerationFailureKind.SERVICE_ERROR,
                details={"purpose": purpose},
            )

        logger.debug(f"{__name__}:complete - END purpose={purpose} chars={len(content)}")
        return content
