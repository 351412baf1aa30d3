"""Helpers shared by the model-backed stages."""

import json

from visual_notes.core.agentic_system.visual_notes_agent.agent.diagram_schema import ElementDict
from visual_notes.core.agentic_system.visual_notes_agent.agent.visual_notes_schema import (
    GenerationContext,
)


def elements_payload(elements: list[ElementDict]) -> str:
    """Serialize elements the way they are shown to the model."""
    return json.dumps(elements, indent=2)


def source_variables(context: GenerationContext) -> dict[str, str]:
    """Prompt variables carrying the request's source.

    `content` is the text itself or the base64 image; `mime_type` is only
    read by the image prompt variants.
    """
    return {
        "content": context.content,
        "mime_type": context.image_mime_type or "image/png",
    }
