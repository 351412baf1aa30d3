"""Typography defaults for text elements."""

from visual_notes.core.agentic_system.visual_notes_agent.agent.diagram_schema import ElementDict

DEFAULT_FONT_FAMILY = "normal"
DEFAULT_TEXT_ALIGN = "center"


def apply_typography_defaults(elements: list[ElementDict]) -> list[ElementDict]:
    """Fill in missing fontFamily/textAlign on text elements.

    Values already present are kept; non-text elements pass through.
    Returns new dicts and never mutates the input.
    """
    result: list[ElementDict] = []
    for element in elements:
        updated = dict(element)
        if updated.get("type") == "text":
            if not updated.get("fontFamily"):
                updated["fontFamily"] = DEFAULT_FONT_FAMILY
            if not updated.get("textAlign"):
                updated["textAlign"] = DEFAULT_TEXT_ALIGN
        result.append(updated)
    return result
