"""Suggested project name for a generated document."""

from visual_notes.core.agentic_system.visual_notes_agent.agent.diagram_schema import ElementDict

DEFAULT_PROJECT_NAME = "Visual Notes"
MAX_PROJECT_NAME_CHARS = 60


def _trim(name: str) -> str:
    return " ".join(name.split())[:MAX_PROJECT_NAME_CHARS].strip()


def suggest_project_name(elements: list[ElementDict], source_text: str = "") -> str:
    """Pick a title for the document.

    The largest-font text element wins (first on ties); otherwise the first
    non-empty source line; otherwise a fixed default.
    """
    best_text = ""
    best_size = -1.0
    for element in elements:
        if element.get("type") != "text":
            continue
        text = str(element.get("text", "")).strip()
        if not text:
            continue
        size = float(element.get("fontSize") or 0)
        if size > best_size:
            best_text, best_size = text, size

    if best_text:
        return _trim(best_text) or DEFAULT_PROJECT_NAME

    for line in source_text.splitlines():
        stripped = line.strip().lstrip("#").strip()
        if stripped:
            return _trim(stripped)
    return DEFAULT_PROJECT_NAME
