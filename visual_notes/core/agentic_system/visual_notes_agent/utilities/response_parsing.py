"""Model response parsing utilities.

Models are not schema-guaranteed: replies may be a bare JSON value, wrapped in
Markdown fences, or embedded in prose. LangChain's `parse_json_markdown`
handles the first two; prose-wrapped replies fall back to the first balanced
bracket span. MalformedResponseError is raised when neither yields JSON.

Dependencies: json, langchain_core, visual_notes.core.exceptions
System role: Leniency layer between raw model text and schema validation
"""

import json
from typing import Any

from langchain_core.utils.json import parse_json_markdown

from visual_notes.core.exceptions import MalformedResponseError

_NOT_PARSED = object()


def find_balanced_span(content: str, opener: str, closer: str) -> str | None:
    """Return the first balanced opener...closer substring, or None.

    Brackets inside JSON string literals are ignored.
    """
    start = content.find(opener)
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for index in range(start, len(content)):
            char = content[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == opener:
                depth += 1
            elif char == closer:
                depth -= 1
                if depth == 0:
                    return content[start : index + 1]
        # Unbalanced from this opener; try the next one
        start = content.find(opener, start + 1)
    return None


def _parse_markdown_json(content: str) -> Any:
    """Bare or fenced JSON, or _NOT_PARSED.

    Strict `json.loads` is used so a truncated reply is never auto-closed
    into a shorter, valid-looking value.
    """
    try:
        return parse_json_markdown(content, parser=json.loads)
    except json.JSONDecodeError:
        return _NOT_PARSED


def _parse_span(content: str, opener: str, closer: str) -> Any:
    span = find_balanced_span(content, opener, closer)
    if span is None:
        return _NOT_PARSED
    try:
        return json.loads(span)
    except json.JSONDecodeError:
        return _NOT_PARSED


def _malformed(content: str) -> MalformedResponseError:
    return MalformedResponseError(
        "Failed to parse AI response as JSON",
        details={"preview": content.strip()[:200]},
    )


def extract_json_array(content: str) -> list[Any]:
    """Extract a JSON array from a model reply.

    Tries bare or fenced JSON first, then the first balanced [...] substring.

    Args:
        content: Raw model text

    Returns:
        list: Parsed array

    Raises:
        MalformedResponseError: If no array can be extracted
    """
    parsed = _parse_markdown_json(content)
    if parsed is _NOT_PARSED:
        parsed = _parse_span(content, "[", "]")
    if parsed is _NOT_PARSED:
        raise _malformed(content)

    if not isinstance(parsed, list):
        raise MalformedResponseError(
            "AI response is not an array",
            details={"type": type(parsed).__name__},
        )
    return parsed


def extract_json_value(content: str) -> Any:
    """Extract a JSON object or array from a model reply.

    Objects are preferred over arrays when the reply is prose-wrapped,
    since an object reply usually embeds the array.

    Raises:
        MalformedResponseError: If neither can be extracted
    """
    parsed = _parse_markdown_json(content)
    for opener, closer in (("{", "}"), ("[", "]")):
        if parsed is not _NOT_PARSED:
            break
        parsed = _parse_span(content, opener, closer)

    if parsed is _NOT_PARSED:
        raise _malformed(content)
    return parsed
