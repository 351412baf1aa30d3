"""
Helpers for writing key=value log lines.

The log format prints only the message, so structured fields are folded
into the message text. Values are shortened first: a source document or a
list of diagram elements should never be dumped into a log line whole.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from collections import Counter
from typing import Any

MAX_FIELD_LENGTH = 200


def describe_value(value: Any, max_length: int = MAX_FIELD_LENGTH) -> str:
    """Short, single-line rendering of `value` for a log field."""
    if value is None:
        return "none"
    if isinstance(value, dict):
        text = f"<{len(value)} keys>"
    elif isinstance(value, (list, tuple)):
        text = summarize_elements(value) if _looks_like_elements(value) else f"<{len(value)} items>"
    else:
        text = " ".join(str(value).split())

    if len(text) > max_length:
        return f"{text[:max_length]}...(+{len(text) - max_length} chars)"
    return text


def summarize_elements(elements) -> str:
    """Element count broken down by type, e.g. `5 elements (3 rectangle, 2 text)`."""
    by_type = Counter(element.get("type", "?") for element in elements)
    breakdown = ", ".join(f"{count} {kind}" for kind, count in by_type.most_common())
    return f"{len(elements)} elements ({breakdown})" if elements else "0 elements"


def log_with_context(logger: logging.Logger, level: int, message: str, **fields) -> None:
    """Log `message` followed by ` key=value` pairs for every field."""
    if fields:
        rendered = " ".join(f"{key}={describe_value(value)}" for key, value in fields.items())
        message = f"{message} | {rendered}"
    logger.log(level, message)


def _looks_like_elements(value) -> bool:
    return bool(value) and all(isinstance(item, dict) and "type" in item for item in value)
