"""Document enrichment.

Completes every element into a renderer-ready record: fresh identity
fields plus defaults for every rendering attribute the model left out.
Fields the model did provide are never overwritten.

Dependencies: random, uuid
System role: Final pass before elements leave the pipeline
"""

import random
import uuid
from typing import Any

from visual_notes.core.agentic_system.visual_notes_agent.agent.diagram_schema import (
    LINEAR_TYPES,
    ElementDict,
)

_MAX_SEED = 2**31 - 1

_COMMON_DEFAULTS: dict[str, Any] = {
    "angle": 0,
    "strokeColor": "#1e1e1e",
    "backgroundColor": "transparent",
    "fillStyle": "solid",
    "strokeWidth": 2,
    "strokeStyle": "solid",
    "roughness": 1,
    "opacity": 100,
    "frameId": None,
    "isDeleted": False,
    "version": 1,
    "boundElements": None,
    "link": None,
    "locked": False,
}

_TEXT_DEFAULTS: dict[str, Any] = {
    "fontSize": 20,
    "fontFamily": "normal",
    "textAlign": "center",
    "verticalAlign": "middle",
    "lineHeight": 1.25,
    "containerId": None,
}

_LINEAR_DEFAULTS: dict[str, Any] = {
    "startArrowhead": None,
    "startBinding": None,
    "endBinding": None,
    "lastCommittedPoint": None,
}

_ROUNDED_TYPES = frozenset({"rectangle", "diamond"})


def _random_int() -> int:
    return random.randint(1, _MAX_SEED)


def enrich_element(element: ElementDict) -> ElementDict:
    """Return a fully populated copy of one element."""
    enriched = dict(element)
    element_type = enriched.get("type")

    enriched["id"] = str(uuid.uuid4())
    enriched["seed"] = _random_int()
    enriched["versionNonce"] = _random_int()

    for key, value in _COMMON_DEFAULTS.items():
        enriched.setdefault(key, value)
    enriched.setdefault("groupIds", [])
    enriched.setdefault(
        "roundness",
        {"type": 3} if element_type in _ROUNDED_TYPES else None,
    )

    if element_type == "text":
        for key, value in _TEXT_DEFAULTS.items():
            enriched.setdefault(key, value)
        enriched.setdefault("originalText", enriched.get("text", ""))

    if element_type in LINEAR_TYPES:
        enriched.setdefault(
            "points",
            [
                {"x": 0, "y": 0},
                {"x": enriched.get("width", 0), "y": enriched.get("height", 0)},
            ],
        )
        for key, value in _LINEAR_DEFAULTS.items():
            enriched.setdefault(key, value)
        enriched.setdefault("endArrowhead", "arrow" if element_type == "arrow" else None)

    return enriched


def enrich_elements(elements: list[ElementDict]) -> list[ElementDict]:
    """Enrich a whole document; order and cardinality are preserved."""
    return [enrich_element(element) for element in elements]
