"""Completeness audit.

Estimates how many distinct items the source text holds and compares that
against the text elements in the output. Shapes carry no text, so they
are counted and reported but do not raise the coverage ratio. Purely
diagnostic: the report is logged and attached to the pipeline state, never
enforced.

Dependencies: re
System role: Post-pipeline quality signal
"""

import logging
import re

from visual_notes.core.agentic_system.visual_notes_agent.agent.diagram_schema import (
    SHAPE_TYPES,
    ElementDict,
    normalize_bounds,
)
from visual_notes.core.agentic_system.visual_notes_agent.agent.visual_notes_schema import (
    AuditReport,
)

logger = logging.getLogger(__name__)

_BULLET_RE = re.compile(r"^\s*(?:[-*+•◦>]|->|=>)\s+\S")
_NUMBERED_RE = re.compile(r"^\s*(?:\d+|[a-zA-Z])[.)]\s+\S")
_INLINE_NUMBERED_RE = re.compile(r"(?:^|\s)\d+[.)]\s+\S")
_HEADING_RE = re.compile(r"^\s*#{1,6}\s+\S")
_LABEL_HEADER_RE = re.compile(r"^\s*[^\s:][^:]{0,58}:\s*$")

LABEL_HORIZONTAL_PX = 100
LABEL_VERTICAL_PX = 50


def _is_table_row(line: str) -> bool:
    return line.count("|") >= 2 or line.count("\t") >= 2


def count_source_items(source_text: str) -> int:
    """Count bullets, numbered items, table rows and headers in the source."""
    items = 0
    for line in source_text.splitlines():
        if not line.strip():
            continue
        if _is_table_row(line):
            items += 1
        elif _HEADING_RE.match(line) or _LABEL_HEADER_RE.match(line):
            items += 1
        elif _BULLET_RE.match(line):
            items += 1
        elif _NUMBERED_RE.match(line):
            items += 1
        else:
            # "steps: 1) wash 2) dry 3) fold" counts each enumerated item
            items += len(_INLINE_NUMBERED_RE.findall(line))
    return items


def _has_nearby_label(shape: ElementDict, texts: list[ElementDict]) -> bool:
    bounds = normalize_bounds(shape)
    for text in texts:
        text_bounds = normalize_bounds(text)
        horizontal_gap = max(
            bounds.x - (text_bounds.x + text_bounds.width),
            text_bounds.x - (bounds.x + bounds.width),
            0.0,
        )
        vertical_gap = max(
            bounds.y - (text_bounds.y + text_bounds.height),
            text_bounds.y - (bounds.y + bounds.height),
            0.0,
        )
        if horizontal_gap <= LABEL_HORIZONTAL_PX and vertical_gap <= LABEL_VERTICAL_PX:
            return True
    return False


def audit_completeness(
    source_text: str,
    elements: list[ElementDict],
    warning_ratio: float = 0.5,
) -> AuditReport:
    """Compare source density with output density.

    Args:
        source_text: Normalized source text ("" for image requests)
        elements: Final element list
        warning_ratio: Coverage below this ratio logs a warning

    Returns:
        AuditReport: Counts, coverage ratio (None when the source has no
        countable items) and any warnings
    """
    texts = [e for e in elements if e.get("type") == "text" and str(e.get("text", "")).strip()]
    shapes = [e for e in elements if e.get("type") in SHAPE_TYPES]
    source_items = count_source_items(source_text)

    warnings: list[str] = []
    coverage_ratio: float | None = None
    below_threshold = False
    if source_items:
        coverage_ratio = round(len(texts) / source_items, 3)
        below_threshold = coverage_ratio < warning_ratio
        if below_threshold:
            warnings.append(
                f"low coverage: {len(texts)} text elements ({len(shapes)} shapes) "
                f"for {source_items} source items (ratio {coverage_ratio})"
            )

    unlabeled = sum(1 for shape in shapes if not _has_nearby_label(shape, texts))
    if unlabeled:
        warnings.append(f"{unlabeled} shape(s) have no nearby text label")

    for warning in warnings:
        logger.warning(f"{__name__}:audit_completeness - {warning}")
    logger.info(
        f"{__name__}:audit_completeness - source_items={source_items} texts={len(texts)} "
        f"shapes={len(shapes)} coverage={coverage_ratio}"
    )

    return AuditReport(
        source_items=source_items,
        text_elements=len(texts),
        shape_elements=len(shapes),
        coverage_ratio=coverage_ratio,
        unlabeled_shapes=unlabeled,
        below_threshold=below_threshold,
        warnings=tuple(warnings),
    )
