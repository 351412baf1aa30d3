"""Visual notes pipeline schemas for context, stage outcomes and state.

This module defines:
- GenerationContext: immutable per-request context threaded through stages
- StageOutcome: tagged success/skipped/failed result of one stage
- TypedDict schema for LangGraph state management
- VisualNotesResult: terminal artifact handed back to the service layer
"""

import operator
from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any, Literal, TypedDict

from pydantic import BaseModel, Field

from visual_notes.core.agentic_system.visual_notes_agent.agent.diagram_schema import ElementDict
from visual_notes.core.exceptions import GenerationFailureKind

Theme = Literal["light", "dark"]


class SourceKind(str, Enum):
    """Where the request content came from."""

    TEXT = "text"
    PDF_TEXT = "pdf-extracted-text"
    IMAGE = "image"


@dataclass(frozen=True)
class GenerationContext:
    """Everything a stage may read about the request.

    Attributes:
        source_kind: Text, extracted PDF text, or image
        content: Source text, or the base64 image payload
        theme: Palette the model is instructed to use
        expand_content: Permit clearly-implied supporting content
        caller_id: Authenticated caller
        is_privileged: Caller is exempt from the daily quota
        image_mime_type: MIME type when source_kind is IMAGE
    """

    source_kind: SourceKind
    content: str
    theme: Theme = "light"
    expand_content: bool = False
    caller_id: str = ""
    is_privileged: bool = False
    image_mime_type: str | None = None

    @property
    def is_image(self) -> bool:
        return self.source_kind is SourceKind.IMAGE

    @property
    def source_text(self) -> str:
        """Source text, or "" for image requests."""
        return "" if self.is_image else self.content


class StageStatus(str, Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class StageOutcome:
    """Result of running one stage.

    Stages never decide fallback themselves; the orchestrator reads the
    status and either adopts `elements` or carries its previous list forward.
    """

    stage: str
    status: StageStatus
    elements: list[ElementDict] | None = None
    reason: str | None = None
    failure_kind: GenerationFailureKind | None = None
    notes: tuple[str, ...] = ()

    @classmethod
    def success(
        cls,
        stage: str,
        elements: list[ElementDict],
        notes: tuple[str, ...] = (),
    ) -> "StageOutcome":
        return cls(stage=stage, status=StageStatus.SUCCESS, elements=elements, notes=notes)

    @classmethod
    def skipped(cls, stage: str, reason: str) -> "StageOutcome":
        return cls(stage=stage, status=StageStatus.SKIPPED, reason=reason)

    @classmethod
    def failed(
        cls,
        stage: str,
        reason: str,
        failure_kind: GenerationFailureKind | None = None,
    ) -> "StageOutcome":
        return cls(
            stage=stage,
            status=StageStatus.FAILED,
            reason=reason,
            failure_kind=failure_kind,
        )

    @property
    def succeeded(self) -> bool:
        return self.status is StageStatus.SUCCESS


@dataclass(frozen=True)
class AuditReport:
    """Diagnostic comparison of source density against output density."""

    source_items: int
    text_elements: int
    shape_elements: int
    coverage_ratio: float | None
    unlabeled_shapes: int
    below_threshold: bool
    warnings: tuple[str, ...] = field(default_factory=tuple)


class VisualNotesState(TypedDict, total=False):
    """LangGraph state for the visual notes pipeline.

    Attributes:
        context: Immutable request context
        elements: Current element list (replaced as stages succeed)
        outcomes: Append-only log of every stage outcome
        generation_failure: Set when the mandatory stage failed
        audit: Completeness audit of the final document
        suggested_project_name: Title derived from the final document
    """

    context: GenerationContext
    elements: list[ElementDict]
    outcomes: Annotated[list[StageOutcome], operator.add]
    generation_failure: StageOutcome | None
    audit: AuditReport | None
    suggested_project_name: str


class VisualNotesResult(BaseModel):
    """Final pipeline artifact: renderer-ready elements plus diagnostics."""

    elements: list[dict[str, Any]] = Field(description="Enriched diagram elements")
    suggested_project_name: str = Field(description="Title derived from the document")
    stage_statuses: dict[str, str] = Field(
        default_factory=dict,
        description="Stage name -> success/skipped/failed",
    )
