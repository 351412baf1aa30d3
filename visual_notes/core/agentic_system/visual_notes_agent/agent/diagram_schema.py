"""Diagram element schemas for candidate validation.

This module defines:
- Pydantic models for the six drawable element kinds
- A discriminated union used to validate every element a model returns
- Bounds normalization for signed width/height

Elements travel through the pipeline as plain wire dicts (camelCase keys);
these models are the gate they pass through when parsed from a model reply.

Dependencies: pydantic
System role: Element contract shared by every pipeline stage
"""

import logging
from typing import Annotated, Any, Literal, NamedTuple, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, model_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

ElementDict = dict[str, Any]

SHAPE_TYPES = frozenset({"rectangle", "ellipse", "diamond"})
LINEAR_TYPES = frozenset({"arrow", "line"})

FillStyle = Literal["solid", "hachure", "cross-hatch", "none"]
StrokeStyle = Literal["solid", "dashed", "dotted"]
FontFamily = Literal["normal", "virgil", "code"]
TextAlign = Literal["left", "center", "right"]


class Point(BaseModel):
    """Offset relative to the owning element's (x, y)."""

    x: float
    y: float

    @model_validator(mode="before")
    @classmethod
    def _from_pair(cls, value: Any) -> Any:
        # Models emit either {"x": .., "y": ..} or [x, y]
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return {"x": value[0], "y": value[1]}
        return value


class ElementBase(BaseModel):
    """Fields shared by every element kind."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    x: float
    y: float
    width: float = 0.0
    height: float = 0.0
    angle: float | None = None
    opacity: float | None = Field(default=None, ge=0, le=100)
    stroke_color: str | None = None
    background_color: str | None = None
    fill_style: FillStyle | None = None
    stroke_style: StrokeStyle | None = None
    stroke_width: int | None = Field(default=None, ge=1, le=10)
    seed: int | None = None


class RectangleElement(ElementBase):
    type: Literal["rectangle"]


class EllipseElement(ElementBase):
    type: Literal["ellipse"]


class DiamondElement(ElementBase):
    type: Literal["diamond"]


class TextElement(ElementBase):
    type: Literal["text"]
    text: str
    font_size: float | None = Field(default=None, gt=0, le=200)
    font_family: FontFamily | None = None
    text_align: TextAlign | None = None


class LinearElement(ElementBase):
    points: list[Point] | None = Field(default=None, min_length=2)


class ArrowElement(LinearElement):
    type: Literal["arrow"]
    start_arrowhead: str | None = None
    end_arrowhead: str | None = None


class LineElement(LinearElement):
    type: Literal["line"]


DiagramElement = Annotated[
    Union[
        RectangleElement,
        EllipseElement,
        DiamondElement,
        TextElement,
        ArrowElement,
        LineElement,
    ],
    Field(discriminator="type"),
]

_ELEMENT_ADAPTER: TypeAdapter[DiagramElement] = TypeAdapter(DiagramElement)


class Bounds(NamedTuple):
    """Axis-aligned box with non-negative size."""

    x: float
    y: float
    width: float
    height: float


def normalize_bounds(element: ElementDict) -> Bounds:
    """Resolve signed width/height into a top-left anchored box.

    Negative sizes denote a flip; the visual extent is unchanged.

    Args:
        element: Wire dict with x, y, width, height

    Returns:
        Bounds: (min x, min y, |width|, |height|)
    """
    x = float(element.get("x", 0) or 0)
    y = float(element.get("y", 0) or 0)
    width = float(element.get("width", 0) or 0)
    height = float(element.get("height", 0) or 0)
    return Bounds(
        x=x + min(0.0, width),
        y=y + min(0.0, height),
        width=abs(width),
        height=abs(height),
    )


def validate_element(raw: Any) -> ElementDict:
    """Validate one candidate element and return its wire dict.

    Raises:
        ValidationError: If the element has an impossible type or range
    """
    element = _ELEMENT_ADAPTER.validate_python(raw)
    return element.model_dump(by_alias=True, exclude_none=True)


def validate_elements(raw_elements: list[Any]) -> tuple[list[ElementDict], int]:
    """Validate a list of candidates, dropping the ones that fail.

    Args:
        raw_elements: Parsed JSON array from a model reply

    Returns:
        tuple: (valid wire dicts in original order, number rejected)
    """
    valid: list[ElementDict] = []
    rejected = 0
    for index, raw in enumerate(raw_elements):
        try:
            valid.append(validate_element(raw))
        except ValidationError as e:
            rejected += 1
            logger.warning(
                f"{__name__}:validate_elements - Rejected element {index}: "
                f"{e.error_count()} error(s), first={e.errors()[0]['msg']}"
            )
    return valid, rejected
