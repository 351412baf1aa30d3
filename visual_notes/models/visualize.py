"""
Visualize domain models and schemas.

Request/response schemas for the visualize endpoints. Wire names are
camelCase to match the browser client.

Dependencies: pydantic
System role: Visualize API contracts
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VisualizeRequest(CamelModel):
    """Non-file fields of a visualize request (JSON, form or multipart)."""

    text: str | None = Field(default=None, description="Raw notes to visualize")
    theme: str = Field(default="light", description="'dark' selects the dark palette")
    expand_content: bool = Field(
        default=False,
        description="Allow clearly-implied supporting content",
    )

    @field_validator("theme", mode="before")
    @classmethod
    def _normalize_theme(cls, value: Any) -> str:
        return "dark" if isinstance(value, str) and value.strip().lower() == "dark" else "light"

    @field_validator("expand_content", mode="before")
    @classmethod
    def _parse_bool(cls, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() == "true"
        return bool(value)


class VisualizeResponse(CamelModel):
    """Generated document plus the caller's allowance after this request."""

    elements: list[dict[str, Any]] = Field(description="Renderer-ready diagram elements")
    suggested_project_name: str = Field(description="Title derived from the document")
    remaining_uses: int | None = Field(
        default=None,
        description="Uses left today (omitted for unlimited callers)",
    )
    daily_limit: int | None = Field(
        default=None,
        description="Free-tier daily limit (omitted for unlimited callers)",
    )


class UsageResponse(CamelModel):
    """Current allowance for the caller."""

    remaining_uses: int | None = Field(description="Uses left today; null when unlimited")
    daily_limit: int
    is_pro: bool


class ErrorResponse(BaseModel):
    """Error body returned by every endpoint."""

    error: str


class QuotaErrorResponse(CamelModel):
    """Error body for an exhausted daily allowance."""

    error: str
    remaining_uses: int = 0
    daily_limit: int
