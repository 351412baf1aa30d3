"""
Generation pipeline limits.

Character, size and token ceilings plus the element-count thresholds
below which the best-effort stages are skipped.

Dependencies: pydantic, pydantic_settings
System role: Pipeline tuning configuration
"""

from pydantic import Field

from visual_notes.configs.base import BaseSettings, settings_config


class GenerationSettings(BaseSettings):
    """Limits and thresholds for the visual notes pipeline."""

    model_config = settings_config("VISUAL_NOTES_")

    max_text_chars: int = Field(default=50_000, description="Ceiling for raw text input")
    max_pdf_chars: int = Field(default=50_000, description="Ceiling for extracted PDF text")
    max_file_mb: int = Field(default=20, description="Maximum uploaded file size in MB")
    max_image_mb: int = Field(
        default=10,
        description="Maximum base64-encoded image payload in MB",
    )
    max_output_tokens: int = Field(default=8000, description="max_tokens per model call")
    request_timeout_seconds: float = Field(
        default=120.0,
        description="Upper bound on a single model call",
    )

    enhancement_min_elements: int = Field(
        default=5,
        description="Icon enhancement runs only at or above this element count",
    )
    max_icon_additions: int = Field(
        default=8,
        description="Maximum elements icon enhancement may add",
    )
    verification_min_elements: int = Field(
        default=5,
        description="Verification runs only at or above this element count",
    )
    refinement_min_elements: int = Field(
        default=8,
        description="Layout refinement runs only at or above this element count",
    )
    coverage_warning_ratio: float = Field(
        default=0.5,
        description="Completeness audit warns below this coverage ratio",
    )

    @property
    def max_file_bytes(self) -> int:
        """Upload ceiling in bytes."""
        return self.max_file_mb * 1024 * 1024

    @property
    def max_image_bytes(self) -> int:
        """Encoded image ceiling in bytes."""
        return self.max_image_mb * 1024 * 1024
