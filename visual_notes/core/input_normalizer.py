"""
Input normalization for visualize requests.

Turns raw text or an uploaded file into a single NormalizedInput:
text is truncated to its ceiling, PDFs are reduced to their text,
images are base64-encoded for the model call.

Dependencies: base64, pdf_text_extractor, visual_notes.configs
System role: First step of every visualize request, before quota is touched
"""

import base64
import logging
from collections.abc import Callable
from dataclasses import dataclass

from visual_notes.configs.generation import GenerationSettings
from visual_notes.core.agentic_system.visual_notes_agent.agent.visual_notes_schema import (
    SourceKind,
)
from visual_notes.core.exceptions import InvalidInputError
from visual_notes.core.pdf_text_extractor import PdfExtractionError, extract_pdf_text

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
TEXT_MIME_TYPE = "text/plain"
IMAGE_MIME_TYPES = frozenset({"image/png", "image/jpeg", "image/gif", "image/webp"})
ALLOWED_MIME_TYPES = IMAGE_MIME_TYPES | {PDF_MIME_TYPE, TEXT_MIME_TYPE}


@dataclass(frozen=True)
class RawVisualizeInput:
    """Request content as received, before any validation."""

    text: str | None = None
    file_bytes: bytes | None = None
    mime_type: str | None = None
    filename: str | None = None


@dataclass(frozen=True)
class NormalizedInput:
    """Validated content ready for the pipeline."""

    source_kind: SourceKind
    content: str
    mime_type: str | None = None
    truncated: bool = False
    original_length: int = 0


class InputNormalizer:
    """Validate and normalize visualize request content."""

    def __init__(
        self,
        settings: GenerationSettings,
        pdf_extractor: Callable[[bytes], str] = extract_pdf_text,
    ) -> None:
        """
        Args:
            settings: Size and character ceilings
            pdf_extractor: Function returning the text of PDF bytes
        """
        self._settings = settings
        self._pdf_extractor = pdf_extractor

    def normalize(self, raw: RawVisualizeInput) -> NormalizedInput:
        """
        Normalize one request.

        A file takes precedence over text when both are present.

        Raises:
            InvalidInputError: On missing content, unsupported type,
                oversized payloads or unreadable PDFs
        """
        if raw.file_bytes is not None:
            return self._normalize_file(raw)

        if raw.text is not None and raw.text.strip():
            return self._normalize_text(raw.text, SourceKind.TEXT, self._settings.max_text_chars)

        raise InvalidInputError("No content provided. Please enter text or upload a file.")

    def _normalize_text(self, text: str, kind: SourceKind, limit: int) -> NormalizedInput:
        original_length = len(text)
        truncated = original_length > limit
        if truncated:
            text = text[:limit]
            logger.info(
                f"{__name__}:_normalize_text - Truncated {kind.value} "
                f"from {original_length} to {limit} chars"
            )
        return NormalizedInput(
            source_kind=kind,
            content=text,
            truncated=truncated,
            original_length=original_length,
        )

    def _normalize_file(self, raw: RawVisualizeInput) -> NormalizedInput:
        mime_type = (raw.mime_type or "").split(";")[0].strip().lower()
        data = raw.file_bytes or b""

        if mime_type not in ALLOWED_MIME_TYPES:
            raise InvalidInputError(
                "Invalid file type. Supported: PDF, PNG, JPG, GIF, WebP, TXT",
                field="file",
                details={"mime_type": mime_type or None},
            )
        if not data:
            raise InvalidInputError("Uploaded file is empty", field="file")
        if len(data) > self._settings.max_file_bytes:
            raise InvalidInputError(
                f"File too large. Maximum size is {self._settings.max_file_mb}MB",
                field="file",
                details={"size": len(data)},
            )

        if mime_type == PDF_MIME_TYPE:
            return self._normalize_pdf(data)

        if mime_type == TEXT_MIME_TYPE:
            text = data.decode("utf-8", errors="replace")
            if not text.strip():
                raise InvalidInputError("Text file is empty", field="file")
            return self._normalize_text(text, SourceKind.TEXT, self._settings.max_text_chars)

        encoded = base64.b64encode(data).decode("ascii")
        if len(encoded) > self._settings.max_image_bytes:
            raise InvalidInputError(
                f"Image too large. Maximum size is {self._settings.max_image_mb}MB",
                field="file",
                details={"encoded_size": len(encoded)},
            )
        return NormalizedInput(
            source_kind=SourceKind.IMAGE,
            content=encoded,
            mime_type=mime_type,
            original_length=len(data),
        )

    def _normalize_pdf(self, data: bytes) -> NormalizedInput:
        try:
            text = self._pdf_extractor(data)
        except PdfExtractionError as e:
            logger.warning(f"{__name__}:_normalize_pdf - {e}")
            raise InvalidInputError("Failed to parse PDF file", field="file") from e

        if not text or not text.strip():
            raise InvalidInputError(
                "PDF appears to be empty or contains only images",
                field="file",
            )
        return self._normalize_text(text, SourceKind.PDF_TEXT, self._settings.max_pdf_chars)
