"""
Core business logic module.

Contains the generation pipeline, input normalization, and the
exception hierarchy shared by every layer.
"""

from visual_notes.core.exceptions import (
    GenerationFailedError,
    GenerationFailureKind,
    InvalidInputError,
    MalformedResponseError,
    ModelCallError,
    QuotaExceededError,
    UnauthenticatedError,
    VisualNotesError,
)

__all__ = [
    "VisualNotesError",
    "InvalidInputError",
    "UnauthenticatedError",
    "QuotaExceededError",
    "GenerationFailureKind",
    "ModelCallError",
    "MalformedResponseError",
    "GenerationFailedError",
]
