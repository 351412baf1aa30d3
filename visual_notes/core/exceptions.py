"""
Domain errors for the Visual Notes service.

The API layer maps each subclass of VisualNotesError onto an HTTP status;
`message` is what the client sees and `details` only ever reaches the logs.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from enum import Enum
from typing import Any


class VisualNotesError(Exception):
    """Root of the hierarchy. Carries a client-safe message and log-only details."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


class InvalidInputError(VisualNotesError):
    """Raised when a request carries no usable content or an unsupported file."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize invalid input error.

        Args:
            message: Error message
            field: Request field that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class UnauthenticatedError(VisualNotesError):
    """Raised when the caller cannot be identified."""

    pass


class QuotaExceededError(VisualNotesError):
    """Raised when a non-privileged caller has used up today's allowance."""

    def __init__(
        self,
        daily_limit: int,
        user_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize quota exceeded error.

        Args:
            daily_limit: Configured free-tier daily limit
            user_id: Caller that hit the limit
            details: Additional context
        """
        details = details or {}
        if user_id:
            details["user_id"] = user_id
        self.daily_limit = daily_limit
        self.remaining_uses = 0
        super().__init__(
            f"Daily limit of {daily_limit} visual notes reached. "
            "Upgrade for unlimited access or try again tomorrow.",
            details,
        )


class GenerationFailureKind(str, Enum):
    """Why the mandatory generation call failed."""

    TIMEOUT = "timeout"
    SERVICE_ERROR = "service_error"
    MALFORMED_RESPONSE = "malformed_response"


class ModelCallError(VisualNotesError):
    """Raised by the model client; stages translate it into a stage outcome."""

    def __init__(
        self,
        message: str,
        kind: GenerationFailureKind,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize model call error.

        Args:
            message: Error message
            kind: Failure classification
            details: Additional context
        """
        self.kind = kind
        super().__init__(message, details)


class MalformedResponseError(ModelCallError):
    """Raised when a model reply does not contain the expected JSON value."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, GenerationFailureKind.MALFORMED_RESPONSE, details)


class GenerationFailedError(VisualNotesError):
    """Raised when the mandatory structure generation stage fails."""

    def __init__(
        self,
        message: str,
        kind: GenerationFailureKind,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize generation failure.

        Args:
            message: Human-readable reason surfaced to the caller
            kind: Timeout, service error or malformed response
            details: Additional context
        """
        details = details or {}
        details["kind"] = kind.value
        self.kind = kind
        super().__init__(message, details)
