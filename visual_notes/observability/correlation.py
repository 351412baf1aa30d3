"""
Per-request correlation IDs.

A correlation ID ties together every log line emitted while serving one
request, including lines from the graph stages running under it. The value
lives in a ContextVar so it follows the request across awaits and into
`asyncio.to_thread` workers.

Dependencies: contextvars
System role: Request tracing
"""

import re
import uuid
from contextvars import ContextVar, Token

CORRELATION_HEADER = "X-Correlation-ID"

# Caller-supplied IDs end up in log lines, so only short token-like values are trusted.
_ACCEPTABLE_ID = re.compile(r"^[A-Za-z0-9._:-]{1,64}$")

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def bind_correlation_id(incoming: str | None = None) -> tuple[str, Token]:
    """Bind the caller's ID, or a fresh one if it is missing or malformed.

    Returns the bound value and the token needed to undo the binding.
    """
    value = incoming if incoming and _ACCEPTABLE_ID.match(incoming) else uuid.uuid4().hex
    return value, _correlation_id.set(value)


def reset_correlation_id(token: Token) -> None:
    _correlation_id.reset(token)


def get_correlation_id() -> str:
    """Current request's ID, or "" outside a request."""
    return _correlation_id.get()
