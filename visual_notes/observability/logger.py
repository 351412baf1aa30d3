"""
Logging setup for the service.

Everything goes to stdout in a single line format that carries the request's
correlation ID, so a container log collector can group lines per request.

Dependencies: logging (stdlib), visual_notes.observability.correlation
System role: Centralized logging configuration
"""

import logging
import sys

from visual_notes.observability.correlation import get_correlation_id

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(correlation_id)s] %(name)s: %(message)s"

# Client libraries that log every HTTP round trip to the model provider
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "langchain_openai")


class CorrelationIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True


def configure_logging(level: str = "INFO") -> None:
    """
    Route the root logger to stdout at `level`.

    Safe to call more than once: previously installed handlers are replaced,
    which keeps test runs and uvicorn reloads from doubling every line.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level.upper())

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
