"""structlog setup for the reunite service.

Deployed environments (``production``, ``staging``) emit one JSON object
per line for the log pipeline; everything else gets the coloured console
renderer. A decision entry in production looks like:

    {"event": "decision_recorded", "level": "info",
     "timestamp": "2026-01-01T00:00:00.000000Z",
     "correlation_id": "...", "service": "ReviewService",
     "operation": "decide", "case_id": "...", "outcome": "approved"}

Context bound as ``None`` (no caller header, no case yet) is dropped
rather than rendered as ``null``.

LOG_LEVEL sets the threshold for structlog and for stdlib loggers such
as uvicorn and sqlalchemy.
"""

import logging
import os
from typing import Any, cast

import structlog
from structlog.typing import Processor

from reunite.infrastructure.observability.correlation import correlation_id_processor

LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"
JSON_ENVIRONMENTS = frozenset({"production", "staging"})


def resolve_log_level() -> int:
    """LOG_LEVEL as a logging constant; unknown names fall back to INFO."""
    level = logging.getLevelName(os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper())
    return level if isinstance(level, int) else logging.INFO


def drop_none_values(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    return {key: value for key, value in event_dict.items() if value is not None}


def configure_structlog(environment: str = "production") -> None:
    """Install the processor chain for ``environment``. Call once at startup."""
    level = resolve_log_level()
    logging.basicConfig(format="%(message)s", level=level)

    renderer: Processor
    if environment in JSON_ENVIRONMENTS:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            cast(Processor, correlation_id_processor),
            cast(Processor, drop_none_values),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
