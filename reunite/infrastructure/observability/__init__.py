"""structlog configuration and processors for the reunite service."""

from reunite.infrastructure.observability.correlation import correlation_id_processor
from reunite.infrastructure.observability.logging import (
    configure_structlog,
    drop_none_values,
)

__all__: list[str] = [
    "configure_structlog",
    "correlation_id_processor",
    "drop_none_values",
]
