"""Puts the request's correlation id on every structlog entry.

Entries logged outside a request (startup, shutdown) carry no id. An id
bound explicitly on the logger wins over the one in context.
"""

from typing import Any

from reunite.application.correlation import get_correlation_id


def correlation_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    if "correlation_id" not in event_dict:
        correlation_id = get_correlation_id()
        if correlation_id:
            event_dict["correlation_id"] = correlation_id
    return event_dict
