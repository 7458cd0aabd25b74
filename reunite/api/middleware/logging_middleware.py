"""Request logging and correlation middleware.

Every request gets a correlation id (the caller's ``X-Correlation-ID``
when usable, otherwise a fresh UUID). The id is bound for the duration
of the request, echoed on the response and attached to the
``request_started`` / ``request_completed`` entries together with the
caller's email when one was sent.

Usage:
    app.add_middleware(LoggingMiddleware)
"""

import time
from collections.abc import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from reunite.application.correlation import (
    accept_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)

CORRELATION_HEADER = "X-Correlation-ID"
CALLER_EMAIL_HEADER = "X-User-Email"


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Binds a correlation id per request and logs its outcome."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        correlation_id = accept_correlation_id(request.headers.get(CORRELATION_HEADER))
        token = set_correlation_id(correlation_id)

        log = structlog.get_logger().bind(
            correlation_id=correlation_id,
            method=request.method,
            path=request.url.path,
            caller=request.headers.get(CALLER_EMAIL_HEADER),
        )
        log.info("request_started")
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            log.exception(
                "request_failed",
                duration_ms=_elapsed_ms(started),
                error_type=type(exc).__name__,
            )
            raise
        finally:
            reset_correlation_id(token)

        log.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=_elapsed_ms(started),
        )
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
