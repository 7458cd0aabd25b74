"""Request correlation ids.

One id follows an HTTP request through the verification handlers, the
case store and every log entry they write. It is kept in a ContextVar so
concurrent requests on the same event loop never see each other's id.

The middleware accepts the caller's id when it looks usable and mints a
fresh one otherwise; see ``accept_correlation_id``.
"""

from contextvars import ContextVar, Token
from uuid import uuid4

MAX_CORRELATION_ID_LENGTH = 128

# Empty string means "no request in scope"
_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    return str(uuid4())


def accept_correlation_id(incoming: str | None) -> str:
    """Return the caller-supplied id, or a new one if it is blank or too long."""
    candidate = (incoming or "").strip()
    if not candidate or len(candidate) > MAX_CORRELATION_ID_LENGTH:
        return generate_correlation_id()
    return candidate


def get_correlation_id() -> str:
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> Token[str]:
    """Bind an id to the current context.

    Returns the ContextVar token so the caller can restore the previous
    id with ``reset_correlation_id`` when its scope ends.
    """
    return _correlation_id.set(correlation_id)


def reset_correlation_id(token: Token[str]) -> None:
    _correlation_id.reset(token)
