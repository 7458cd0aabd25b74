"""Logging bootstrap: picks the environment and installs structlog."""

from __future__ import annotations

import os

from reunite.infrastructure.observability import configure_structlog

ENVIRONMENT_ENV = "ENVIRONMENT"
DEFAULT_ENVIRONMENT = "development"


def current_environment() -> str:
    return os.environ.get(ENVIRONMENT_ENV, DEFAULT_ENVIRONMENT).strip().lower()


def configure_logging(environment: str | None = None) -> str:
    """Configure structlog for ``environment`` (default: $ENVIRONMENT).

    Returns the environment that was applied.
    """
    applied = environment or current_environment()
    configure_structlog(environment=applied)
    return applied


__all__ = ["configure_logging", "current_environment"]
