"""Engine and session factory for the PostgreSQL case store.

Only built when CASE_STORE_BACKEND selects the postgres store; the
in-memory stub never touches this module.

Environment Variables:
- DATABASE_URL: PostgreSQL URL, any of the postgres://, postgresql:// or
  postgresql+<driver>:// forms. Rewritten to the asyncpg driver.
- DB_POOL_SIZE / DB_MAX_OVERFLOW: connection pool sizing (default 5 / 10)
- SQLALCHEMY_ECHO: log SQL statements when "1", "true" or "yes"
"""

from __future__ import annotations

import os

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from structlog import get_logger

logger = get_logger()

ASYNC_DRIVER = "postgresql+asyncpg"
_POSTGRES_DRIVERS = ("postgres", "postgresql")

_session_factory: async_sessionmaker[AsyncSession] | None = None
_engine: AsyncEngine | None = None


def to_async_url(url: str) -> str:
    """Rewrite a PostgreSQL URL so that it uses the asyncpg driver.

    Raises:
        ValueError: If the URL is not a PostgreSQL URL.
    """
    parsed = make_url(url)
    if parsed.drivername.split("+", 1)[0] not in _POSTGRES_DRIVERS:
        raise ValueError(f"Not a PostgreSQL URL: {parsed.drivername}://...")
    return parsed.set(drivername=ASYNC_DRIVER).render_as_string(hide_password=False)


def get_database_url() -> str:
    """DATABASE_URL in asyncpg form.

    Raises:
        ValueError: If DATABASE_URL is unset or not a PostgreSQL URL.
    """
    url = os.environ.get("DATABASE_URL")
    if not url:
        raise ValueError(
            "DATABASE_URL environment variable not set. "
            "Required for the PostgreSQL case store."
        )
    return to_async_url(url)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    return int(raw) if raw else default


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory for the case store, created on first use."""
    global _session_factory, _engine

    if _session_factory is None:
        url = get_database_url()
        log = logger.bind(component="database_bootstrap")
        log.info(
            "creating_database_engine",
            url=make_url(url).render_as_string(hide_password=True),
        )
        _engine = create_async_engine(
            url,
            echo=os.environ.get("SQLALCHEMY_ECHO", "").lower() in ("1", "true", "yes"),
            pool_size=_env_int("DB_POOL_SIZE", 5),
            max_overflow=_env_int("DB_MAX_OVERFLOW", 10),
            pool_pre_ping=True,
        )
        _session_factory = async_sessionmaker(
            bind=_engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    return _session_factory


def reset_database_bootstrap() -> None:
    global _session_factory, _engine
    _session_factory = None
    _engine = None


async def close_database_engine() -> None:
    """Dispose of the engine on shutdown; a no-op if none was created."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        logger.info("database_engine_disposed")
    _engine = None
    _session_factory = None
