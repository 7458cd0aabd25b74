"""
Integration test configuration with testcontainers.

Provides a session-scoped PostgreSQL 16 container for the PostgreSQL case
store tests. Each test gets a fresh engine over the migrated schema with
the verification_cases table truncated.

Tests that need the container skip when Docker is not reachable; the
scenario tests run on the in-memory store and need no container.

Usage:
    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_example(session_factory: async_sessionmaker[AsyncSession]) -> None:
        store = PostgresCaseStore(session_factory, time_authority)
        ...
"""

from collections.abc import AsyncGenerator, Generator

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from testcontainers.postgres import PostgresContainer

from reunite.bootstrap.database import to_async_url
from tests.integration.sql_helpers import apply_migrations


@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer, None, None]:
    """Session-scoped PostgreSQL 16 container, started once per run."""
    container = PostgresContainer("postgres:16-alpine")
    try:
        container.start()
    except Exception as e:
        pytest.skip(f"Docker is not available for integration tests: {e}")
    try:
        yield container
    finally:
        container.stop()


@pytest.fixture(scope="session")
def postgres_async_url(postgres_container: PostgresContainer) -> str:
    """asyncpg URL for the container (testcontainers reports a psycopg2 URL)."""
    return to_async_url(postgres_container.get_connection_url())


@pytest.fixture
async def session_factory(
    postgres_async_url: str,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Session factory over a migrated, empty verification_cases table."""
    engine = create_async_engine(postgres_async_url, echo=False)
    async with engine.begin() as connection:
        await apply_migrations(connection)
        await connection.execute(text("TRUNCATE verification_cases"))

    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()
