"""Verification workflow configuration.

Limits for the verification workflow and case store selection, with
environment variable overrides for production tuning.

Environment Variables (Workflow):
- VERIFICATION_MAX_MESSAGE_LENGTH: Max chat message length (default: 2000)
- VERIFICATION_MAX_REASON_LENGTH: Max decision/dispute/ruling reason length (default: 1000)
- VERIFICATION_MAX_PAGE_SIZE: Max page size for list endpoints (default: 100)

Environment Variables (Store):
- CASE_STORE_BACKEND: "memory" or "postgres" (default: memory)
- DATABASE_URL: PostgreSQL connection string (required for postgres)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class VerificationWorkflowConfig:
    """Limits applied by the workflow handlers.

    Attributes:
        max_message_length: Longest accepted chat message, after stripping.
        max_reason_length: Longest accepted decision, dispute or ruling reason.
        max_page_size: Upper bound for list and message page sizes.
    """

    max_message_length: int = 2000
    max_reason_length: int = 1000
    max_page_size: int = 100

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max_message_length < 1:
            raise ValueError(
                f"max_message_length must be positive, got {self.max_message_length}"
            )
        if self.max_reason_length < 1:
            raise ValueError(
                f"max_reason_length must be positive, got {self.max_reason_length}"
            )
        if self.max_page_size < 1:
            raise ValueError(f"max_page_size must be positive, got {self.max_page_size}")

    @classmethod
    def from_environment(cls) -> "VerificationWorkflowConfig":
        """Create config from environment variables with defaults."""
        return cls(
            max_message_length=_get_int_env("VERIFICATION_MAX_MESSAGE_LENGTH", 2000),
            max_reason_length=_get_int_env("VERIFICATION_MAX_REASON_LENGTH", 1000),
            max_page_size=_get_int_env("VERIFICATION_MAX_PAGE_SIZE", 100),
        )


class CaseStoreBackend(Enum):
    """Which case store implementation to wire."""

    MEMORY = "memory"
    POSTGRES = "postgres"


@dataclass(frozen=True)
class CaseStoreConfig:
    """Case store selection.

    Attributes:
        backend: Store implementation.
        database_url: Connection string, required for POSTGRES.
    """

    backend: CaseStoreBackend = CaseStoreBackend.MEMORY
    database_url: str | None = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.backend == CaseStoreBackend.POSTGRES and not self.database_url:
            raise ValueError("DATABASE_URL is required for the postgres case store")

    @classmethod
    def from_environment(cls) -> "CaseStoreConfig":
        """Create config from CASE_STORE_BACKEND and DATABASE_URL."""
        raw = os.environ.get("CASE_STORE_BACKEND", CaseStoreBackend.MEMORY.value)
        try:
            backend = CaseStoreBackend(raw.strip().lower())
        except ValueError as e:
            raise ValueError(
                f"CASE_STORE_BACKEND must be 'memory' or 'postgres', got {raw!r}"
            ) from e
        return cls(backend=backend, database_url=os.environ.get("DATABASE_URL"))


# Default production config
DEFAULT_VERIFICATION_CONFIG = VerificationWorkflowConfig()

# Testing config with small limits for unit tests
TEST_VERIFICATION_CONFIG = VerificationWorkflowConfig(
    max_message_length=50,
    max_reason_length=40,
    max_page_size=10,
)
