"""PostgreSQL persistence adapters."""

from reunite.infrastructure.adapters.persistence.postgres_case_store import (
    PostgresCaseStore,
)

__all__: list[str] = ["PostgresCaseStore"]
