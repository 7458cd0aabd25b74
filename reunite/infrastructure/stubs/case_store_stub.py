"""In-memory case store.

Stub implementation of CaseStoreProtocol for development and testing.
Swaps are serialized by a single asyncio.Lock; reads return the stored
immutable instance, so a reader always sees a complete case at some
version. It is NOT suitable for production use: nothing survives a
restart.
"""

from __future__ import annotations

import asyncio
from uuid import UUID

from reunite.application.ports.case_store import CaseStoreProtocol
from reunite.application.ports.time_authority import TimeAuthorityProtocol
from reunite.application.services.time_authority_service import SystemTimeAuthority
from reunite.domain.errors.case import CaseAlreadyExistsError, CaseNotFoundError
from reunite.domain.models.identity import normalize_email
from reunite.domain.models.verification_case import CaseStatus, VerificationCase
from reunite.domain.services.case_versioning import (
    CaseMutator,
    CaseProjection,
    swap_projection,
)


class CaseStoreStub(CaseStoreProtocol):
    """In-memory implementation of CaseStoreProtocol.

    Attributes:
        _cases: Dictionary mapping case id to the current VerificationCase.
    """

    def __init__(self, time_authority: TimeAuthorityProtocol | None = None) -> None:
        """Initialize the stub with empty storage."""
        self._cases: dict[UUID, VerificationCase] = {}
        self._time = time_authority or SystemTimeAuthority()
        # Lock for atomic compare-and-swap
        self._cas_lock = asyncio.Lock()

    async def create(self, case: VerificationCase) -> UUID:
        async with self._cas_lock:
            if case.id in self._cases:
                raise CaseAlreadyExistsError(case.id)
            self._cases[case.id] = case
        return case.id

    async def get(self, case_id: UUID) -> VerificationCase:
        case = self._cases.get(case_id)
        if case is None:
            raise CaseNotFoundError(case_id)
        return case

    async def compare_and_swap(
        self,
        case_id: UUID,
        expected_version: int,
        mutator: CaseMutator,
        projection: CaseProjection = CaseProjection.WORKFLOW,
    ) -> VerificationCase:
        """Atomic compare-and-swap under the store lock.

        The check, the mutator call and the write all happen while the
        lock is held, so two swaps computed from the same read can never
        both succeed for the same projection.
        """
        async with self._cas_lock:
            current = self._cases.get(case_id)
            if current is None:
                raise CaseNotFoundError(case_id)
            updated = swap_projection(
                current,
                expected_version,
                mutator,
                projection,
                self._time.now(),
                operation=f"{projection.value}_update",
            )
            self._cases[case_id] = updated
            return updated

    async def list_for_party(
        self,
        email: str,
        status: CaseStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[VerificationCase], int]:
        key = normalize_email(email)
        matching = [
            c
            for c in self._cases.values()
            if key in (c.finder.normalized_email, c.claimant.normalized_email)
            and (status is None or c.status == status)
        ]
        # Newest first
        matching.sort(key=lambda c: c.created_at, reverse=True)
        return matching[offset : offset + limit], len(matching)

    async def list_by_status(
        self,
        status: CaseStatus,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[VerificationCase], int]:
        matching = [c for c in self._cases.values() if c.status == status]
        # Oldest first, the order an admin works the queue
        matching.sort(key=lambda c: c.created_at)
        return matching[offset : offset + limit], len(matching)

    async def create_unless_open(
        self, case: VerificationCase
    ) -> tuple[VerificationCase, bool]:
        """Lookup and insert under the store lock."""
        async with self._cas_lock:
            if case.id in self._cases:
                raise CaseAlreadyExistsError(case.id)
            existing = self._open_case(case.pet.listing_id, case.claimant.email)
            if existing is not None:
                return existing, False
            self._cases[case.id] = case
        return case, True

    def _open_case(
        self, listing_id: str | None, claimant_email: str
    ) -> VerificationCase | None:
        if listing_id is None:
            return None
        matching = [
            c
            for c in self._cases.values()
            if c.pet.listing_id == listing_id
            and c.claimant.matches(claimant_email)
            and not c.status.is_terminal()
        ]
        if not matching:
            return None
        return max(matching, key=lambda c: c.created_at)

    def clear(self) -> None:
        """Clear all stored cases (for testing)."""
        self._cases.clear()
