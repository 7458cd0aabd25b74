"""Case store port.

Defines the storage contract for verification cases. Every mutation in
the system goes through compare_and_swap; there is no field-level write
API. Implementations must serialize swaps per case so that readers
always see a fully formed case at some consistent version.

Developer Golden Rules:
1. CAS FOR EVERYTHING - handlers read, decide, then swap against the version they read
2. FAIL LOUD - the store raises typed errors, never returns partial results
3. NO DELETES - cases are kept forever for audit
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from reunite.domain.models.verification_case import CaseStatus, VerificationCase
from reunite.domain.services.case_versioning import CaseMutator, CaseProjection


class CaseStoreProtocol(Protocol):
    """Protocol for verification case persistence.

    Implementations: CaseStoreStub (in-memory) and PostgresCaseStore.

    Methods:
        create: Store a new case
        get: Retrieve a case by ID
        compare_and_swap: The single mutation entry point
        list_for_party: Cases where an email is finder or claimant
        list_by_status: Cases in a given status (admin queue)
        create_unless_open: Intake insert that returns an open duplicate instead
    """

    async def create(self, case: VerificationCase) -> UUID:
        """Store a new case.

        Args:
            case: The case to store, at version 1.

        Returns:
            The id of the stored case.

        Raises:
            CaseAlreadyExistsError: If case.id already exists.
        """
        ...

    async def get(self, case_id: UUID) -> VerificationCase:
        """Retrieve a case by ID.

        Raises:
            CaseNotFoundError: If no case exists for case_id.
        """
        ...

    async def compare_and_swap(
        self,
        case_id: UUID,
        expected_version: int,
        mutator: CaseMutator,
        projection: CaseProjection = CaseProjection.WORKFLOW,
    ) -> VerificationCase:
        """Atomically apply a mutation computed against expected_version.

        The mutator receives the current case and returns the mutated
        case. Only the fields of the declared projection are kept; the
        store bumps version, stamps updated_at and the projection's
        revision. Exceptions raised by the mutator propagate unchanged and
        nothing is written.

        Args:
            case_id: The case to mutate.
            expected_version: The version the caller read.
            mutator: Function producing the next case value.
            projection: The sub-fields the mutation touches.

        Returns:
            The case as stored after the swap.

        Raises:
            CaseNotFoundError: If no case exists for case_id.
            VersionConflictError: If the projection changed after
                expected_version.
        """
        ...

    async def list_for_party(
        self,
        email: str,
        status: CaseStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[VerificationCase], int]:
        """List cases where email is the finder or the claimant.

        Ordered by created_at descending.

        Returns:
            Tuple of (cases page, total matching count).
        """
        ...

    async def list_by_status(
        self,
        status: CaseStatus,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[VerificationCase], int]:
        """List cases in a status, oldest first.

        Returns:
            Tuple of (cases page, total matching count).
        """
        ...

    async def create_unless_open(
        self, case: VerificationCase
    ) -> tuple[VerificationCase, bool]:
        """Store a new case unless its claimant already has an open one.

        A case is a duplicate when it has a source listing and the same
        claimant already has a PENDING, REJECTED or DISPUTED case for that
        listing. The lookup and the insert are atomic: of two concurrent
        calls for the same listing and claimant, exactly one creates.

        Returns:
            Tuple of (stored case, created). When created is False the
            stored case is the existing open one and nothing was written.

        Raises:
            CaseAlreadyExistsError: If case.id already exists.
        """
        ...
