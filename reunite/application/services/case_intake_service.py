"""Case intake.

Opens a verification case between a finder and a claimant for one pet.
Called by the matching collaborator (or by either party through the API)
once two listings are judged to be the same animal.

A claimant who already has an open case for the same listing gets that
case back instead of a duplicate.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import uuid4

from reunite.application.ports.case_store import CaseStoreProtocol
from reunite.application.ports.time_authority import TimeAuthorityProtocol
from reunite.application.services.base import LoggingMixin
from reunite.application.services.identity_resolver import IdentityResolver
from reunite.domain.errors.authorization import UnauthorizedError
from reunite.domain.models.evidence import VerificationMethod
from reunite.domain.models.identity import CallerIdentity, CaseRole, PartyIdentity
from reunite.domain.models.pet_snapshot import PetSnapshot
from reunite.domain.models.verification_case import VerificationCase


@dataclass(frozen=True)
class CaseIntakeResult:
    """Outcome of create_case.

    Attributes:
        case: The new case, or the existing open duplicate.
        created: False when an existing case was returned.
    """

    case: VerificationCase
    created: bool


class CaseIntakeService(LoggingMixin):
    """Creates verification cases."""

    def __init__(
        self,
        case_store: CaseStoreProtocol,
        time_authority: TimeAuthorityProtocol,
        identity_resolver: IdentityResolver | None = None,
    ) -> None:
        self._store = case_store
        self._time = time_authority
        self._resolver = identity_resolver or IdentityResolver()
        self._init_logger()

    async def create_case(
        self,
        pet: PetSnapshot,
        finder: PartyIdentity,
        claimant: PartyIdentity,
        verification_method: VerificationMethod,
        requested_by: CallerIdentity | None = None,
    ) -> CaseIntakeResult:
        """Open a case, or return the claimant's open case for the listing.

        Args:
            pet: Snapshot of the pet, copied onto the case.
            finder: The party who has or reported the animal.
            claimant: The party asserting ownership.
            verification_method: The kind of evidence expected.
            requested_by: The API caller, when the request did not come
                from the trusted matching collaborator. Must be one of the
                two parties or an admin.

        Returns:
            CaseIntakeResult with the case and whether it was created.

        Raises:
            ValueError: If finder and claimant are the same person.
            UnauthorizedError: If requested_by is neither party nor admin.
        """
        log = self._log_operation(
            "create_case",
            method=verification_method.value,
            listing_id=pet.listing_id,
        )
        now = self._time.now()
        case = VerificationCase(
            id=uuid4(),
            pet=pet,
            finder=finder,
            claimant=claimant,
            verification_method=verification_method,
            created_at=now,
            updated_at=now,
        )

        if requested_by is not None:
            role = self._resolver.resolve(requested_by, case)
            if role == CaseRole.UNAUTHORIZED:
                log.warning("case_creation_rejected_unauthorized")
                raise UnauthorizedError(
                    None,
                    "create case",
                    role,
                    detail="Only the finder, the claimant or an admin may open a case",
                )

        stored, created = await self._store.create_unless_open(case)
        if not created:
            log.info(
                "case_duplicate_returned",
                case_id=str(stored.id),
                status=stored.status.value,
            )
            return CaseIntakeResult(case=stored, created=False)

        log.info("case_created", case_id=str(case.id))
        return CaseIntakeResult(case=case, created=True)
