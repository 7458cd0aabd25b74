"""Identity resolver.

Maps an authenticated caller to their role on one case. Pure lookup: no
store access, no mutation, no side effects. Every workflow handler
resolves first and fails closed on UNAUTHORIZED.

Resolution order:
1. Party membership by normalized email (FINDER or CLAIMANT)
2. The caller's admin claim (ADMIN)
3. Anyone else (UNAUTHORIZED)

Party membership wins over the admin claim, so an admin who is also a
party of a case acts on it as that party and cannot rule on it.
"""

from __future__ import annotations

from reunite.domain.errors.authorization import UnauthorizedError
from reunite.domain.models.identity import CallerIdentity, CaseRole
from reunite.domain.models.verification_case import VerificationCase


class IdentityResolver:
    """Resolves caller roles against verification cases."""

    def resolve(self, caller: CallerIdentity, case: VerificationCase) -> CaseRole:
        """Return the caller's role for the case."""
        party_role = case.party_role(caller.email)
        if party_role is not None:
            return party_role
        if caller.is_admin:
            return CaseRole.ADMIN
        return CaseRole.UNAUTHORIZED

    def require_reader(
        self, caller: CallerIdentity, case: VerificationCase, action: str = "view"
    ) -> CaseRole:
        """Resolve and reject callers who may not read the case.

        Raises:
            UnauthorizedError: If the caller is neither a party nor an admin.
        """
        role = self.resolve(caller, case)
        if role == CaseRole.UNAUTHORIZED:
            raise UnauthorizedError(case.id, action, role)
        return role

    def require_party(
        self, caller: CallerIdentity, case: VerificationCase, action: str
    ) -> CaseRole:
        """Resolve and reject callers who are not the finder or claimant.

        Raises:
            UnauthorizedError: For admins and strangers.
        """
        role = self.resolve(caller, case)
        if not role.is_party:
            raise UnauthorizedError(
                case.id,
                action,
                role,
                detail=f"Only the finder or claimant may {action}",
            )
        return role
