"""Case queries.

Read-only access to cases: one case with the caller's role and available
actions, the caller's own cases, and the admin dispute queue.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from reunite.application.ports.case_store import CaseStoreProtocol
from reunite.application.services.base import LoggingMixin
from reunite.application.services.identity_resolver import IdentityResolver
from reunite.config.verification_config import (
    DEFAULT_VERIFICATION_CONFIG,
    VerificationWorkflowConfig,
)
from reunite.domain.errors.authorization import UnauthorizedError
from reunite.domain.models.identity import CallerIdentity, CaseRole
from reunite.domain.models.verification_case import CaseStatus, VerificationCase
from reunite.domain.services.case_state_machine import CaseEvent, available_events


@dataclass(frozen=True)
class CaseView:
    """A case as seen by one caller.

    Attributes:
        case: The case.
        role: The caller's role on it.
        available_events: Events the caller could fire right now.
    """

    case: VerificationCase
    role: CaseRole
    available_events: tuple[CaseEvent, ...]


@dataclass(frozen=True)
class CasePage:
    """One page of a case listing."""

    cases: tuple[VerificationCase, ...]
    total: int
    offset: int
    limit: int


class CaseQueryService(LoggingMixin):
    """Read-only case lookups."""

    def __init__(
        self,
        case_store: CaseStoreProtocol,
        identity_resolver: IdentityResolver | None = None,
        config: VerificationWorkflowConfig | None = None,
    ) -> None:
        self._store = case_store
        self._resolver = identity_resolver or IdentityResolver()
        self._config = config or DEFAULT_VERIFICATION_CONFIG
        self._init_logger()

    def _page_size(self, limit: int | None, offset: int) -> int:
        if offset < 0:
            raise ValueError(f"offset must be non-negative, got {offset}")
        size = self._config.max_page_size if limit is None else limit
        if size < 1:
            raise ValueError(f"limit must be positive, got {size}")
        return min(size, self._config.max_page_size)

    async def get_case(self, case_id: UUID, caller: CallerIdentity) -> CaseView:
        """Fetch one case for a party or an admin.

        Raises:
            CaseNotFoundError: If the case does not exist.
            UnauthorizedError: If the caller may not read it.
        """
        case = await self._store.get(case_id)
        role = self._resolver.require_reader(caller, case)
        return CaseView(
            case=case,
            role=role,
            available_events=tuple(available_events(case, role)),
        )

    async def list_cases_for_user(
        self,
        caller: CallerIdentity,
        status: CaseStatus | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> CasePage:
        """List cases where the caller is the finder or the claimant."""
        size = self._page_size(limit, offset)
        cases, total = await self._store.list_for_party(
            caller.email, status=status, limit=size, offset=offset
        )
        self._log_operation("list_cases_for_user").debug(
            "cases_listed", total=total, returned=len(cases)
        )
        return CasePage(cases=tuple(cases), total=total, offset=offset, limit=size)

    async def list_cases_by_status(
        self,
        caller: CallerIdentity,
        status: CaseStatus = CaseStatus.DISPUTED,
        limit: int | None = None,
        offset: int = 0,
    ) -> CasePage:
        """Admin queue: cases in a status, oldest first.

        Raises:
            UnauthorizedError: If the caller has no admin claim.
        """
        if not caller.is_admin:
            self._log_operation("list_cases_by_status").warning(
                "queue_access_rejected", status=status.value
            )
            raise UnauthorizedError(
                None,
                "list cases by status",
                CaseRole.UNAUTHORIZED,
                detail="Only admins may list the case queue",
            )
        size = self._page_size(limit, offset)
        cases, total = await self._store.list_by_status(
            status, limit=size, offset=offset
        )
        return CasePage(cases=tuple(cases), total=total, offset=offset, limit=size)
