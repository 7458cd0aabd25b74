"""Authorization errors for verification cases."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from reunite.domain.errors.workflow import VerificationWorkflowError

if TYPE_CHECKING:
    from reunite.domain.models.identity import CaseRole


class UnauthorizedError(VerificationWorkflowError):
    """Raised when the caller's role does not permit the requested action.

    Resolution fails closed: a caller who is neither a party of the case
    nor an admin is always rejected, and an admin is rejected for every
    finder or claimant action.

    Attributes:
        case_id: The case that was targeted.
        action: The attempted action (e.g. "decide", "post_message").
        role: The role the caller resolved to.
    """

    code = "unauthorized"

    def __init__(
        self,
        case_id: UUID | None,
        action: str,
        role: CaseRole,
        detail: str | None = None,
    ) -> None:
        self.action = action
        self.role = role
        message = detail or f"Role '{role.value}' may not perform '{action}'"
        super().__init__(message, case_id=case_id)
