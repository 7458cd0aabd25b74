"""Case lookup, channel and request validation errors."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from reunite.domain.errors.workflow import VerificationWorkflowError

if TYPE_CHECKING:
    from reunite.domain.models.verification_case import CaseStatus


class CaseNotFoundError(VerificationWorkflowError):
    """Raised when no case exists for the given id."""

    code = "not_found"

    def __init__(self, case_id: UUID) -> None:
        super().__init__(f"Verification case not found: {case_id}", case_id=case_id)


class CaseAlreadyExistsError(VerificationWorkflowError):
    """Raised when a store is asked to create a case whose id is taken."""

    code = "already_exists"

    def __init__(self, case_id: UUID) -> None:
        super().__init__(f"Verification case already exists: {case_id}", case_id=case_id)


class ChannelFrozenError(VerificationWorkflowError):
    """Raised when a message is posted after the case reached a frozen state.

    Attributes:
        status: The frozen status (VERIFIED or RESOLVED).
    """

    code = "channel_frozen"

    def __init__(self, case_id: UUID, status: CaseStatus) -> None:
        self.status = status
        super().__init__(
            f"Chat for case {case_id} is read-only since the case is {status.value}",
            case_id=case_id,
        )


class ReasonRequiredError(VerificationWorkflowError):
    """Raised when an action needs a reason and none (or too long) was given.

    Attributes:
        action: The action that required a reason.
    """

    code = "reason_required"

    def __init__(self, case_id: UUID | None, action: str, detail: str) -> None:
        self.action = action
        super().__init__(f"{action}: {detail}", case_id=case_id)


class InvalidMessageError(VerificationWorkflowError):
    """Raised when a chat message body is empty or too long."""

    code = "invalid_message"

    def __init__(self, case_id: UUID, detail: str) -> None:
        super().__init__(detail, case_id=case_id)
