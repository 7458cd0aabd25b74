"""State transition errors for the verification state machine."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from reunite.domain.errors.workflow import VerificationWorkflowError

if TYPE_CHECKING:
    from reunite.domain.models.verification_case import CaseStatus


class InvalidTransitionError(VerificationWorkflowError):
    """Raised when an action is not legal in the case's current state.

    This covers both events that the transition table does not list for
    the current status and guard failures such as "evidence already
    submitted" or "case already decided". The case is left untouched.

    Attributes:
        case_id: The case that was targeted.
        current_status: Status of the case when the action was rejected.
        action: The attempted action.
        reason: Specific, user-facing reason for the rejection.
    """

    code = "invalid_transition"

    def __init__(
        self,
        case_id: UUID,
        current_status: CaseStatus,
        action: str,
        reason: str,
    ) -> None:
        self.current_status = current_status
        self.action = action
        self.reason = reason
        super().__init__(
            f"Cannot {action} case {case_id} in status "
            f"{current_status.value}: {reason}",
            case_id=case_id,
        )
