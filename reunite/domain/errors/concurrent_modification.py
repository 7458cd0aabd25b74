"""Concurrent modification error for optimistic compare-and-swap.

Raised by case stores when a mutation was computed against a version of
the case that is no longer current for the projection it touches.
"""

from __future__ import annotations

from uuid import UUID

from reunite.domain.errors.workflow import VerificationWorkflowError


class VersionConflictError(VerificationWorkflowError):
    """Raised when a compare-and-swap loses the race to another actor.

    Workflow handlers surface this to the caller as "someone already
    acted" instead of retrying, since a blind retry could apply a decision
    the user no longer intends. Only chat appends retry on it.

    Attributes:
        case_id: UUID of the case that was being modified.
        expected_version: The version the mutation was computed against.
        current_version: The version found in the store.
        operation: Description of the operation that failed.
    """

    code = "version_conflict"

    def __init__(
        self,
        case_id: UUID,
        expected_version: int,
        current_version: int,
        operation: str = "update",
    ) -> None:
        self.expected_version = expected_version
        self.current_version = current_version
        self.operation = operation
        super().__init__(
            f"Concurrent modification detected for case {case_id} during "
            f"{operation}: expected version {expected_version}, found "
            f"{current_version}. Someone already acted on this case.",
            case_id=case_id,
        )
