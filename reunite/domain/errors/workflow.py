"""Base error for the verification workflow.

Every failure a workflow handler can surface derives from
VerificationWorkflowError and carries a stable ``code`` so that outer
layers can tell the failures apart without string matching.
"""

from __future__ import annotations

from typing import ClassVar
from uuid import UUID

from reunite.domain.exceptions import ReuniteError


class VerificationWorkflowError(ReuniteError):
    """Base error for verification case operations.

    Attributes:
        code: Stable machine-readable error code.
        case_id: The case the failed request targeted, when known.
    """

    code: ClassVar[str] = "workflow_error"

    def __init__(self, message: str, case_id: UUID | None = None) -> None:
        self.case_id = case_id
        super().__init__(message)
