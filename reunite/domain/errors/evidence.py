"""Evidence validation errors."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from reunite.domain.errors.workflow import VerificationWorkflowError

if TYPE_CHECKING:
    from reunite.domain.models.evidence import VerificationMethod


class MalformedEvidenceError(VerificationWorkflowError):
    """Raised when an evidence payload does not match the verification method.

    Attributes:
        method: The verification method the payload was checked against.
        problems: Every problem found, in field order.
    """

    code = "malformed_evidence"

    def __init__(
        self,
        method: VerificationMethod,
        problems: list[str],
        case_id: UUID | None = None,
    ) -> None:
        self.method = method
        self.problems = list(problems)
        super().__init__(
            f"Evidence does not match {method.value}: {'; '.join(self.problems)}",
            case_id=case_id,
        )
