"""Evidence submission handler.

The claimant records their proof of ownership once, while the case is
PENDING. The payload is validated against the case's verification method
before anything is written; on success the finder is notified.

Failure modes:
- UnauthorizedError: caller is not the claimant
- InvalidTransitionError: case not PENDING, or evidence already submitted
- MalformedEvidenceError: payload does not match the verification method
- VersionConflictError: another actor changed the case in between
- CaseNotFoundError: unknown case id
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from reunite.application.ports.notification_dispatcher import (
    CaseNotification,
    NotificationKind,
)
from reunite.application.services.case_workflow_service import CaseWorkflowService
from reunite.domain.models.identity import CallerIdentity
from reunite.domain.models.verification_case import VerificationCase
from reunite.domain.services.case_state_machine import (
    CaseEvent,
    apply_evidence,
    check_transition,
)
from reunite.domain.services.evidence_validator import parse_evidence


class EvidenceSubmissionService(CaseWorkflowService):
    """Records claimant evidence on a verification case."""

    async def submit_evidence(
        self,
        case_id: UUID,
        caller: CallerIdentity,
        payload: Any,
    ) -> VerificationCase:
        """Validate and record the claimant's evidence.

        Args:
            case_id: The case to submit evidence for.
            caller: The authenticated caller.
            payload: Raw evidence object for the case's verification method.

        Returns:
            The case after the swap (still PENDING, evidence set).
        """
        log = self._log_operation("submit_evidence", case_id=str(case_id))
        case = await self._store.get(case_id)
        role = self._resolver.resolve(caller, case)

        check_transition(case, CaseEvent.SUBMIT_EVIDENCE, role)
        evidence = parse_evidence(case.verification_method, payload, case_id=case.id)
        log.info(
            "evidence_submission_started",
            method=case.verification_method.value,
            version=case.version,
        )

        updated = await self._swap(
            log,
            case,
            lambda current: apply_evidence(current, role, evidence),
            "submit_evidence",
        )
        self._record_transition(CaseEvent.SUBMIT_EVIDENCE)
        log.info("evidence_submitted", version=updated.version)

        await self._notify(
            log,
            CaseNotification(
                kind=NotificationKind.EVIDENCE_SUBMITTED,
                case_id=updated.id,
                recipient=updated.finder,
                status=updated.status,
                summary=(
                    f"{updated.claimant.display_name} submitted "
                    f"{updated.verification_method.value} evidence for {updated.pet.name}"
                ),
            ),
        )
        return updated
