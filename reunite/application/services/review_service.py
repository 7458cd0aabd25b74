"""Review handler.

The finder approves or rejects the claimant's evidence. Approval closes
the case as VERIFIED and marks the source listing reunited; rejection
moves it to REJECTED, from where the claimant may dispute. Either way the
claimant is notified.

A rejection must carry a reason; the claimant needs it to decide whether
to dispute.
"""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from reunite.application.ports.notification_dispatcher import (
    CaseNotification,
    NotificationKind,
)
from reunite.application.services.case_workflow_service import CaseWorkflowService
from reunite.domain.models.identity import CallerIdentity
from reunite.domain.models.verification_case import (
    Decision,
    DecisionOutcome,
    VerificationCase,
)
from reunite.domain.services.case_state_machine import (
    apply_decision,
    check_transition,
    decision_event,
)


class ReviewService(CaseWorkflowService):
    """Records the finder's decision on a verification case."""

    async def decide(
        self,
        case_id: UUID,
        caller: CallerIdentity,
        outcome: DecisionOutcome,
        reason: str | None = None,
        attachments: Sequence[str] = (),
    ) -> VerificationCase:
        """Approve or reject the submitted evidence.

        Args:
            case_id: The case to decide.
            caller: The authenticated caller (must be the finder).
            outcome: VERIFIED or REJECTED.
            reason: Explanation for the claimant; required for REJECTED.
            attachments: Optional finder-side references.

        Returns:
            The case after the swap (VERIFIED or REJECTED).

        Raises:
            UnauthorizedError: If the caller is not the finder.
            InvalidTransitionError: If not PENDING or no evidence yet.
            ReasonRequiredError: If a rejection has no reason or it is too long.
            VersionConflictError: If someone already acted on the case.
            CaseNotFoundError: If the case does not exist.
        """
        log = self._log_operation(
            "decide", case_id=str(case_id), outcome=outcome.value
        )
        case = await self._store.get(case_id)
        role = self._resolver.resolve(caller, case)

        event = decision_event(outcome)
        check_transition(case, event, role)
        text = self._require_reason(
            case.id, "decide", reason, required=outcome == DecisionOutcome.REJECTED
        )
        decision = Decision(
            outcome=outcome,
            reason=text,
            decided_at=self._time.now(),
            attachments=tuple(a.strip() for a in attachments if a.strip()),
        )
        log.info("decision_started", version=case.version)

        updated = await self._swap(
            log,
            case,
            lambda current: apply_decision(current, role, decision),
            "decide",
        )
        self._record_transition(event)
        log.info("decision_recorded", status=updated.status.value, version=updated.version)

        await self._notify(
            log,
            CaseNotification(
                kind=NotificationKind.DECISION_RECORDED,
                case_id=updated.id,
                recipient=updated.counterparty(role),
                status=updated.status,
                summary=(
                    f"{updated.finder.display_name} marked your claim for "
                    f"{updated.pet.name} as {outcome.value}"
                ),
            ),
        )
        if outcome == DecisionOutcome.VERIFIED:
            await self._mark_reunited(log, updated)
        return updated
