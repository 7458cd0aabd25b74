"""Dispute handler.

Two operations:
- open_dispute: the claimant escalates a REJECTED case to admin review.
- rule_dispute: an admin closes a DISPUTED case as RESOLVED with a final
  outcome. This is the only state machine action an admin may take and
  the only way a rejected claim can still end VERIFIED.

RESOLVED is terminal; disputes cannot be reopened.
"""

from __future__ import annotations

from uuid import UUID

from reunite.application.ports.notification_dispatcher import (
    CaseNotification,
    NotificationKind,
)
from reunite.application.services.case_workflow_service import CaseWorkflowService
from reunite.domain.models.identity import CallerIdentity
from reunite.domain.models.verification_case import (
    DecisionOutcome,
    DisputeRuling,
    VerificationCase,
)
from reunite.domain.services.case_state_machine import (
    CaseEvent,
    apply_dispute,
    apply_ruling,
    check_transition,
    ruling_event,
)


class DisputeService(CaseWorkflowService):
    """Opens and rules on disputes."""

    async def open_dispute(
        self,
        case_id: UUID,
        caller: CallerIdentity,
        reason: str,
    ) -> VerificationCase:
        """Escalate a rejected case to admin review.

        Raises:
            UnauthorizedError: If the caller is not the claimant.
            InvalidTransitionError: If the case is not REJECTED or was
                already disputed.
            ReasonRequiredError: If the reason is empty or too long.
            VersionConflictError: If someone already acted on the case.
            CaseNotFoundError: If the case does not exist.
        """
        log = self._log_operation("open_dispute", case_id=str(case_id))
        case = await self._store.get(case_id)
        role = self._resolver.resolve(caller, case)

        check_transition(case, CaseEvent.OPEN_DISPUTE, role)
        text = self._require_reason(case.id, "open dispute", reason, required=True)
        log.info("dispute_opening_started", version=case.version)

        updated = await self._swap(
            log,
            case,
            lambda current: apply_dispute(current, role, text),
            "open_dispute",
        )
        self._record_transition(CaseEvent.OPEN_DISPUTE)
        log.info("dispute_opened", version=updated.version)

        await self._notify(
            log,
            CaseNotification(
                kind=NotificationKind.DISPUTE_OPENED,
                case_id=updated.id,
                recipient=updated.counterparty(role),
                status=updated.status,
                summary=(
                    f"{updated.claimant.display_name} disputed your decision "
                    f"on {updated.pet.name}"
                ),
            ),
        )
        return updated

    async def rule_dispute(
        self,
        case_id: UUID,
        caller: CallerIdentity,
        outcome: DecisionOutcome,
        reason: str,
    ) -> VerificationCase:
        """Close a disputed case with the admin's final ruling.

        Args:
            case_id: The disputed case.
            caller: The authenticated caller (must resolve to admin).
            outcome: VERIFIED overturns the rejection, REJECTED upholds it.
            reason: Explanation shown to both parties.

        Returns:
            The RESOLVED case carrying the ruling.

        Raises:
            UnauthorizedError: If the caller is not an admin, or is a party.
            InvalidTransitionError: If the case is not DISPUTED.
            ReasonRequiredError: If the reason is empty or too long.
            VersionConflictError: If someone already acted on the case.
            CaseNotFoundError: If the case does not exist.
        """
        log = self._log_operation(
            "rule_dispute", case_id=str(case_id), outcome=outcome.value
        )
        case = await self._store.get(case_id)
        role = self._resolver.resolve(caller, case)

        event = ruling_event(outcome)
        check_transition(case, event, role)
        text = self._require_reason(case.id, "rule on dispute", reason, required=True)
        ruling = DisputeRuling(
            outcome=outcome,
            reason=text,
            decided_at=self._time.now(),
            ruled_by=caller.normalized_email,
        )
        log.info("dispute_ruling_started", version=case.version)

        updated = await self._swap(
            log,
            case,
            lambda current: apply_ruling(current, role, ruling),
            "rule_dispute",
        )
        self._record_transition(event)
        log.info(
            "dispute_ruled",
            resolved_outcome=outcome.value,
            version=updated.version,
        )

        for recipient in (updated.claimant, updated.finder):
            await self._notify(
                log,
                CaseNotification(
                    kind=NotificationKind.DISPUTE_RULED,
                    case_id=updated.id,
                    recipient=recipient,
                    status=updated.status,
                    summary=(
                        f"The dispute on {updated.pet.name} was resolved "
                        f"as {outcome.value}"
                    ),
                ),
            )
        if outcome == DecisionOutcome.VERIFIED:
            await self._mark_reunited(log, updated)
        return updated
