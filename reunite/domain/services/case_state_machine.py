"""Verification case state machine.

The transition table below is the single authority on how a case moves
between statuses. Handlers never set ``status`` themselves; they call the
apply functions in this module, which check the acting role, the
current status and the guard before producing the next case value.

Transition table:
    PENDING  + SUBMIT_EVIDENCE (claimant, evidence unset)   -> PENDING
    PENDING  + APPROVE         (finder, evidence set)       -> VERIFIED
    PENDING  + REJECT          (finder, evidence set)       -> REJECTED
    REJECTED + OPEN_DISPUTE    (claimant, no dispute yet)   -> DISPUTED
    DISPUTED + RULE_APPROVE    (admin)                      -> RESOLVED(VERIFIED)
    DISPUTED + RULE_UPHOLD     (admin)                      -> RESOLVED(REJECTED)

Check order is role first, then status, then guard. A wrong actor is
always UnauthorizedError, whatever the status.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from reunite.domain.errors.authorization import UnauthorizedError
from reunite.domain.errors.state_transition import InvalidTransitionError
from reunite.domain.models.evidence import Evidence
from reunite.domain.models.identity import CaseRole
from reunite.domain.models.verification_case import (
    CaseStatus,
    Decision,
    DecisionOutcome,
    DisputeRuling,
    VerificationCase,
)


class CaseEvent(Enum):
    """An explicit actor action against the state machine."""

    SUBMIT_EVIDENCE = "submit_evidence"
    APPROVE = "approve"
    REJECT = "reject"
    OPEN_DISPUTE = "open_dispute"
    RULE_APPROVE = "rule_approve"
    RULE_UPHOLD = "rule_uphold"


@dataclass(frozen=True)
class Transition:
    """One row of the transition table."""

    source: CaseStatus
    event: CaseEvent
    actor: CaseRole
    target: CaseStatus


TRANSITION_TABLE: tuple[Transition, ...] = (
    Transition(CaseStatus.PENDING, CaseEvent.SUBMIT_EVIDENCE, CaseRole.CLAIMANT, CaseStatus.PENDING),
    Transition(CaseStatus.PENDING, CaseEvent.APPROVE, CaseRole.FINDER, CaseStatus.VERIFIED),
    Transition(CaseStatus.PENDING, CaseEvent.REJECT, CaseRole.FINDER, CaseStatus.REJECTED),
    Transition(CaseStatus.REJECTED, CaseEvent.OPEN_DISPUTE, CaseRole.CLAIMANT, CaseStatus.DISPUTED),
    Transition(CaseStatus.DISPUTED, CaseEvent.RULE_APPROVE, CaseRole.ADMIN, CaseStatus.RESOLVED),
    Transition(CaseStatus.DISPUTED, CaseEvent.RULE_UPHOLD, CaseRole.ADMIN, CaseStatus.RESOLVED),
)

_TRANSITIONS: dict[tuple[CaseStatus, CaseEvent], Transition] = {
    (t.source, t.event): t for t in TRANSITION_TABLE
}

EVENT_ACTORS: dict[CaseEvent, CaseRole] = {t.event: t.actor for t in TRANSITION_TABLE}

# Human-readable action names used in error messages and logs
EVENT_ACTIONS: dict[CaseEvent, str] = {
    CaseEvent.SUBMIT_EVIDENCE: "submit evidence",
    CaseEvent.APPROVE: "decide",
    CaseEvent.REJECT: "decide",
    CaseEvent.OPEN_DISPUTE: "open dispute",
    CaseEvent.RULE_APPROVE: "rule on dispute",
    CaseEvent.RULE_UPHOLD: "rule on dispute",
}


def decision_event(outcome: DecisionOutcome) -> CaseEvent:
    """Map a finder outcome to its event."""
    return CaseEvent.APPROVE if outcome == DecisionOutcome.VERIFIED else CaseEvent.REJECT


def ruling_event(outcome: DecisionOutcome) -> CaseEvent:
    """Map an admin ruling outcome to its event."""
    return (
        CaseEvent.RULE_APPROVE
        if outcome == DecisionOutcome.VERIFIED
        else CaseEvent.RULE_UPHOLD
    )


def _status_reason(status: CaseStatus, event: CaseEvent) -> str:
    """Explain why an event is not listed for a status."""
    if status == CaseStatus.RESOLVED:
        return "dispute already ruled on; the case is closed"
    if event in (CaseEvent.RULE_APPROVE, CaseEvent.RULE_UPHOLD):
        return "case is not under dispute"
    if event == CaseEvent.OPEN_DISPUTE:
        if status == CaseStatus.DISPUTED:
            return "case already disputed"
        if status == CaseStatus.VERIFIED:
            return "case was verified; only a rejected case can be disputed"
        return "only a rejected case can be disputed"
    if status == CaseStatus.DISPUTED:
        return "case already decided and is under dispute"
    return "case already decided"


def _guard_reason(case: VerificationCase, event: CaseEvent) -> str | None:
    """Return the failed guard's reason, or None if the guard holds."""
    if event == CaseEvent.SUBMIT_EVIDENCE and case.has_evidence:
        return "evidence already submitted"
    if event in (CaseEvent.APPROVE, CaseEvent.REJECT):
        if case.decision is not None:
            return "case already decided"
        if not case.has_evidence:
            return "no evidence submitted yet"
    if event == CaseEvent.OPEN_DISPUTE and case.dispute_reason is not None:
        return "case already disputed"
    if (
        event in (CaseEvent.RULE_APPROVE, CaseEvent.RULE_UPHOLD)
        and case.dispute_ruling is not None
    ):
        return "dispute already ruled on"
    return None


def check_transition(
    case: VerificationCase, event: CaseEvent, role: CaseRole
) -> Transition:
    """Validate an event against the table without mutating anything.

    Args:
        case: The case as currently stored.
        event: The attempted event.
        role: The caller's resolved role for this case.

    Returns:
        The matching table row.

    Raises:
        UnauthorizedError: If the role is not the event's actor.
        InvalidTransitionError: If the status or guard does not allow it.
    """
    action = EVENT_ACTIONS[event]
    if role != EVENT_ACTORS[event]:
        raise UnauthorizedError(case.id, action, role)

    transition = _TRANSITIONS.get((case.status, event))
    if transition is None:
        raise InvalidTransitionError(
            case.id, case.status, action, _status_reason(case.status, event)
        )

    reason = _guard_reason(case, event)
    if reason is not None:
        raise InvalidTransitionError(case.id, case.status, action, reason)
    return transition


def available_events(case: VerificationCase, role: CaseRole) -> list[CaseEvent]:
    """List the events the given role could fire right now."""
    events: list[CaseEvent] = []
    for event in CaseEvent:
        if EVENT_ACTORS[event] != role:
            continue
        transition = _TRANSITIONS.get((case.status, event))
        if transition is not None and _guard_reason(case, event) is None:
            events.append(event)
    return events


def apply_evidence(
    case: VerificationCase, role: CaseRole, evidence: Evidence
) -> VerificationCase:
    """Record the claimant's evidence; status stays PENDING."""
    transition = check_transition(case, CaseEvent.SUBMIT_EVIDENCE, role)
    return replace(case, status=transition.target, evidence=evidence)


def apply_decision(
    case: VerificationCase, role: CaseRole, decision: Decision
) -> VerificationCase:
    """Record the finder's decision and move to VERIFIED or REJECTED."""
    transition = check_transition(case, decision_event(decision.outcome), role)
    return replace(case, status=transition.target, decision=decision)


def apply_dispute(
    case: VerificationCase, role: CaseRole, reason: str
) -> VerificationCase:
    """Record the claimant's dispute reason and move to DISPUTED."""
    transition = check_transition(case, CaseEvent.OPEN_DISPUTE, role)
    return replace(case, status=transition.target, dispute_reason=reason)


def apply_ruling(
    case: VerificationCase, role: CaseRole, ruling: DisputeRuling
) -> VerificationCase:
    """Record the admin ruling and move to RESOLVED."""
    transition = check_transition(case, ruling_event(ruling.outcome), role)
    return replace(case, status=transition.target, dispute_ruling=ruling)

