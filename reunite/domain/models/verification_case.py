"""Verification case domain model.

This module defines the root entity of the ownership verification
workflow: one finder, one claimant and one pet snapshot, together with
the evidence, decision, dispute and chat records that accumulate as the
two parties (and, for disputes, an admin) act on it.

Status lifecycle:
    PENDING -> VERIFIED (terminal)
    PENDING -> REJECTED -> DISPUTED -> RESOLVED (terminal, carries outcome)

The transition table itself lives in
``reunite.domain.services.case_state_machine``; this module only holds
the data and its structural invariants.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID

from reunite.domain.models.evidence import Evidence, VerificationMethod
from reunite.domain.models.identity import CaseRole, PartyIdentity
from reunite.domain.models.pet_snapshot import PetSnapshot


class CaseStatus(Enum):
    """Status of a verification case.

    States:
        PENDING: Initial state; evidence and the finder's decision happen here.
        VERIFIED: The finder approved the claim (terminal).
        REJECTED: The finder rejected the claim; the claimant may dispute.
        DISPUTED: The claimant escalated the rejection to an admin.
        RESOLVED: An admin ruled on the dispute (terminal, carries outcome).
    """

    PENDING = "PENDING"
    VERIFIED = "VERIFIED"
    REJECTED = "REJECTED"
    DISPUTED = "DISPUTED"
    RESOLVED = "RESOLVED"

    def is_terminal(self) -> bool:
        """Check whether no further transition can leave this status."""
        return self in TERMINAL_STATUSES

    def is_chat_open(self) -> bool:
        """Check whether the parties may still post messages."""
        return self in CHAT_OPEN_STATUSES


TERMINAL_STATUSES: frozenset[CaseStatus] = frozenset(
    {CaseStatus.VERIFIED, CaseStatus.RESOLVED}
)

# Chat is writable until the case reaches VERIFIED or RESOLVED
CHAT_OPEN_STATUSES: frozenset[CaseStatus] = frozenset(
    {CaseStatus.PENDING, CaseStatus.REJECTED, CaseStatus.DISPUTED}
)


class DecisionOutcome(Enum):
    """Outcome of a finder decision or an admin ruling."""

    VERIFIED = "VERIFIED"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class Decision:
    """The finder's ruling on submitted evidence.

    Attributes:
        outcome: VERIFIED or REJECTED.
        reason: Explanation shown to the claimant.
        decided_at: When the decision was recorded.
        attachments: Optional finder-side references (photos, notes).
    """

    outcome: DecisionOutcome
    reason: str
    decided_at: datetime
    attachments: tuple[str, ...] = field(default=())


@dataclass(frozen=True)
class DisputeRuling:
    """An admin's final ruling on a disputed case.

    Attributes:
        outcome: VERIFIED overturns the rejection, REJECTED upholds it.
        reason: Explanation shown to both parties.
        decided_at: When the ruling was recorded.
        ruled_by: Email of the admin who ruled.
    """

    outcome: DecisionOutcome
    reason: str
    decided_at: datetime
    ruled_by: str


@dataclass(frozen=True)
class ChatMessage:
    """One entry of a case's append-only chat.

    Attributes:
        sender_role: FINDER or CLAIMANT.
        sender: Identity of the sender at posting time.
        body: Message text.
        sent_at: When the store accepted the message.
    """

    sender_role: CaseRole
    sender: PartyIdentity
    body: str
    sent_at: datetime


@dataclass(frozen=True, eq=True)
class VerificationCase:
    """A single ownership verification record.

    Instances are immutable; every change produces a new instance through
    the state machine engine and is persisted by a case store
    compare-and-swap, which also advances the version counters.

    Attributes:
        id: Unique case identifier.
        pet: Snapshot of the pet taken at creation.
        finder: Party who has or reported the animal.
        claimant: Party asserting ownership.
        verification_method: Kind of evidence expected from the claimant.
        status: Current lifecycle status.
        evidence: Claimant evidence, set at most once.
        decision: Finder decision, set at most once.
        dispute_reason: Claimant's reason for disputing, set at most once.
        dispute_ruling: Admin ruling, set at most once.
        chat_history: Messages in accepted order.
        version: Incremented on every successful mutation, 1 at creation.
        workflow_version: Version at which the workflow fields last changed.
        chat_version: Version at which the chat last changed.
        created_at: Creation timestamp (UTC).
        updated_at: Last mutation timestamp (UTC).
    """

    id: UUID
    pet: PetSnapshot
    finder: PartyIdentity
    claimant: PartyIdentity
    verification_method: VerificationMethod
    created_at: datetime
    updated_at: datetime
    status: CaseStatus = field(default=CaseStatus.PENDING)
    evidence: Evidence | None = field(default=None)
    decision: Decision | None = field(default=None)
    dispute_reason: str | None = field(default=None)
    dispute_ruling: DisputeRuling | None = field(default=None)
    chat_history: tuple[ChatMessage, ...] = field(default=())
    version: int = field(default=1)
    workflow_version: int = field(default=1)
    chat_version: int = field(default=1)

    def __post_init__(self) -> None:
        """Validate structural invariants."""
        if self.finder.normalized_email == self.claimant.normalized_email:
            raise ValueError("Finder and claimant must be different people")
        if self.version < 1:
            raise ValueError(f"Case version must be at least 1, got {self.version}")
        if not (1 <= self.workflow_version <= self.version):
            raise ValueError("workflow_version must be between 1 and version")
        if not (1 <= self.chat_version <= self.version):
            raise ValueError("chat_version must be between 1 and version")
        if (
            self.evidence is not None
            and self.evidence.method != self.verification_method
        ):
            raise ValueError(
                f"Evidence for {self.evidence.method.value} does not match "
                f"case method {self.verification_method.value}"
            )
        if self.status == CaseStatus.RESOLVED and self.dispute_ruling is None:
            raise ValueError("A RESOLVED case must carry a dispute ruling")

    @property
    def has_evidence(self) -> bool:
        return self.evidence is not None

    @property
    def resolved_outcome(self) -> DecisionOutcome | None:
        """Outcome embedded in a RESOLVED case, None otherwise."""
        if self.status != CaseStatus.RESOLVED or self.dispute_ruling is None:
            return None
        return self.dispute_ruling.outcome

    def party_role(self, email: str) -> CaseRole | None:
        """Return FINDER or CLAIMANT for a party email, None for strangers."""
        if self.finder.matches(email):
            return CaseRole.FINDER
        if self.claimant.matches(email):
            return CaseRole.CLAIMANT
        return None

    def counterparty(self, role: CaseRole) -> PartyIdentity:
        """Return the other party for FINDER or CLAIMANT."""
        if role == CaseRole.FINDER:
            return self.claimant
        if role == CaseRole.CLAIMANT:
            return self.finder
        raise ValueError(f"Role {role.value} has no counterparty")
