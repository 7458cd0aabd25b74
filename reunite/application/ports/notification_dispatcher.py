"""Notification dispatcher port.

Protocol for telling a party that something happened on their case.
Delivery (email, push, in-app) is someone else's job; the workflow only
hands over the notification after a successful mutation.

Developer Golden Rules:
1. Fire-and-forget - never block or fail the workflow action
2. Dispatch after the swap succeeded, never before
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol
from uuid import UUID

from reunite.domain.models.identity import PartyIdentity
from reunite.domain.models.verification_case import CaseStatus


class NotificationKind(Enum):
    """What happened on the case."""

    EVIDENCE_SUBMITTED = "evidence_submitted"
    DECISION_RECORDED = "decision_recorded"
    DISPUTE_OPENED = "dispute_opened"
    DISPUTE_RULED = "dispute_ruled"


@dataclass(frozen=True)
class CaseNotification:
    """A single notification addressed to one party.

    Attributes:
        kind: What happened.
        case_id: The case it happened on.
        recipient: The party to notify.
        status: Case status after the action.
        summary: Short human-readable description.
    """

    kind: NotificationKind
    case_id: UUID
    recipient: PartyIdentity
    status: CaseStatus
    summary: str


class NotificationDispatcherProtocol(Protocol):
    """Protocol for handing notifications to the delivery collaborator."""

    async def dispatch(self, notification: CaseNotification) -> None:
        """Hand a notification over for delivery.

        Implementations may raise on delivery failure; callers log and
        continue.
        """
        ...
