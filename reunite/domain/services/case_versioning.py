"""Projection-scoped optimistic versioning for verification cases.

A case has two projections that different actors mutate independently:

- WORKFLOW: status, evidence, decision, dispute reason and ruling.
- CHAT: the chat history.

Every successful swap bumps ``version`` by one and stamps the touched
projection's revision (``workflow_version`` or ``chat_version``) with the
new version.

A WORKFLOW swap computed against ``expected_version`` is stale when the
workflow changed after that version. Two decisions computed from the same
read conflict; a chat append in between does not get in the way.

A CHAT swap is an append. Its mutator runs on the current case while the
store holds its lock, so it rebases onto the current chat history and
never loses a race to another append or to a status change. The mutator
re-checks what it depends on (the channel being open).

Both case store implementations route every mutation through
``swap_projection`` so the rule lives in one place.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from datetime import datetime
from enum import Enum

from reunite.domain.errors.concurrent_modification import VersionConflictError
from reunite.domain.models.verification_case import VerificationCase

CaseMutator = Callable[[VerificationCase], VerificationCase]


class CaseProjection(Enum):
    """The sub-fields of a case a mutation declares it touches."""

    WORKFLOW = "workflow"
    CHAT = "chat"


def projection_version(case: VerificationCase, projection: CaseProjection) -> int:
    """Version at which the projection last changed."""
    if projection == CaseProjection.CHAT:
        return case.chat_version
    return case.workflow_version


def check_expected_version(
    current: VerificationCase,
    expected_version: int,
    projection: CaseProjection,
    operation: str,
) -> None:
    """Reject a swap against a version the store never had, or a workflow
    swap computed from a stale read.

    Raises:
        VersionConflictError: If expected_version is ahead of the store, or
            the projection is WORKFLOW and changed after expected_version.
    """
    stale = (
        projection == CaseProjection.WORKFLOW
        and projection_version(current, projection) > expected_version
    )
    if expected_version > current.version or stale:
        raise VersionConflictError(
            case_id=current.id,
            expected_version=expected_version,
            current_version=current.version,
            operation=operation,
        )


def merge_projection(
    current: VerificationCase,
    mutated: VerificationCase,
    projection: CaseProjection,
    now: datetime,
) -> VerificationCase:
    """Copy the projection's fields from mutated onto current and bump versions."""
    new_version = current.version + 1
    if projection == CaseProjection.CHAT:
        if mutated.chat_history[: len(current.chat_history)] != current.chat_history:
            raise ValueError("Chat history is append-only")
        return replace(
            current,
            chat_history=mutated.chat_history,
            version=new_version,
            chat_version=new_version,
            updated_at=now,
        )
    return replace(
        current,
        status=mutated.status,
        evidence=mutated.evidence,
        decision=mutated.decision,
        dispute_reason=mutated.dispute_reason,
        dispute_ruling=mutated.dispute_ruling,
        version=new_version,
        workflow_version=new_version,
        updated_at=now,
    )


def swap_projection(
    current: VerificationCase,
    expected_version: int,
    mutator: CaseMutator,
    projection: CaseProjection,
    now: datetime,
    operation: str = "update",
) -> VerificationCase:
    """Validate, run the mutator on the current case and merge its result.

    Callers hold whatever lock serializes swaps for this case. Errors
    raised by the mutator propagate unchanged and leave nothing written.
    """
    check_expected_version(current, expected_version, projection, operation)
    mutated = mutator(current)
    return merge_projection(current, mutated, projection, now)
