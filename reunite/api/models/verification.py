"""Verification API request/response models.

Pydantic models for the /v1/verifications endpoints. Requests are
validated for shape here; workflow rules (who may act, which transition
is legal, whether evidence matches the method) are enforced by the
application services.

Developer Golden Rules:
1. VALIDATE EARLY - Pydantic handles schema validation
2. NO VERSIONS IN REQUESTS - callers never send a case version
3. RFC 7807 - every error body is a ProblemDetail
"""

from datetime import datetime
from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, Field, PlainSerializer

from reunite.domain.models.evidence import VerificationMethod
from reunite.domain.models.identity import CaseRole
from reunite.domain.models.verification_case import CaseStatus, DecisionOutcome

# Custom datetime serializer for ISO 8601 with Z suffix (Pydantic v2)
DateTimeWithZ = Annotated[
    datetime,
    PlainSerializer(
        lambda v: v.isoformat().replace("+00:00", "Z") if v else None, return_type=str
    ),
]


class PartyModel(BaseModel):
    """A finder or claimant."""

    display_name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, max_length=320)
    avatar_url: str | None = Field(default=None, max_length=2000)


class PetSnapshotModel(BaseModel):
    """Pet details copied onto the case at creation."""

    name: str = Field(..., min_length=1, max_length=200)
    species: str = Field(..., min_length=1, max_length=100)
    image_url: str | None = Field(default=None, max_length=2000)
    description: str = Field(default="", max_length=5000)
    last_known_location: str | None = Field(default=None, max_length=500)
    listing_id: str | None = Field(
        default=None,
        max_length=200,
        description="Source listing; an open case for the same listing and claimant is reused",
    )


class CreateCaseRequest(BaseModel):
    """Request to open a verification case."""

    pet: PetSnapshotModel
    finder: PartyModel
    claimant: PartyModel
    verification_method: VerificationMethod = Field(
        ...,
        description="Kind of evidence the claimant must provide",
    )


class SubmitEvidenceRequest(BaseModel):
    """Claimant evidence; the object shape depends on the verification method."""

    evidence: dict[str, Any] = Field(
        ...,
        description="Evidence object for the case's verification method",
    )


class DecisionRequest(BaseModel):
    """The finder's decision on submitted evidence."""

    outcome: DecisionOutcome
    reason: str | None = Field(
        default=None,
        description="Explanation for the claimant; required when rejecting",
    )
    attachments: list[str] = Field(default_factory=list, max_length=20)


class DisputeRequest(BaseModel):
    """The claimant's request for admin review of a rejection."""

    reason: str = Field(..., description="Why the rejection is wrong")


class RulingRequest(BaseModel):
    """An admin's final ruling on a dispute."""

    outcome: DecisionOutcome = Field(
        ...,
        description="VERIFIED overturns the rejection, REJECTED upholds it",
    )
    reason: str


class PostMessageRequest(BaseModel):
    """A chat message from the finder or the claimant."""

    body: str


class PartyResponse(BaseModel):
    display_name: str
    email: str
    avatar_url: str | None = None


class PetSnapshotResponse(BaseModel):
    name: str
    species: str
    image_url: str | None = None
    description: str = ""
    last_known_location: str | None = None
    listing_id: str | None = None


class DecisionResponse(BaseModel):
    outcome: DecisionOutcome
    reason: str
    decided_at: DateTimeWithZ
    attachments: list[str] = Field(default_factory=list)


class DisputeRulingResponse(BaseModel):
    outcome: DecisionOutcome
    reason: str
    decided_at: DateTimeWithZ
    ruled_by: str


class ChatMessageResponse(BaseModel):
    """One chat entry, attributed to its sender."""

    sender_role: CaseRole
    sender: PartyResponse
    body: str
    sent_at: DateTimeWithZ


class CaseResponse(BaseModel):
    """A verification case.

    Attributes:
        role: The caller's role on the case (single-case reads only).
        available_events: Events the caller could fire now (single-case reads only).
        resolved_outcome: Final outcome of a RESOLVED case.
        message_count: Number of chat entries; page them via /messages.
    """

    id: UUID
    status: CaseStatus
    verification_method: VerificationMethod
    pet: PetSnapshotResponse
    finder: PartyResponse
    claimant: PartyResponse
    evidence: dict[str, Any] | None = None
    decision: DecisionResponse | None = None
    dispute_reason: str | None = None
    dispute_ruling: DisputeRulingResponse | None = None
    resolved_outcome: DecisionOutcome | None = None
    message_count: int = Field(..., ge=0)
    version: int = Field(..., ge=1)
    created_at: DateTimeWithZ
    updated_at: DateTimeWithZ
    role: CaseRole | None = None
    available_events: list[str] | None = None


class CaseListResponse(BaseModel):
    cases: list[CaseResponse]
    total: int = Field(..., ge=0)
    offset: int = Field(..., ge=0)
    limit: int = Field(..., ge=1)


class MessageListResponse(BaseModel):
    messages: list[ChatMessageResponse]
    total: int = Field(..., ge=0)
    offset: int = Field(..., ge=0)
    limit: int = Field(..., ge=1)


class ProblemDetail(BaseModel):
    """RFC 7807 problem detail.

    Attributes:
        code: Stable workflow error code (e.g. "invalid_transition").
    """

    type: str
    title: str
    status: int
    detail: str
    instance: str
    code: str | None = None
