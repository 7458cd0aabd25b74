"""Evidence payloads for verification cases.

Evidence is a tagged variant keyed by the case's verification method.
Each variant knows its method and how to render itself back into the
wire/storage payload; parsing and validation of incoming payloads lives
in ``reunite.domain.services.evidence_validator``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Union


class VerificationMethod(Enum):
    """How the claimant is expected to prove ownership.

    Fixed at case creation; determines which evidence variant is accepted.

    Methods:
        PHOTO_MATCH: Owner photos of the pet to compare with the listing.
        MICROCHIP: The pet's microchip number.
        DOCUMENTATION: Registration, vet or adoption papers.
        PHYSICAL_MEETING: A proposed place and time to meet with the pet.
        OTHER: Free-form description with optional attachments.
    """

    PHOTO_MATCH = "PHOTO_MATCH"
    MICROCHIP = "MICROCHIP"
    DOCUMENTATION = "DOCUMENTATION"
    PHYSICAL_MEETING = "PHYSICAL_MEETING"
    OTHER = "OTHER"


@dataclass(frozen=True)
class PhotoMatchEvidence:
    """Owner photos submitted for comparison."""

    method: ClassVar[VerificationMethod] = VerificationMethod.PHOTO_MATCH

    photos: tuple[str, ...]
    note: str | None = field(default=None)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"photos": list(self.photos)}
        if self.note is not None:
            payload["note"] = self.note
        return payload


@dataclass(frozen=True)
class MicrochipEvidence:
    """Microchip number, normalized to upper-case without separators."""

    method: ClassVar[VerificationMethod] = VerificationMethod.MICROCHIP

    chip: str
    registry: str | None = field(default=None)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"chip": self.chip}
        if self.registry is not None:
            payload["registry"] = self.registry
        return payload


@dataclass(frozen=True)
class DocumentationEvidence:
    """References to ownership documents."""

    method: ClassVar[VerificationMethod] = VerificationMethod.DOCUMENTATION

    documents: tuple[str, ...]
    document_type: str | None = field(default=None)
    note: str | None = field(default=None)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"documents": list(self.documents)}
        if self.document_type is not None:
            payload["document_type"] = self.document_type
        if self.note is not None:
            payload["note"] = self.note
        return payload


@dataclass(frozen=True)
class PhysicalMeetingEvidence:
    """A proposed meeting where the claimant can identify the pet."""

    method: ClassVar[VerificationMethod] = VerificationMethod.PHYSICAL_MEETING

    place: str
    time: datetime
    note: str | None = field(default=None)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"place": self.place, "time": self.time.isoformat()}
        if self.note is not None:
            payload["note"] = self.note
        return payload


@dataclass(frozen=True)
class OtherEvidence:
    """Free-form proof for cases that fit no other method."""

    method: ClassVar[VerificationMethod] = VerificationMethod.OTHER

    description: str
    attachments: tuple[str, ...] = field(default=())

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"description": self.description}
        if self.attachments:
            payload["attachments"] = list(self.attachments)
        return payload


Evidence = Union[
    PhotoMatchEvidence,
    MicrochipEvidence,
    DocumentationEvidence,
    PhysicalMeetingEvidence,
    OtherEvidence,
]
