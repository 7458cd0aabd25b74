"""Domain models for verification cases."""

from reunite.domain.models.evidence import (
    DocumentationEvidence,
    Evidence,
    MicrochipEvidence,
    OtherEvidence,
    PhotoMatchEvidence,
    PhysicalMeetingEvidence,
    VerificationMethod,
)
from reunite.domain.models.identity import (
    CallerIdentity,
    CaseRole,
    PartyIdentity,
    normalize_email,
)
from reunite.domain.models.pet_snapshot import PetSnapshot
from reunite.domain.models.verification_case import (
    CHAT_OPEN_STATUSES,
    TERMINAL_STATUSES,
    CaseStatus,
    ChatMessage,
    Decision,
    DecisionOutcome,
    DisputeRuling,
    VerificationCase,
)

__all__: list[str] = [
    "CHAT_OPEN_STATUSES",
    "TERMINAL_STATUSES",
    "CallerIdentity",
    "CaseRole",
    "CaseStatus",
    "ChatMessage",
    "Decision",
    "DecisionOutcome",
    "DisputeRuling",
    "DocumentationEvidence",
    "Evidence",
    "MicrochipEvidence",
    "OtherEvidence",
    "PartyIdentity",
    "PetSnapshot",
    "PhotoMatchEvidence",
    "PhysicalMeetingEvidence",
    "VerificationCase",
    "VerificationMethod",
    "normalize_email",
]
