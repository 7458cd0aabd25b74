"""Row codec for verification cases.

Cases are stored as one row per case: the fields the store filters on
(status, parties, listing, versions, timestamps) as columns, everything
else in a JSONB ``document``. Evidence is stored as its wire payload and
re-validated through the evidence parser on the way out.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from reunite.domain.models.evidence import Evidence, VerificationMethod
from reunite.domain.models.identity import CaseRole, PartyIdentity
from reunite.domain.models.pet_snapshot import PetSnapshot
from reunite.domain.models.verification_case import (
    CaseStatus,
    ChatMessage,
    Decision,
    DecisionOutcome,
    DisputeRuling,
    VerificationCase,
)
from reunite.domain.services.evidence_validator import parse_evidence


def _party_to_dict(party: PartyIdentity) -> dict[str, Any]:
    return {
        "display_name": party.display_name,
        "email": party.email,
        "avatar_url": party.avatar_url,
    }


def _party_from_dict(data: Mapping[str, Any]) -> PartyIdentity:
    return PartyIdentity(
        display_name=data["display_name"],
        email=data["email"],
        avatar_url=data.get("avatar_url"),
    )


def _evidence_to_dict(evidence: Evidence | None) -> dict[str, Any] | None:
    if evidence is None:
        return None
    return {"method": evidence.method.value, "payload": evidence.to_payload()}


def _evidence_from_dict(data: Mapping[str, Any] | None) -> Evidence | None:
    if data is None:
        return None
    return parse_evidence(VerificationMethod(data["method"]), data["payload"])


def case_to_document(case: VerificationCase) -> dict[str, Any]:
    """Encode the non-column fields of a case as a JSON-compatible dict."""
    decision = case.decision
    ruling = case.dispute_ruling
    return {
        "pet": {
            "name": case.pet.name,
            "species": case.pet.species,
            "image_url": case.pet.image_url,
            "description": case.pet.description,
            "last_known_location": case.pet.last_known_location,
            "listing_id": case.pet.listing_id,
        },
        "finder": _party_to_dict(case.finder),
        "claimant": _party_to_dict(case.claimant),
        "evidence": _evidence_to_dict(case.evidence),
        "decision": None
        if decision is None
        else {
            "outcome": decision.outcome.value,
            "reason": decision.reason,
            "decided_at": decision.decided_at.isoformat(),
            "attachments": list(decision.attachments),
        },
        "dispute_reason": case.dispute_reason,
        "dispute_ruling": None
        if ruling is None
        else {
            "outcome": ruling.outcome.value,
            "reason": ruling.reason,
            "decided_at": ruling.decided_at.isoformat(),
            "ruled_by": ruling.ruled_by,
        },
        "chat_history": [
            {
                "sender_role": m.sender_role.value,
                "sender": _party_to_dict(m.sender),
                "body": m.body,
                "sent_at": m.sent_at.isoformat(),
            }
            for m in case.chat_history
        ],
    }


def case_to_params(case: VerificationCase) -> dict[str, Any]:
    """Bind parameters for INSERT/UPDATE statements."""
    return {
        "id": case.id,
        "listing_id": case.pet.listing_id,
        "finder_email": case.finder.normalized_email,
        "claimant_email": case.claimant.normalized_email,
        "verification_method": case.verification_method.value,
        "status": case.status.value,
        "document": json.dumps(case_to_document(case)),
        "version": case.version,
        "workflow_version": case.workflow_version,
        "chat_version": case.chat_version,
        "created_at": case.created_at,
        "updated_at": case.updated_at,
    }


def case_from_row(row: Mapping[str, Any]) -> VerificationCase:
    """Decode a verification_cases row."""
    document = row["document"]
    if isinstance(document, str):
        document = json.loads(document)

    pet = document["pet"]
    decision = document.get("decision")
    ruling = document.get("dispute_ruling")
    return VerificationCase(
        id=row["id"],
        pet=PetSnapshot(
            name=pet["name"],
            species=pet["species"],
            image_url=pet.get("image_url"),
            description=pet.get("description") or "",
            last_known_location=pet.get("last_known_location"),
            listing_id=pet.get("listing_id"),
        ),
        finder=_party_from_dict(document["finder"]),
        claimant=_party_from_dict(document["claimant"]),
        verification_method=VerificationMethod(row["verification_method"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        status=CaseStatus(row["status"]),
        evidence=_evidence_from_dict(document.get("evidence")),
        decision=None
        if decision is None
        else Decision(
            outcome=DecisionOutcome(decision["outcome"]),
            reason=decision["reason"],
            decided_at=datetime.fromisoformat(decision["decided_at"]),
            attachments=tuple(decision.get("attachments", ())),
        ),
        dispute_reason=document.get("dispute_reason"),
        dispute_ruling=None
        if ruling is None
        else DisputeRuling(
            outcome=DecisionOutcome(ruling["outcome"]),
            reason=ruling["reason"],
            decided_at=datetime.fromisoformat(ruling["decided_at"]),
            ruled_by=ruling["ruled_by"],
        ),
        chat_history=tuple(
            ChatMessage(
                sender_role=CaseRole(m["sender_role"]),
                sender=_party_from_dict(m["sender"]),
                body=m["body"],
                sent_at=datetime.fromisoformat(m["sent_at"]),
            )
            for m in document.get("chat_history", ())
        ),
        version=row["version"],
        workflow_version=row["workflow_version"],
        chat_version=row["chat_version"],
    )
