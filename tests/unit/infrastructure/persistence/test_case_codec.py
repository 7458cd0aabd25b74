"""Unit tests for the verification case row codec."""

import json
from dataclasses import replace
from datetime import datetime, timezone

import pytest

from reunite.domain.models.evidence import (
    PhysicalMeetingEvidence,
    VerificationMethod,
)
from reunite.domain.models.identity import CaseRole
from reunite.domain.models.verification_case import (
    CaseStatus,
    ChatMessage,
    Decision,
    DecisionOutcome,
    DisputeRuling,
    VerificationCase,
)
from reunite.infrastructure.adapters.persistence.case_codec import (
    case_from_row,
    case_to_document,
    case_to_params,
)
from tests.helpers import CLAIMANT, FINDER, make_case

DECIDED_AT = datetime(2026, 1, 2, 9, 30, tzinfo=timezone.utc)
RULED_AT = datetime(2026, 1, 4, 16, 0, tzinfo=timezone.utc)


@pytest.fixture
def resolved_case() -> VerificationCase:
    """A case that went through every stage, with chat on both sides."""
    return make_case(
        VerificationMethod.PHYSICAL_MEETING,
        status=CaseStatus.RESOLVED,
        evidence=PhysicalMeetingEvidence(
            place="Elm Park main gate",
            time=datetime(2026, 1, 20, 15, 0, tzinfo=timezone.utc),
            note="Bring the lead",
        ),
        decision=Decision(
            outcome=DecisionOutcome.REJECTED,
            reason="Dog did not respond to the name",
            decided_at=DECIDED_AT,
            attachments=("https://img.example.com/meeting.jpg",),
        ),
        dispute_reason="He was scared of the crowd",
        dispute_ruling=DisputeRuling(
            outcome=DecisionOutcome.VERIFIED,
            reason="Vet record matches",
            decided_at=RULED_AT,
            ruled_by="ada@reunite.example",
        ),
        chat_history=(
            ChatMessage(CaseRole.CLAIMANT, CLAIMANT, "Is he eating?", DECIDED_AT),
            ChatMessage(CaseRole.FINDER, FINDER, "Yes, chicken mostly", RULED_AT),
        ),
        version=6,
        workflow_version=5,
        chat_version=6,
        updated_at=RULED_AT,
    )


def _row_from(case: VerificationCase) -> dict:
    """What asyncpg hands back: JSONB decoded, scalar columns as-is."""
    params = case_to_params(case)
    return {**params, "document": json.loads(params["document"])}


class TestCaseCodec:
    def test_round_trip_preserves_every_field(
        self, resolved_case: VerificationCase
    ) -> None:
        assert case_from_row(_row_from(resolved_case)) == resolved_case

    def test_document_may_arrive_as_text(self, resolved_case: VerificationCase) -> None:
        row = case_to_params(resolved_case)
        assert case_from_row(row) == resolved_case

    def test_filter_columns_use_normalized_emails(self) -> None:
        case = make_case(
            claimant=replace(CLAIMANT, email="  Carl@Example.COM "),
        )
        params = case_to_params(case)
        assert params["claimant_email"] == "carl@example.com"
        assert params["finder_email"] == "fiona@example.com"
        assert params["listing_id"] == "listing-42"
        assert params["status"] == "PENDING"
        assert params["verification_method"] == "MICROCHIP"

    def test_evidence_stored_as_wire_payload(self) -> None:
        case = make_case(
            VerificationMethod.PHYSICAL_MEETING,
            evidence=PhysicalMeetingEvidence(
                place="Library",
                time=datetime(2026, 2, 1, 12, 0, tzinfo=timezone.utc),
            ),
        )
        document = case_to_document(case)
        assert document["evidence"] == {
            "method": VerificationMethod.PHYSICAL_MEETING.value,
            "payload": {"place": "Library", "time": "2026-02-01T12:00:00+00:00"},
        }

    def test_bare_pending_case(self) -> None:
        case = make_case()
        document = case_to_document(case)
        assert document["evidence"] is None
        assert document["decision"] is None
        assert document["dispute_ruling"] is None
        assert document["chat_history"] == []
        assert case_from_row(_row_from(case)) == case
