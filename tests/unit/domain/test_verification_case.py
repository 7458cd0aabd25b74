"""Unit tests for the verification case domain model."""

from dataclasses import replace
from datetime import datetime, timezone

import pytest

from reunite.domain.models.evidence import MicrochipEvidence, VerificationMethod
from reunite.domain.models.identity import (
    CaseRole,
    PartyIdentity,
    normalize_email,
)
from reunite.domain.models.pet_snapshot import PetSnapshot
from reunite.domain.models.verification_case import (
    CaseStatus,
    DecisionOutcome,
    DisputeRuling,
)
from tests.helpers import CLAIMANT, FINDER, make_case

RULED_AT = datetime(2026, 1, 5, tzinfo=timezone.utc)


class TestCaseStatus:
    @pytest.mark.parametrize(
        "status,terminal",
        [
            (CaseStatus.PENDING, False),
            (CaseStatus.VERIFIED, True),
            (CaseStatus.REJECTED, False),
            (CaseStatus.DISPUTED, False),
            (CaseStatus.RESOLVED, True),
        ],
    )
    def test_terminal_statuses(self, status: CaseStatus, terminal: bool) -> None:
        assert status.is_terminal() is terminal

    def test_chat_is_open_exactly_when_not_terminal(self) -> None:
        for status in CaseStatus:
            assert status.is_chat_open() is not status.is_terminal()


class TestIdentity:
    def test_normalize_email_strips_and_lowercases(self) -> None:
        assert normalize_email("  Fiona@Example.COM ") == "fiona@example.com"

    def test_party_matches_case_insensitively(self) -> None:
        assert FINDER.matches("FIONA@example.com")
        assert not FINDER.matches("carl@example.com")

    def test_party_requires_an_address(self) -> None:
        with pytest.raises(ValueError, match="not a valid address"):
            PartyIdentity(display_name="Nobody", email="nobody")

    def test_role_is_party(self) -> None:
        assert CaseRole.FINDER.is_party
        assert CaseRole.CLAIMANT.is_party
        assert not CaseRole.ADMIN.is_party
        assert not CaseRole.UNAUTHORIZED.is_party


class TestPetSnapshot:
    def test_species_is_required(self) -> None:
        with pytest.raises(ValueError, match="species"):
            PetSnapshot(name="Biscuit", species="  ")


class TestVerificationCase:
    def test_new_case_defaults(self) -> None:
        case = make_case()

        assert case.status == CaseStatus.PENDING
        assert case.version == 1
        assert case.workflow_version == 1
        assert case.chat_version == 1
        assert case.chat_history == ()
        assert not case.has_evidence
        assert case.resolved_outcome is None

    def test_finder_and_claimant_must_differ(self) -> None:
        same_person = PartyIdentity(display_name="Fi", email="FIONA@example.com")
        with pytest.raises(ValueError, match="different people"):
            make_case(claimant=same_person)

    def test_version_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="at least 1"):
            make_case(version=0)

    def test_projection_versions_cannot_exceed_version(self) -> None:
        with pytest.raises(ValueError, match="workflow_version"):
            make_case(version=2, workflow_version=3)
        with pytest.raises(ValueError, match="chat_version"):
            make_case(version=2, chat_version=3)

    def test_evidence_must_match_method(self) -> None:
        with pytest.raises(ValueError, match="does not match"):
            make_case(
                method=VerificationMethod.PHOTO_MATCH,
                evidence=MicrochipEvidence(chip="ABC123"),
            )

    def test_resolved_requires_ruling(self) -> None:
        with pytest.raises(ValueError, match="dispute ruling"):
            make_case(status=CaseStatus.RESOLVED)

    def test_resolved_outcome_comes_from_ruling(self) -> None:
        ruling = DisputeRuling(
            outcome=DecisionOutcome.VERIFIED,
            reason="Chip registry confirms ownership",
            decided_at=RULED_AT,
            ruled_by="ada@reunite.example",
        )
        case = make_case(status=CaseStatus.RESOLVED, dispute_ruling=ruling)

        assert case.resolved_outcome == DecisionOutcome.VERIFIED

    def test_party_role_and_counterparty(self) -> None:
        case = make_case()

        assert case.party_role("fiona@example.com") == CaseRole.FINDER
        assert case.party_role("Carl@Example.com") == CaseRole.CLAIMANT
        assert case.party_role("sam@example.com") is None
        assert case.counterparty(CaseRole.FINDER) == CLAIMANT
        assert case.counterparty(CaseRole.CLAIMANT) == FINDER

    def test_admin_has_no_counterparty(self) -> None:
        with pytest.raises(ValueError):
            make_case().counterparty(CaseRole.ADMIN)

    def test_cases_are_immutable(self) -> None:
        case = make_case()
        with pytest.raises(AttributeError):
            case.status = CaseStatus.VERIFIED  # type: ignore[misc]
        assert replace(case, version=2).version == 2
        assert case.version == 1
