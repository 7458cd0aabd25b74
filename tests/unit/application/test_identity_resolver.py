"""Unit tests for IdentityResolver."""

import pytest

from reunite.application.services.identity_resolver import IdentityResolver
from reunite.domain.errors import UnauthorizedError
from reunite.domain.models.identity import CallerIdentity, CaseRole
from tests.helpers import ADMIN, CLAIMANT_CALLER, FINDER_CALLER, STRANGER, make_case


@pytest.fixture
def resolver() -> IdentityResolver:
    return IdentityResolver()


class TestResolve:
    def test_parties(self, resolver: IdentityResolver) -> None:
        case = make_case()
        assert resolver.resolve(FINDER_CALLER, case) == CaseRole.FINDER
        assert resolver.resolve(CLAIMANT_CALLER, case) == CaseRole.CLAIMANT

    def test_email_match_ignores_case_and_whitespace(self, resolver) -> None:
        caller = CallerIdentity(email="  CARL@Example.com ")
        assert resolver.resolve(caller, make_case()) == CaseRole.CLAIMANT

    def test_admin_claim(self, resolver: IdentityResolver) -> None:
        assert resolver.resolve(ADMIN, make_case()) == CaseRole.ADMIN

    def test_stranger(self, resolver: IdentityResolver) -> None:
        assert resolver.resolve(STRANGER, make_case()) == CaseRole.UNAUTHORIZED

    def test_party_role_wins_over_admin_claim(self, resolver) -> None:
        admin_finder = CallerIdentity(email="fiona@example.com", is_admin=True)
        assert resolver.resolve(admin_finder, make_case()) == CaseRole.FINDER


class TestRequire:
    def test_reader_allows_admin(self, resolver: IdentityResolver) -> None:
        assert resolver.require_reader(ADMIN, make_case()) == CaseRole.ADMIN

    def test_reader_rejects_stranger(self, resolver: IdentityResolver) -> None:
        with pytest.raises(UnauthorizedError) as exc_info:
            resolver.require_reader(STRANGER, make_case())
        assert exc_info.value.action == "view"

    def test_party_rejects_admin(self, resolver: IdentityResolver) -> None:
        with pytest.raises(UnauthorizedError) as exc_info:
            resolver.require_party(ADMIN, make_case(), "post message")
        assert exc_info.value.role == CaseRole.ADMIN
        assert str(exc_info.value) == "Only the finder or claimant may post message"
