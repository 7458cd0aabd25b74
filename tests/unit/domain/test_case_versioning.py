"""Unit tests for projection-scoped compare-and-swap rules."""

from dataclasses import replace
from datetime import datetime, timezone

import pytest

from reunite.domain.errors import VersionConflictError
from reunite.domain.models.identity import CaseRole
from reunite.domain.models.verification_case import CaseStatus, ChatMessage
from reunite.domain.services.case_versioning import (
    CaseProjection,
    check_expected_version,
    merge_projection,
    projection_version,
    swap_projection,
)
from tests.helpers import CLAIMANT, FINDER, make_case

LATER = datetime(2026, 1, 3, tzinfo=timezone.utc)


def _message(body: str) -> ChatMessage:
    return ChatMessage(
        sender_role=CaseRole.FINDER, sender=FINDER, body=body, sent_at=LATER
    )


def _append(body: str):
    return lambda c: replace(c, chat_history=c.chat_history + (_message(body),))


def _set_reason(reason: str):
    return lambda c: replace(c, dispute_reason=reason)


class TestSwapProjection:
    def test_workflow_swap_bumps_versions(self) -> None:
        case = make_case()
        updated = swap_projection(
            case, 1, _set_reason("x"), CaseProjection.WORKFLOW, LATER
        )

        assert updated.version == 2
        assert updated.workflow_version == 2
        assert updated.chat_version == 1
        assert updated.updated_at == LATER
        assert updated.dispute_reason == "x"

    def test_chat_swap_bumps_chat_version_only(self) -> None:
        updated = swap_projection(
            make_case(), 1, _append("hi"), CaseProjection.CHAT, LATER
        )

        assert updated.version == 2
        assert updated.chat_version == 2
        assert updated.workflow_version == 1
        assert [m.body for m in updated.chat_history] == ["hi"]

    def test_version_after_n_mutations_is_n_plus_one(self) -> None:
        case = make_case()
        for n in range(1, 6):
            case = swap_projection(case, case.version, _append(str(n)), CaseProjection.CHAT, LATER)
            assert case.version == n + 1

    def test_stale_workflow_swap_conflicts(self) -> None:
        case = make_case()
        after_first = swap_projection(case, 1, _set_reason("a"), CaseProjection.WORKFLOW, LATER)

        with pytest.raises(VersionConflictError) as exc_info:
            swap_projection(after_first, 1, _set_reason("b"), CaseProjection.WORKFLOW, LATER)

        assert exc_info.value.expected_version == 1
        assert exc_info.value.current_version == 2
        assert after_first.dispute_reason == "a"

    def test_chat_append_does_not_invalidate_workflow_read(self) -> None:
        case = make_case()
        after_chat = swap_projection(case, 1, _append("hi"), CaseProjection.CHAT, LATER)

        updated = swap_projection(
            after_chat, 1, _set_reason("a"), CaseProjection.WORKFLOW, LATER
        )

        assert updated.version == 3
        assert updated.dispute_reason == "a"
        assert [m.body for m in updated.chat_history] == ["hi"]

    def test_workflow_change_does_not_invalidate_chat_read(self) -> None:
        case = make_case()
        after_workflow = swap_projection(case, 1, _set_reason("a"), CaseProjection.WORKFLOW, LATER)

        updated = swap_projection(after_workflow, 1, _append("hi"), CaseProjection.CHAT, LATER)

        assert updated.version == 3
        assert updated.dispute_reason == "a"
        assert len(updated.chat_history) == 1

    def test_appends_from_same_read_rebase(self) -> None:
        case = make_case()
        first = swap_projection(case, 1, _append("one"), CaseProjection.CHAT, LATER)

        second = swap_projection(first, 1, _append("two"), CaseProjection.CHAT, LATER)

        assert [m.body for m in second.chat_history] == ["one", "two"]
        assert second.version == 3
        assert second.chat_version == 3

    @pytest.mark.parametrize(
        "projection", [CaseProjection.WORKFLOW, CaseProjection.CHAT]
    )
    def test_expected_version_ahead_of_store_conflicts(self, projection) -> None:
        with pytest.raises(VersionConflictError):
            check_expected_version(make_case(), 5, projection, "update")

    def test_mutator_errors_propagate(self) -> None:
        def boom(case):
            raise RuntimeError("nope")

        with pytest.raises(RuntimeError):
            swap_projection(make_case(), 1, boom, CaseProjection.WORKFLOW, LATER)


class TestMergeProjection:
    def test_workflow_merge_ignores_chat_changes(self) -> None:
        case = make_case()
        mutated = replace(
            case,
            status=CaseStatus.PENDING,
            dispute_reason="a",
            chat_history=(_message("smuggled"),),
        )

        merged = merge_projection(case, mutated, CaseProjection.WORKFLOW, LATER)

        assert merged.chat_history == ()
        assert merged.dispute_reason == "a"

    def test_chat_merge_ignores_workflow_changes(self) -> None:
        case = make_case()
        mutated = replace(case, dispute_reason="a", chat_history=(_message("hi"),))

        merged = merge_projection(case, mutated, CaseProjection.CHAT, LATER)

        assert merged.dispute_reason is None
        assert len(merged.chat_history) == 1

    def test_chat_history_is_append_only(self) -> None:
        first = _message("one")
        case = make_case(version=2, chat_version=2, chat_history=(first,))
        rewritten = replace(case, chat_history=(_message("edited"),))

        with pytest.raises(ValueError, match="append-only"):
            merge_projection(case, rewritten, CaseProjection.CHAT, LATER)

    def test_claimant_identity_untouched_by_merge(self) -> None:
        case = make_case()
        merged = merge_projection(case, case, CaseProjection.WORKFLOW, LATER)
        assert merged.claimant == CLAIMANT


def test_projection_version() -> None:
    case = make_case(version=4, workflow_version=3, chat_version=4)
    assert projection_version(case, CaseProjection.WORKFLOW) == 3
    assert projection_version(case, CaseProjection.CHAT) == 4
