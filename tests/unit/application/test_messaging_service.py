"""Unit tests for MessagingService."""

import asyncio
from dataclasses import replace

import pytest

from reunite.application.services.messaging_service import MessagingService
from reunite.application.services.review_service import ReviewService
from reunite.config.verification_config import TEST_VERIFICATION_CONFIG
from reunite.domain.errors import (
    ChannelFrozenError,
    InvalidMessageError,
    UnauthorizedError,
)
from reunite.domain.models.evidence import MicrochipEvidence
from reunite.domain.models.identity import CallerIdentity, CaseRole
from reunite.domain.models.verification_case import CaseStatus, DecisionOutcome
from tests.helpers import (
    ADMIN,
    CLAIMANT,
    CLAIMANT_CALLER,
    FINDER,
    FINDER_CALLER,
    STRANGER,
    InterleavingCaseStore,
    WorkflowFirstCaseStore,
    make_case,
)


class TestPostMessage:
    async def test_parties_post_in_order(
        self, messaging_service, pending_case, fake_time_authority, metrics
    ) -> None:
        await messaging_service.post_message(pending_case.id, FINDER_CALLER, "Found her")
        fake_time_authority.advance(seconds=5)
        updated = await messaging_service.post_message(
            pending_case.id, CLAIMANT_CALLER, "  That's my dog  "
        )

        assert [m.body for m in updated.chat_history] == ["Found her", "That's my dog"]
        assert [m.sender_role for m in updated.chat_history] == [
            CaseRole.FINDER,
            CaseRole.CLAIMANT,
        ]
        assert updated.chat_history[1].sent_at == fake_time_authority.now()
        assert updated.version == 3
        assert updated.workflow_version == 1
        assert metrics.messages == 2

    async def test_sender_is_recorded_party_identity(
        self, messaging_service, pending_case
    ) -> None:
        caller = CallerIdentity(email="CARL@example.com", display_name="Someone else")
        updated = await messaging_service.post_message(pending_case.id, caller, "hi")
        assert updated.chat_history[0].sender == CLAIMANT

    @pytest.mark.parametrize("caller", [ADMIN, STRANGER])
    async def test_non_parties_cannot_post(self, messaging_service, pending_case, caller) -> None:
        with pytest.raises(UnauthorizedError):
            await messaging_service.post_message(pending_case.id, caller, "hello")

    @pytest.mark.parametrize("body", ["", "   "])
    async def test_empty_body(self, messaging_service, pending_case, body) -> None:
        with pytest.raises(InvalidMessageError, match="must not be empty"):
            await messaging_service.post_message(pending_case.id, FINDER_CALLER, body)

    async def test_body_length_cap(self, messaging_service, pending_case) -> None:
        too_long = "x" * (TEST_VERIFICATION_CONFIG.max_message_length + 1)
        with pytest.raises(InvalidMessageError, match="exceeds"):
            await messaging_service.post_message(pending_case.id, FINDER_CALLER, too_long)

    @pytest.mark.parametrize("status", [CaseStatus.REJECTED, CaseStatus.DISPUTED])
    async def test_open_statuses_accept_messages(
        self, messaging_service, store, status
    ) -> None:
        case = make_case(status=status)
        await store.create(case)
        updated = await messaging_service.post_message(case.id, CLAIMANT_CALLER, "still here")
        assert len(updated.chat_history) == 1

    async def test_verified_case_is_frozen(self, messaging_service, store) -> None:
        case = make_case(status=CaseStatus.VERIFIED)
        await store.create(case)
        with pytest.raises(ChannelFrozenError) as exc_info:
            await messaging_service.post_message(case.id, FINDER_CALLER, "bye")
        assert exc_info.value.status == CaseStatus.VERIFIED


class TestConcurrentPosts:
    async def test_racing_appends_all_land(self, fake_time_authority, metrics) -> None:
        posts = 12
        store = InterleavingCaseStore(readers=posts, time_authority=fake_time_authority)
        case = make_case()
        await store.create(case)
        service = MessagingService(
            case_store=store,
            time_authority=fake_time_authority,
            metrics=metrics,
        )

        await asyncio.gather(
            *(
                service.post_message(
                    case.id,
                    FINDER_CALLER if i % 2 == 0 else CLAIMANT_CALLER,
                    f"message {i}",
                )
                for i in range(posts)
            )
        )

        stored = await store.get(case.id)
        assert sorted(m.body for m in stored.chat_history) == sorted(
            f"message {i}" for i in range(posts)
        )
        for message in stored.chat_history:
            index = int(message.body.split()[1])
            expected = FINDER if index % 2 == 0 else CLAIMANT
            assert message.sender == expected
        assert stored.version == posts + 1
        assert metrics.messages == posts
        assert metrics.conflicts == {}


class TestPostRacingDecision:
    @pytest.fixture
    def race_store(self, fake_time_authority) -> WorkflowFirstCaseStore:
        return WorkflowFirstCaseStore(time_authority=fake_time_authority)

    @pytest.fixture
    async def evidenced_case(self, race_store):
        case = make_case(evidence=MicrochipEvidence(chip="985121000000001"))
        await race_store.create(case)
        return case

    def _services(self, store, time_authority):
        kwargs = {
            "case_store": store,
            "time_authority": time_authority,
            "config": TEST_VERIFICATION_CONFIG,
        }
        return ReviewService(**kwargs), MessagingService(**kwargs)

    async def test_post_and_rejection_from_same_read_both_land(
        self, race_store, evidenced_case, fake_time_authority
    ) -> None:
        review, messaging = self._services(race_store, fake_time_authority)

        decided, posted = await asyncio.gather(
            review.decide(
                evidenced_case.id, FINDER_CALLER, DecisionOutcome.REJECTED, "chip mismatch"
            ),
            messaging.post_message(evidenced_case.id, CLAIMANT_CALLER, "please rescan"),
        )

        stored = await race_store.get(evidenced_case.id)
        assert decided.status == CaseStatus.REJECTED
        assert posted.status == CaseStatus.REJECTED
        assert stored.status == CaseStatus.REJECTED
        assert [m.body for m in stored.chat_history] == ["please rescan"]
        assert stored.version == 3
        assert stored.workflow_version == 2
        assert stored.chat_version == 3

    async def test_post_after_approval_from_same_read_is_frozen(
        self, race_store, evidenced_case, fake_time_authority
    ) -> None:
        review, messaging = self._services(race_store, fake_time_authority)

        decided, posted = await asyncio.gather(
            review.decide(evidenced_case.id, FINDER_CALLER, DecisionOutcome.VERIFIED),
            messaging.post_message(evidenced_case.id, CLAIMANT_CALLER, "thank you"),
            return_exceptions=True,
        )

        assert decided.status == CaseStatus.VERIFIED
        assert isinstance(posted, ChannelFrozenError)
        assert posted.status == CaseStatus.VERIFIED
        stored = await race_store.get(evidenced_case.id)
        assert stored.chat_history == ()
        assert stored.version == 2


class TestGetMessages:
    async def _seed(self, service, case_id, count):
        for i in range(count):
            caller = FINDER_CALLER if i % 2 == 0 else CLAIMANT_CALLER
            await service.post_message(case_id, caller, f"m{i}")

    async def test_pages_in_accepted_order(self, messaging_service, pending_case) -> None:
        await self._seed(messaging_service, pending_case.id, 5)

        page = await messaging_service.get_messages(
            pending_case.id, FINDER_CALLER, offset=1, limit=3
        )

        assert [m.body for m in page.messages] == ["m1", "m2", "m3"]
        assert page.total == 5
        assert page.offset == 1
        assert page.limit == 3

    async def test_admin_reads_frozen_chat(self, messaging_service, store, pending_case) -> None:
        await self._seed(messaging_service, pending_case.id, 2)
        current = await store.get(pending_case.id)
        store._cases[pending_case.id] = replace(current, status=CaseStatus.VERIFIED)

        page = await messaging_service.get_messages(pending_case.id, ADMIN)

        assert page.total == 2
        assert page.limit == TEST_VERIFICATION_CONFIG.max_page_size

    async def test_stranger_cannot_read(self, messaging_service, pending_case) -> None:
        with pytest.raises(UnauthorizedError) as exc_info:
            await messaging_service.get_messages(pending_case.id, STRANGER)
        assert exc_info.value.action == "read messages"

    @pytest.mark.parametrize("offset,limit", [(-1, None), (0, 0)])
    async def test_bad_paging(self, messaging_service, pending_case, offset, limit) -> None:
        with pytest.raises(ValueError):
            await messaging_service.get_messages(
                pending_case.id, FINDER_CALLER, offset=offset, limit=limit
            )
