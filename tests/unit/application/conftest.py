"""Fixtures for application service tests."""

import pytest

from reunite.application.services.dispute_service import DisputeService
from reunite.application.services.evidence_submission_service import (
    EvidenceSubmissionService,
)
from reunite.application.services.messaging_service import MessagingService
from reunite.application.services.review_service import ReviewService
from reunite.config.verification_config import TEST_VERIFICATION_CONFIG
from reunite.domain.models.evidence import VerificationMethod
from reunite.domain.models.verification_case import VerificationCase
from reunite.infrastructure.stubs import (
    CaseStoreStub,
    ListingStatusStub,
    NotificationDispatcherStub,
)
from tests.helpers import FakeTimeAuthority, RecordingWorkflowMetrics, make_case


@pytest.fixture
def store(fake_time_authority: FakeTimeAuthority) -> CaseStoreStub:
    return CaseStoreStub(time_authority=fake_time_authority)


@pytest.fixture
def notifier() -> NotificationDispatcherStub:
    return NotificationDispatcherStub()


@pytest.fixture
def listing_status() -> ListingStatusStub:
    return ListingStatusStub()


@pytest.fixture
def metrics() -> RecordingWorkflowMetrics:
    return RecordingWorkflowMetrics()


@pytest.fixture
def workflow_kwargs(store, fake_time_authority, notifier, listing_status, metrics):
    return {
        "case_store": store,
        "time_authority": fake_time_authority,
        "notification_dispatcher": notifier,
        "listing_status": listing_status,
        "metrics": metrics,
        "config": TEST_VERIFICATION_CONFIG,
    }


@pytest.fixture
def evidence_service(workflow_kwargs) -> EvidenceSubmissionService:
    return EvidenceSubmissionService(**workflow_kwargs)


@pytest.fixture
def review_service(workflow_kwargs) -> ReviewService:
    return ReviewService(**workflow_kwargs)


@pytest.fixture
def dispute_service(workflow_kwargs) -> DisputeService:
    return DisputeService(**workflow_kwargs)


@pytest.fixture
def messaging_service(workflow_kwargs) -> MessagingService:
    return MessagingService(**workflow_kwargs)


@pytest.fixture
async def pending_case(store: CaseStoreStub) -> VerificationCase:
    """A stored PENDING microchip case with no evidence."""
    case = make_case(VerificationMethod.MICROCHIP)
    await store.create(case)
    return case
