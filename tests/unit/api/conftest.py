"""Fixtures for verification API tests.

The routers are mounted on a bare FastAPI app whose service dependencies
are overridden with services over an in-memory store, so each test gets
its own cases, clock and counters.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from reunite.api.dependencies.verification import (
    get_case_intake_service,
    get_case_query_service,
    get_dispute_service,
    get_evidence_submission_service,
    get_messaging_service,
    get_metrics,
    get_review_service,
)
from reunite.api.middleware.logging_middleware import LoggingMiddleware
from reunite.api.routes.health import router as health_router
from reunite.api.routes.verification import router as verification_router
from reunite.application.services.case_intake_service import CaseIntakeService
from reunite.application.services.case_query_service import CaseQueryService
from reunite.application.services.dispute_service import DisputeService
from reunite.application.services.evidence_submission_service import (
    EvidenceSubmissionService,
)
from reunite.application.services.messaging_service import MessagingService
from reunite.application.services.review_service import ReviewService
from reunite.config.verification_config import TEST_VERIFICATION_CONFIG
from reunite.infrastructure.stubs import (
    CaseStoreStub,
    ListingStatusStub,
    NotificationDispatcherStub,
)
from tests.helpers import FakeTimeAuthority, RecordingWorkflowMetrics
from tests.helpers.api_requests import FINDER_HEADERS, create_case_body


@pytest.fixture
def api_store(fake_time_authority: FakeTimeAuthority) -> CaseStoreStub:
    return CaseStoreStub(time_authority=fake_time_authority)


@pytest.fixture
def api_metrics() -> RecordingWorkflowMetrics:
    return RecordingWorkflowMetrics()


@pytest.fixture
def api_notifier() -> NotificationDispatcherStub:
    return NotificationDispatcherStub()


@pytest.fixture
def app(api_store, api_metrics, api_notifier, fake_time_authority) -> FastAPI:
    workflow_kwargs = {
        "case_store": api_store,
        "time_authority": fake_time_authority,
        "notification_dispatcher": api_notifier,
        "listing_status": ListingStatusStub(),
        "metrics": api_metrics,
        "config": TEST_VERIFICATION_CONFIG,
    }
    intake = CaseIntakeService(case_store=api_store, time_authority=fake_time_authority)
    query = CaseQueryService(case_store=api_store, config=TEST_VERIFICATION_CONFIG)
    evidence = EvidenceSubmissionService(**workflow_kwargs)
    review = ReviewService(**workflow_kwargs)
    dispute = DisputeService(**workflow_kwargs)
    messaging = MessagingService(**workflow_kwargs)

    app = FastAPI()
    app.add_middleware(LoggingMiddleware)
    app.include_router(health_router)
    app.include_router(verification_router)
    app.dependency_overrides.update(
        {
            get_metrics: lambda: api_metrics,
            get_case_intake_service: lambda: intake,
            get_case_query_service: lambda: query,
            get_evidence_submission_service: lambda: evidence,
            get_review_service: lambda: review,
            get_dispute_service: lambda: dispute,
            get_messaging_service: lambda: messaging,
        }
    )
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def case_id(client: TestClient) -> str:
    """A PENDING microchip case opened by the finder."""
    response = client.post(
        "/v1/verifications", json=create_case_body(), headers=FINDER_HEADERS
    )
    assert response.status_code == 201
    return response.json()["id"]
