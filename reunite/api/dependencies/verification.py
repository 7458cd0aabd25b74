"""Verification API dependencies.

Dependency injection for the workflow services. Infrastructure is
selected by the bootstrap layer (CASE_STORE_BACKEND); this module only
assembles services around it and keeps one instance of each.
"""

from reunite.application.ports.workflow_metrics import WorkflowMetricsProtocol
from reunite.application.services.case_intake_service import CaseIntakeService
from reunite.application.services.case_query_service import CaseQueryService
from reunite.application.services.dispute_service import DisputeService
from reunite.application.services.evidence_submission_service import (
    EvidenceSubmissionService,
)
from reunite.application.services.messaging_service import MessagingService
from reunite.application.services.review_service import ReviewService
from reunite.bootstrap.metrics import get_workflow_metrics
from reunite.bootstrap.verification import (
    get_case_store,
    get_listing_status,
    get_notification_dispatcher,
    get_time_authority,
    get_workflow_config,
)

_intake_service: CaseIntakeService | None = None
_query_service: CaseQueryService | None = None
_evidence_service: EvidenceSubmissionService | None = None
_review_service: ReviewService | None = None
_dispute_service: DisputeService | None = None
_messaging_service: MessagingService | None = None


def _workflow_kwargs() -> dict:
    return {
        "case_store": get_case_store(),
        "time_authority": get_time_authority(),
        "notification_dispatcher": get_notification_dispatcher(),
        "listing_status": get_listing_status(),
        "metrics": get_workflow_metrics(),
        "config": get_workflow_config(),
    }


def get_metrics() -> WorkflowMetricsProtocol:
    """Get the workflow counters used to record rejected requests."""
    return get_workflow_metrics()


def get_case_intake_service() -> CaseIntakeService:
    global _intake_service
    if _intake_service is None:
        _intake_service = CaseIntakeService(
            case_store=get_case_store(),
            time_authority=get_time_authority(),
        )
    return _intake_service


def get_case_query_service() -> CaseQueryService:
    global _query_service
    if _query_service is None:
        _query_service = CaseQueryService(
            case_store=get_case_store(),
            config=get_workflow_config(),
        )
    return _query_service


def get_evidence_submission_service() -> EvidenceSubmissionService:
    global _evidence_service
    if _evidence_service is None:
        _evidence_service = EvidenceSubmissionService(**_workflow_kwargs())
    return _evidence_service


def get_review_service() -> ReviewService:
    global _review_service
    if _review_service is None:
        _review_service = ReviewService(**_workflow_kwargs())
    return _review_service


def get_dispute_service() -> DisputeService:
    global _dispute_service
    if _dispute_service is None:
        _dispute_service = DisputeService(**_workflow_kwargs())
    return _dispute_service


def get_messaging_service() -> MessagingService:
    global _messaging_service
    if _messaging_service is None:
        _messaging_service = MessagingService(**_workflow_kwargs())
    return _messaging_service


def reset_verification_dependencies() -> None:
    """Reset service singletons (testing cleanup)."""
    global _intake_service, _query_service, _evidence_service
    global _review_service, _dispute_service, _messaging_service
    _intake_service = None
    _query_service = None
    _evidence_service = None
    _review_service = None
    _dispute_service = None
    _messaging_service = None
