"""Application services for the verification workflow."""

from reunite.application.services.case_intake_service import (
    CaseIntakeResult,
    CaseIntakeService,
)
from reunite.application.services.case_query_service import (
    CasePage,
    CaseQueryService,
    CaseView,
)
from reunite.application.services.dispute_service import DisputeService
from reunite.application.services.evidence_submission_service import (
    EvidenceSubmissionService,
)
from reunite.application.services.identity_resolver import IdentityResolver
from reunite.application.services.messaging_service import (
    MessagePage,
    MessagingService,
)
from reunite.application.services.review_service import ReviewService
from reunite.application.services.time_authority_service import SystemTimeAuthority

__all__: list[str] = [
    "CaseIntakeResult",
    "CaseIntakeService",
    "CasePage",
    "CaseQueryService",
    "CaseView",
    "DisputeService",
    "EvidenceSubmissionService",
    "IdentityResolver",
    "MessagePage",
    "MessagingService",
    "ReviewService",
    "SystemTimeAuthority",
]
