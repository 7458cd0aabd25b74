"""Verification API routes.

FastAPI router for the ownership verification workflow: case intake,
evidence, the finder's decision, disputes, admin rulings and the case
chat.

Every endpoint authenticates the caller from identity provider headers
and lets the application services decide what the caller may do on the
case. Callers never send a case version; concurrent edits surface as 409
version conflicts.

Developer Golden Rules:
1. AUTHENTICATE FIRST - get_caller runs before any service call
2. FAIL LOUD - Return meaningful RFC 7807 error responses
3. COUNT REJECTIONS - every workflow error increments the rejection counter
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from reunite.api.auth.caller_auth import get_caller
from reunite.api.dependencies.verification import (
    get_case_intake_service,
    get_case_query_service,
    get_dispute_service,
    get_evidence_submission_service,
    get_messaging_service,
    get_metrics,
    get_review_service,
)
from reunite.api.models.verification import (
    CaseListResponse,
    CaseResponse,
    ChatMessageResponse,
    CreateCaseRequest,
    DecisionRequest,
    DecisionResponse,
    DisputeRequest,
    DisputeRulingResponse,
    MessageListResponse,
    PartyModel,
    PartyResponse,
    PetSnapshotResponse,
    PostMessageRequest,
    ProblemDetail,
    RulingRequest,
    SubmitEvidenceRequest,
)
from reunite.application.ports.workflow_metrics import WorkflowMetricsProtocol
from reunite.application.services.case_intake_service import CaseIntakeService
from reunite.application.services.case_query_service import CasePage, CaseQueryService
from reunite.application.services.dispute_service import DisputeService
from reunite.application.services.evidence_submission_service import (
    EvidenceSubmissionService,
)
from reunite.application.services.messaging_service import MessagingService
from reunite.application.services.review_service import ReviewService
from reunite.domain.errors import (
    CaseAlreadyExistsError,
    CaseNotFoundError,
    ChannelFrozenError,
    InvalidMessageError,
    InvalidTransitionError,
    MalformedEvidenceError,
    ReasonRequiredError,
    UnauthorizedError,
    VerificationWorkflowError,
    VersionConflictError,
)
from reunite.domain.models.identity import CallerIdentity, CaseRole, PartyIdentity
from reunite.domain.models.pet_snapshot import PetSnapshot
from reunite.domain.models.verification_case import (
    CaseStatus,
    ChatMessage,
    VerificationCase,
)
from reunite.domain.services.case_state_machine import CaseEvent

router = APIRouter(prefix="/v1/verifications", tags=["verification"])

Caller = Annotated[CallerIdentity, Depends(get_caller)]
Metrics = Annotated[WorkflowMetricsProtocol, Depends(get_metrics)]

_ERROR_RESPONSES: dict[int | str, dict] = {
    400: {"model": ProblemDetail, "description": "Invalid request parameters"},
    401: {"model": ProblemDetail, "description": "Missing identity headers"},
    403: {"model": ProblemDetail, "description": "Caller's role may not act"},
    404: {"model": ProblemDetail, "description": "Case not found"},
    409: {
        "model": ProblemDetail,
        "description": "Invalid transition, frozen channel or version conflict",
    },
    422: {
        "model": ProblemDetail,
        "description": "Malformed evidence, missing reason or invalid message",
    },
}

# status, title, problem type suffix
_PROBLEMS: dict[type[VerificationWorkflowError], tuple[int, str, str]] = {
    UnauthorizedError: (403, "Forbidden", "unauthorized"),
    CaseNotFoundError: (404, "Case Not Found", "not-found"),
    InvalidTransitionError: (409, "Invalid Transition", "invalid-transition"),
    VersionConflictError: (409, "Version Conflict", "version-conflict"),
    ChannelFrozenError: (409, "Channel Frozen", "channel-frozen"),
    CaseAlreadyExistsError: (409, "Case Already Exists", "already-exists"),
    MalformedEvidenceError: (422, "Malformed Evidence", "malformed-evidence"),
    ReasonRequiredError: (422, "Reason Required", "reason-required"),
    InvalidMessageError: (422, "Invalid Message", "invalid-message"),
}


def _workflow_problem(
    request: Request, error: VerificationWorkflowError, metrics: WorkflowMetricsProtocol
) -> HTTPException:
    """Translate a workflow error into an RFC 7807 HTTPException."""
    status_code, title, slug = _PROBLEMS.get(
        type(error), (400, "Workflow Error", "workflow-error")
    )
    metrics.record_rejection(error.code)

    detail: dict = {
        "type": f"urn:reunite:verification:{slug}",
        "title": title,
        "status": status_code,
        "detail": str(error),
        "instance": str(request.url),
        "code": error.code,
    }
    if error.case_id is not None:
        detail["case_id"] = str(error.case_id)

    if isinstance(error, UnauthorizedError):
        detail["action"] = error.action
        detail["role"] = error.role.value
    elif isinstance(error, InvalidTransitionError):
        detail["current_status"] = error.current_status.value
        detail["action"] = error.action
        detail["reason"] = error.reason
    elif isinstance(error, VersionConflictError):
        detail["expected_version"] = error.expected_version
        detail["current_version"] = error.current_version
    elif isinstance(error, ChannelFrozenError):
        detail["current_status"] = error.status.value
    elif isinstance(error, MalformedEvidenceError):
        detail["verification_method"] = error.method.value
        detail["problems"] = error.problems
    elif isinstance(error, ReasonRequiredError):
        detail["action"] = error.action

    return HTTPException(status_code=status_code, detail=detail)


def _bad_request(
    request: Request, error: ValueError, metrics: WorkflowMetricsProtocol
) -> HTTPException:
    metrics.record_rejection("invalid_request")
    return HTTPException(
        status_code=400,
        detail={
            "type": "urn:reunite:verification:invalid-request",
            "title": "Invalid Request",
            "status": 400,
            "detail": str(error),
            "instance": str(request.url),
            "code": "invalid_request",
        },
    )


def _party(model: PartyModel) -> PartyIdentity:
    return PartyIdentity(
        display_name=model.display_name.strip(),
        email=model.email.strip(),
        avatar_url=model.avatar_url,
    )


def _party_response(party: PartyIdentity) -> PartyResponse:
    return PartyResponse(
        display_name=party.display_name,
        email=party.email,
        avatar_url=party.avatar_url,
    )


def _message_response(message: ChatMessage) -> ChatMessageResponse:
    return ChatMessageResponse(
        sender_role=message.sender_role,
        sender=_party_response(message.sender),
        body=message.body,
        sent_at=message.sent_at,
    )


def _case_response(
    case: VerificationCase,
    role: CaseRole | None = None,
    events: tuple[CaseEvent, ...] | None = None,
) -> CaseResponse:
    decision = None
    if case.decision is not None:
        decision = DecisionResponse(
            outcome=case.decision.outcome,
            reason=case.decision.reason,
            decided_at=case.decision.decided_at,
            attachments=list(case.decision.attachments),
        )
    ruling = None
    if case.dispute_ruling is not None:
        ruling = DisputeRulingResponse(
            outcome=case.dispute_ruling.outcome,
            reason=case.dispute_ruling.reason,
            decided_at=case.dispute_ruling.decided_at,
            ruled_by=case.dispute_ruling.ruled_by,
        )
    return CaseResponse(
        id=case.id,
        status=case.status,
        verification_method=case.verification_method,
        pet=PetSnapshotResponse(
            name=case.pet.name,
            species=case.pet.species,
            image_url=case.pet.image_url,
            description=case.pet.description,
            last_known_location=case.pet.last_known_location,
            listing_id=case.pet.listing_id,
        ),
        finder=_party_response(case.finder),
        claimant=_party_response(case.claimant),
        evidence=case.evidence.to_payload() if case.evidence is not None else None,
        decision=decision,
        dispute_reason=case.dispute_reason,
        dispute_ruling=ruling,
        resolved_outcome=case.resolved_outcome,
        message_count=len(case.chat_history),
        version=case.version,
        created_at=case.created_at,
        updated_at=case.updated_at,
        role=role,
        available_events=[e.value for e in events] if events is not None else None,
    )


def _case_list_response(page: CasePage) -> CaseListResponse:
    return CaseListResponse(
        cases=[_case_response(case) for case in page.cases],
        total=page.total,
        offset=page.offset,
        limit=page.limit,
    )


@router.post(
    "",
    response_model=CaseResponse,
    status_code=201,
    responses={
        200: {"model": CaseResponse, "description": "Existing open case returned"},
        **_ERROR_RESPONSES,
    },
    summary="Open a verification case",
    description=(
        "Open a case between a finder and a claimant for one pet. If the "
        "claimant already has an open case for the same listing it is "
        "returned with 200 instead of creating a duplicate."
    ),
)
async def create_case(
    request_data: CreateCaseRequest,
    request: Request,
    response: Response,
    caller: Caller,
    metrics: Metrics,
    service: CaseIntakeService = Depends(get_case_intake_service),
) -> CaseResponse:
    try:
        pet = PetSnapshot(
            name=request_data.pet.name.strip(),
            species=request_data.pet.species.strip(),
            image_url=request_data.pet.image_url,
            description=request_data.pet.description,
            last_known_location=request_data.pet.last_known_location,
            listing_id=request_data.pet.listing_id,
        )
        result = await service.create_case(
            pet=pet,
            finder=_party(request_data.finder),
            claimant=_party(request_data.claimant),
            verification_method=request_data.verification_method,
            requested_by=caller,
        )
    except VerificationWorkflowError as e:
        raise _workflow_problem(request, e, metrics) from None
    except ValueError as e:
        raise _bad_request(request, e, metrics) from None

    if not result.created:
        response.status_code = 200
    return _case_response(result.case)


@router.get(
    "",
    response_model=CaseListResponse,
    responses=_ERROR_RESPONSES,
    summary="List the caller's cases",
    description="Cases where the caller is the finder or the claimant, newest first.",
)
async def list_cases(
    request: Request,
    caller: Caller,
    metrics: Metrics,
    status: CaseStatus | None = Query(default=None),
    limit: int | None = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    service: CaseQueryService = Depends(get_case_query_service),
) -> CaseListResponse:
    try:
        page = await service.list_cases_for_user(
            caller, status=status, limit=limit, offset=offset
        )
    except VerificationWorkflowError as e:
        raise _workflow_problem(request, e, metrics) from None
    except ValueError as e:
        raise _bad_request(request, e, metrics) from None
    return _case_list_response(page)


@router.get(
    "/queue",
    response_model=CaseListResponse,
    responses=_ERROR_RESPONSES,
    summary="Admin case queue",
    description="Cases in a status (default DISPUTED), oldest first. Admins only.",
)
async def list_queue(
    request: Request,
    caller: Caller,
    metrics: Metrics,
    status: CaseStatus = Query(default=CaseStatus.DISPUTED),
    limit: int | None = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    service: CaseQueryService = Depends(get_case_query_service),
) -> CaseListResponse:
    try:
        page = await service.list_cases_by_status(
            caller, status=status, limit=limit, offset=offset
        )
    except VerificationWorkflowError as e:
        raise _workflow_problem(request, e, metrics) from None
    except ValueError as e:
        raise _bad_request(request, e, metrics) from None
    return _case_list_response(page)


@router.get(
    "/{case_id}",
    response_model=CaseResponse,
    responses=_ERROR_RESPONSES,
    summary="Get a verification case",
    description="The case with the caller's role and the actions available to them.",
)
async def get_case(
    case_id: UUID,
    request: Request,
    caller: Caller,
    metrics: Metrics,
    service: CaseQueryService = Depends(get_case_query_service),
) -> CaseResponse:
    try:
        view = await service.get_case(case_id, caller)
    except VerificationWorkflowError as e:
        raise _workflow_problem(request, e, metrics) from None
    return _case_response(view.case, role=view.role, events=view.available_events)


@router.post(
    "/{case_id}/evidence",
    response_model=CaseResponse,
    responses=_ERROR_RESPONSES,
    summary="Submit ownership evidence",
    description="Claimant only, once, while the case is PENDING.",
)
async def submit_evidence(
    case_id: UUID,
    request_data: SubmitEvidenceRequest,
    request: Request,
    caller: Caller,
    metrics: Metrics,
    service: EvidenceSubmissionService = Depends(get_evidence_submission_service),
) -> CaseResponse:
    try:
        case = await service.submit_evidence(case_id, caller, request_data.evidence)
    except VerificationWorkflowError as e:
        raise _workflow_problem(request, e, metrics) from None
    return _case_response(case)


@router.put(
    "/{case_id}/decision",
    response_model=CaseResponse,
    responses=_ERROR_RESPONSES,
    summary="Approve or reject the evidence",
    description="Finder only, after evidence was submitted. Rejections need a reason.",
)
async def decide(
    case_id: UUID,
    request_data: DecisionRequest,
    request: Request,
    caller: Caller,
    metrics: Metrics,
    service: ReviewService = Depends(get_review_service),
) -> CaseResponse:
    try:
        case = await service.decide(
            case_id,
            caller,
            request_data.outcome,
            reason=request_data.reason,
            attachments=request_data.attachments,
        )
    except VerificationWorkflowError as e:
        raise _workflow_problem(request, e, metrics) from None
    return _case_response(case)


@router.post(
    "/{case_id}/dispute",
    response_model=CaseResponse,
    responses=_ERROR_RESPONSES,
    summary="Dispute a rejection",
    description="Claimant only, on a REJECTED case that was not disputed before.",
)
async def open_dispute(
    case_id: UUID,
    request_data: DisputeRequest,
    request: Request,
    caller: Caller,
    metrics: Metrics,
    service: DisputeService = Depends(get_dispute_service),
) -> CaseResponse:
    try:
        case = await service.open_dispute(case_id, caller, request_data.reason)
    except VerificationWorkflowError as e:
        raise _workflow_problem(request, e, metrics) from None
    return _case_response(case)


@router.put(
    "/{case_id}/dispute/ruling",
    response_model=CaseResponse,
    responses=_ERROR_RESPONSES,
    summary="Rule on a dispute",
    description="Admins only, on a DISPUTED case. The ruling is final.",
)
async def rule_dispute(
    case_id: UUID,
    request_data: RulingRequest,
    request: Request,
    caller: Caller,
    metrics: Metrics,
    service: DisputeService = Depends(get_dispute_service),
) -> CaseResponse:
    try:
        case = await service.rule_dispute(
            case_id, caller, request_data.outcome, request_data.reason
        )
    except VerificationWorkflowError as e:
        raise _workflow_problem(request, e, metrics) from None
    return _case_response(case)


@router.post(
    "/{case_id}/messages",
    response_model=CaseResponse,
    status_code=201,
    responses=_ERROR_RESPONSES,
    summary="Post a chat message",
    description="Finder or claimant, while the case is PENDING, REJECTED or DISPUTED.",
)
async def post_message(
    case_id: UUID,
    request_data: PostMessageRequest,
    request: Request,
    caller: Caller,
    metrics: Metrics,
    service: MessagingService = Depends(get_messaging_service),
) -> CaseResponse:
    try:
        case = await service.post_message(case_id, caller, request_data.body)
    except VerificationWorkflowError as e:
        raise _workflow_problem(request, e, metrics) from None
    return _case_response(case)


@router.get(
    "/{case_id}/messages",
    response_model=MessageListResponse,
    responses=_ERROR_RESPONSES,
    summary="Read the case chat",
    description="Parties and admins, in accepted order, including after the chat froze.",
)
async def get_messages(
    case_id: UUID,
    request: Request,
    caller: Caller,
    metrics: Metrics,
    limit: int | None = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    service: MessagingService = Depends(get_messaging_service),
) -> MessageListResponse:
    try:
        page = await service.get_messages(case_id, caller, offset=offset, limit=limit)
    except VerificationWorkflowError as e:
        raise _workflow_problem(request, e, metrics) from None
    except ValueError as e:
        raise _bad_request(request, e, metrics) from None
    return MessageListResponse(
        messages=[_message_response(m) for m in page.messages],
        total=page.total,
        offset=page.offset,
        limit=page.limit,
    )
