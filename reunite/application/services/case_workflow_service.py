"""Shared plumbing for the verification workflow handlers.

Each handler (evidence, review, dispute) follows the same shape:

1. Load the case and resolve the caller's role
2. Check the transition against the state machine (fails fast, no write)
3. Compare-and-swap against the version that was read; the mutator
   re-applies the transition to the current case under the store's lock
4. Side effects (notifications, listing updates) after the swap, fire-and-forget

Developer Golden Rules:
1. RESOLVE FIRST - no store write before the role check
2. FAIL LOUD - typed workflow errors propagate to the caller unchanged
3. NO RETRY ON CONFLICT - a lost race surfaces as VersionConflictError
4. NOTIFY AFTER SAVE - collaborators are told only about persisted changes
"""

from __future__ import annotations

from uuid import UUID

import structlog

from reunite.application.ports.case_store import CaseStoreProtocol
from reunite.application.ports.listing_status import ListingStatusProtocol
from reunite.application.ports.notification_dispatcher import (
    CaseNotification,
    NotificationDispatcherProtocol,
)
from reunite.application.ports.time_authority import TimeAuthorityProtocol
from reunite.application.ports.workflow_metrics import WorkflowMetricsProtocol
from reunite.application.services.base import LoggingMixin
from reunite.application.services.identity_resolver import IdentityResolver
from reunite.config.verification_config import (
    DEFAULT_VERIFICATION_CONFIG,
    VerificationWorkflowConfig,
)
from reunite.domain.errors.case import ReasonRequiredError
from reunite.domain.errors.concurrent_modification import VersionConflictError
from reunite.domain.models.verification_case import VerificationCase
from reunite.domain.services.case_state_machine import CaseEvent
from reunite.domain.services.case_versioning import CaseMutator, CaseProjection


class CaseWorkflowService(LoggingMixin):
    """Base class for handlers that move a case through the state machine."""

    def __init__(
        self,
        case_store: CaseStoreProtocol,
        time_authority: TimeAuthorityProtocol,
        identity_resolver: IdentityResolver | None = None,
        notification_dispatcher: NotificationDispatcherProtocol | None = None,
        listing_status: ListingStatusProtocol | None = None,
        metrics: WorkflowMetricsProtocol | None = None,
        config: VerificationWorkflowConfig | None = None,
    ) -> None:
        """Initialize the handler.

        Args:
            case_store: Store holding the cases.
            time_authority: Source of decision and ruling timestamps.
            identity_resolver: Role resolver (default: IdentityResolver()).
            notification_dispatcher: Optional notification collaborator.
            listing_status: Optional listing collaborator.
            metrics: Optional workflow counters.
            config: Workflow limits (default: DEFAULT_VERIFICATION_CONFIG).
        """
        self._store = case_store
        self._time = time_authority
        self._resolver = identity_resolver or IdentityResolver()
        self._notifier = notification_dispatcher
        self._listing_status = listing_status
        self._metrics = metrics
        self._config = config or DEFAULT_VERIFICATION_CONFIG
        self._init_logger()

    def _require_reason(
        self, case_id: UUID, action: str, reason: str | None, required: bool
    ) -> str:
        """Strip a reason and enforce presence and the configured length cap.

        Raises:
            ReasonRequiredError: If a required reason is empty or any reason
                is longer than the configured maximum.
        """
        text = (reason or "").strip()
        if required and not text:
            raise ReasonRequiredError(case_id, action, "a non-empty reason is required")
        if len(text) > self._config.max_reason_length:
            raise ReasonRequiredError(
                case_id,
                action,
                f"reason exceeds {self._config.max_reason_length} characters",
            )
        return text

    async def _swap(
        self,
        log: structlog.BoundLogger,
        case: VerificationCase,
        mutator: CaseMutator,
        operation: str,
        projection: CaseProjection = CaseProjection.WORKFLOW,
    ) -> VerificationCase:
        """Compare-and-swap against the version in hand, counting conflicts."""
        try:
            return await self._store.compare_and_swap(
                case.id, case.version, mutator, projection
            )
        except VersionConflictError as e:
            log.warning(
                f"{operation}_conflict",
                expected_version=e.expected_version,
                current_version=e.current_version,
            )
            if self._metrics is not None:
                self._metrics.record_version_conflict(operation)
            raise

    def _record_transition(self, event: CaseEvent) -> None:
        if self._metrics is not None:
            self._metrics.record_transition(event.value)

    async def _notify(
        self, log: structlog.BoundLogger, notification: CaseNotification
    ) -> None:
        """Dispatch a notification; failures are logged and never raised."""
        if self._notifier is None:
            return
        try:
            await self._notifier.dispatch(notification)
            log.debug(
                "notification_dispatched",
                kind=notification.kind.value,
                recipient=notification.recipient.email,
            )
        except Exception as e:
            # Fire-and-forget - log but don't fail
            log.warning(
                "notification_failed",
                kind=notification.kind.value,
                error=str(e),
            )

    async def _mark_reunited(
        self, log: structlog.BoundLogger, case: VerificationCase
    ) -> None:
        """Tell the listings collaborator the pet went home, if it has a listing."""
        listing_id = case.pet.listing_id
        if self._listing_status is None or listing_id is None:
            return
        try:
            await self._listing_status.mark_reunited(listing_id, case.id)
            log.info("listing_marked_reunited", listing_id=listing_id)
        except Exception as e:
            # Fire-and-forget - log but don't fail
            log.warning(
                "listing_update_failed",
                listing_id=listing_id,
                error=str(e),
            )
