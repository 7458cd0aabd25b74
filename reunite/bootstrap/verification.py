"""Bootstrap wiring for verification workflow dependencies.

Builds the case store selected by CASE_STORE_BACKEND and the
collaborator stubs, and hands out singleton workflow services to the API
dependencies.
"""

from __future__ import annotations

from structlog import get_logger

from reunite.application.ports.case_store import CaseStoreProtocol
from reunite.application.ports.listing_status import ListingStatusProtocol
from reunite.application.ports.notification_dispatcher import (
    NotificationDispatcherProtocol,
)
from reunite.application.ports.time_authority import TimeAuthorityProtocol
from reunite.application.services.time_authority_service import SystemTimeAuthority
from reunite.bootstrap.metrics import get_workflow_metrics
from reunite.config.verification_config import (
    CaseStoreBackend,
    CaseStoreConfig,
    VerificationWorkflowConfig,
)
from reunite.infrastructure.stubs.case_store_stub import CaseStoreStub
from reunite.infrastructure.stubs.listing_status_stub import ListingStatusStub
from reunite.infrastructure.stubs.notification_dispatcher_stub import (
    NotificationDispatcherStub,
)

logger = get_logger()

_time_authority: TimeAuthorityProtocol | None = None
_case_store: CaseStoreProtocol | None = None
_notification_dispatcher: NotificationDispatcherProtocol | None = None
_listing_status: ListingStatusProtocol | None = None
_workflow_config: VerificationWorkflowConfig | None = None


def get_time_authority() -> TimeAuthorityProtocol:
    global _time_authority
    if _time_authority is None:
        _time_authority = SystemTimeAuthority()
    return _time_authority


def get_workflow_config() -> VerificationWorkflowConfig:
    """Get workflow limits, loaded from the environment once."""
    global _workflow_config
    if _workflow_config is None:
        _workflow_config = VerificationWorkflowConfig.from_environment()
        logger.info(
            "verification_config_loaded",
            max_message_length=_workflow_config.max_message_length,
            max_reason_length=_workflow_config.max_reason_length,
            max_page_size=_workflow_config.max_page_size,
        )
    return _workflow_config


def get_case_store() -> CaseStoreProtocol:
    """Get the case store selected by CASE_STORE_BACKEND.

    Raises:
        ValueError: If the backend is unknown or postgres lacks DATABASE_URL.
    """
    global _case_store
    if _case_store is None:
        config = CaseStoreConfig.from_environment()
        if config.backend == CaseStoreBackend.POSTGRES:
            from reunite.bootstrap.database import get_session_factory
            from reunite.infrastructure.adapters.persistence.postgres_case_store import (
                PostgresCaseStore,
            )

            _case_store = PostgresCaseStore(
                session_factory=get_session_factory(),
                time_authority=get_time_authority(),
            )
        else:
            _case_store = CaseStoreStub(time_authority=get_time_authority())
        logger.info("case_store_initialized", backend=config.backend.value)
    return _case_store


def get_notification_dispatcher() -> NotificationDispatcherProtocol:
    global _notification_dispatcher
    if _notification_dispatcher is None:
        _notification_dispatcher = NotificationDispatcherStub()
    return _notification_dispatcher


def get_listing_status() -> ListingStatusProtocol:
    global _listing_status
    if _listing_status is None:
        _listing_status = ListingStatusStub()
    return _listing_status


def set_case_store(store: CaseStoreProtocol) -> None:
    """Set a custom case store (testing/override)."""
    global _case_store
    _case_store = store


def reset_verification_bootstrap() -> None:
    """Reset all singletons (testing cleanup)."""
    global _time_authority, _case_store, _notification_dispatcher
    global _listing_status, _workflow_config
    _time_authority = None
    _case_store = None
    _notification_dispatcher = None
    _listing_status = None
    _workflow_config = None


__all__ = [
    "get_case_store",
    "get_listing_status",
    "get_notification_dispatcher",
    "get_time_authority",
    "get_workflow_config",
    "get_workflow_metrics",
    "reset_verification_bootstrap",
    "set_case_store",
]
