"""In-memory stubs for development and testing."""

from reunite.infrastructure.stubs.case_store_stub import CaseStoreStub
from reunite.infrastructure.stubs.listing_status_stub import ListingStatusStub
from reunite.infrastructure.stubs.notification_dispatcher_stub import (
    NotificationDispatcherStub,
)

__all__: list[str] = [
    "CaseStoreStub",
    "ListingStatusStub",
    "NotificationDispatcherStub",
]
