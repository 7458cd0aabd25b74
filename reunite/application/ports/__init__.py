"""Application ports - Abstract interfaces for infrastructure adapters.

Ports define the contracts that infrastructure adapters must implement.
"""

from reunite.application.ports.case_store import CaseStoreProtocol
from reunite.application.ports.listing_status import ListingStatusProtocol
from reunite.application.ports.metrics_exporter import MetricsExporterPort
from reunite.application.ports.notification_dispatcher import (
    CaseNotification,
    NotificationDispatcherProtocol,
    NotificationKind,
)
from reunite.application.ports.time_authority import TimeAuthorityProtocol
from reunite.application.ports.workflow_metrics import WorkflowMetricsProtocol

__all__: list[str] = [
    "CaseNotification",
    "CaseStoreProtocol",
    "ListingStatusProtocol",
    "MetricsExporterPort",
    "NotificationDispatcherProtocol",
    "NotificationKind",
    "TimeAuthorityProtocol",
    "WorkflowMetricsProtocol",
]
