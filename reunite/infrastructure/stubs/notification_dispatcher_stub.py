"""Notification dispatcher stub.

Development stand-in for the delivery collaborator: logs each
notification and keeps it in memory so tests can assert on it.
"""

from __future__ import annotations

from structlog import get_logger

from reunite.application.ports.notification_dispatcher import (
    CaseNotification,
    NotificationDispatcherProtocol,
)

logger = get_logger()


class NotificationDispatcherStub(NotificationDispatcherProtocol):
    """Records notifications instead of delivering them.

    Attributes:
        sent: Notifications in dispatch order.
        failure: When set, dispatch raises it (to exercise failure paths).
    """

    def __init__(self) -> None:
        self.sent: list[CaseNotification] = []
        self.failure: Exception | None = None

    async def dispatch(self, notification: CaseNotification) -> None:
        if self.failure is not None:
            raise self.failure
        self.sent.append(notification)
        logger.info(
            "notification_recorded",
            kind=notification.kind.value,
            case_id=str(notification.case_id),
            recipient=notification.recipient.email,
        )

    def for_recipient(self, email: str) -> list[CaseNotification]:
        """Notifications addressed to one party."""
        return [n for n in self.sent if n.recipient.matches(email)]

    def clear(self) -> None:
        self.sent.clear()
        self.failure = None
