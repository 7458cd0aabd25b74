"""System time authority.

The only production code allowed to read the wall clock. Everything else
receives a TimeAuthorityProtocol so tests can pin time with
FakeTimeAuthority.
"""

import time
from datetime import datetime, timezone

from reunite.application.ports.time_authority import TimeAuthorityProtocol


class SystemTimeAuthority(TimeAuthorityProtocol):
    """Time authority backed by the system clock (always UTC)."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def utcnow(self) -> datetime:
        return datetime.now(timezone.utc)

    def monotonic(self) -> float:
        return time.monotonic()
