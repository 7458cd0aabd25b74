"""Listing status stub.

Development stand-in for the listings collaborator: remembers which
listings were marked reunited and by which case.
"""

from __future__ import annotations

from uuid import UUID

from structlog import get_logger

from reunite.application.ports.listing_status import ListingStatusProtocol

logger = get_logger()


class ListingStatusStub(ListingStatusProtocol):
    """In-memory listing status.

    Attributes:
        reunited: Mapping of listing id to the case that confirmed ownership.
        failure: When set, mark_reunited raises it.
    """

    def __init__(self) -> None:
        self.reunited: dict[str, UUID] = {}
        self.failure: Exception | None = None

    async def mark_reunited(self, listing_id: str, case_id: UUID) -> None:
        if self.failure is not None:
            raise self.failure
        self.reunited[listing_id] = case_id
        logger.info("listing_reunited", listing_id=listing_id, case_id=str(case_id))

    def clear(self) -> None:
        self.reunited.clear()
        self.failure = None
