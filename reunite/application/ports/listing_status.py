"""Listing status port.

Protocol for the listings collaborator that shows a pet as reunited once
ownership is confirmed, either by the finder's approval or by an admin
ruling in the claimant's favour.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID


class ListingStatusProtocol(Protocol):
    """Protocol for updating the source listing of a case."""

    async def mark_reunited(self, listing_id: str, case_id: UUID) -> None:
        """Mark a listing as reunited with its owner.

        Args:
            listing_id: The source listing of the case.
            case_id: The case that confirmed ownership.
        """
        ...
