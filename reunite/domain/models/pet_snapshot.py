"""Pet snapshot copied onto a verification case at creation time."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PetSnapshot:
    """Copy of the listing's pet details taken when the case was opened.

    The case keeps this copy rather than a live reference so that it stays
    interpretable if the source listing later changes or disappears.

    Attributes:
        name: Pet name as listed.
        species: Species or type (dog, cat, ...).
        image_url: Reference to the listing image.
        description: Free-text description.
        last_known_location: Where the pet was last seen or found.
        listing_id: Identifier of the source listing, when one exists.
    """

    name: str
    species: str
    image_url: str | None = field(default=None)
    description: str = field(default="")
    last_known_location: str | None = field(default=None)
    listing_id: str | None = field(default=None)

    def __post_init__(self) -> None:
        if not self.species.strip():
            raise ValueError("Pet snapshot requires a species")
