"""Identity models for verification cases.

Parties are identified by email, matched case-insensitively. The admin
designation is an attribute asserted on the caller by the identity
provider at the request boundary; nothing in the workflow keeps an
allowlist of admin addresses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class CaseRole(Enum):
    """Role a caller holds with respect to one verification case.

    Roles:
        FINDER: The party who has or reported the animal.
        CLAIMANT: The party asserting ownership.
        ADMIN: Externally privileged reviewer; reads any case, rules on disputes.
        UNAUTHORIZED: Anyone else. Every handler rejects this role.
    """

    FINDER = "finder"
    CLAIMANT = "claimant"
    ADMIN = "admin"
    UNAUTHORIZED = "unauthorized"

    @property
    def is_party(self) -> bool:
        """True for the two human parties of a case."""
        return self in (CaseRole.FINDER, CaseRole.CLAIMANT)


def normalize_email(email: str) -> str:
    """Return the comparison form of an email address."""
    return email.strip().lower()


@dataclass(frozen=True)
class PartyIdentity:
    """A finder or claimant as recorded on the case.

    Attributes:
        display_name: Name shown to the other party.
        email: Contact email; the identity key of the party.
        avatar_url: Optional avatar image reference.
    """

    display_name: str
    email: str
    avatar_url: str | None = field(default=None)

    def __post_init__(self) -> None:
        """Validate the identity fields."""
        if "@" not in self.email.strip():
            raise ValueError(f"Party email is not a valid address: {self.email!r}")

    @property
    def normalized_email(self) -> str:
        return normalize_email(self.email)

    def matches(self, email: str) -> bool:
        """Check whether this party is identified by the given email."""
        return self.normalized_email == normalize_email(email)


@dataclass(frozen=True)
class CallerIdentity:
    """The authenticated caller of a workflow operation.

    Attributes:
        email: Email asserted by the identity provider.
        display_name: Name asserted by the identity provider.
        avatar_url: Picture asserted by the identity provider.
        is_admin: Admin claim asserted by the identity provider.
    """

    email: str
    display_name: str = field(default="")
    avatar_url: str | None = field(default=None)
    is_admin: bool = field(default=False)

    @property
    def normalized_email(self) -> str:
        return normalize_email(self.email)
