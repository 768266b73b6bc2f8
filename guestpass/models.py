"""Directory models - provider-agnostic data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

GUEST_ROLE = "guest"
GUEST_PROVIDER = "guest"


def normalize_email(email: Optional[str]) -> str:
    """Trim and lowercase an email for case-insensitive matching."""
    return str(email or "").strip().lower()


class CreateStatus(str, Enum):
    """Outcome of a create-account call."""

    CREATED = "CREATED"
    CONFLICT = "CONFLICT"


class ResolutionStatus(str, Enum):
    """Outcome of a single email resolution strategy."""

    RESOLVED = "RESOLVED"
    NOT_FOUND = "NOT_FOUND"
    SKIPPED = "SKIPPED"


@dataclass
class IdentityRecord:
    """Account as reported by the identity directory."""

    handle: str
    email: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def matches_email(self, email: str) -> bool:
        return normalize_email(self.email) == normalize_email(email)


@dataclass
class AccountPage:
    """One page of the directory account listing."""

    records: list[IdentityRecord]
    next_cursor: Optional[str] = None
    has_more: bool = False


@dataclass
class CreateOutcome:
    """Tagged result of create_account.

    Conflicts (email already registered) are reported here instead of raised,
    so callers never inspect provider error text.
    """

    status: CreateStatus
    handle: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def created(cls, handle: str) -> CreateOutcome:
        return cls(status=CreateStatus.CREATED, handle=handle)

    @classmethod
    def conflict(cls, message: Optional[str] = None) -> CreateOutcome:
        return cls(status=CreateStatus.CONFLICT, message=message)


@dataclass
class Resolution:
    """Result of resolving an email to a directory handle."""

    status: ResolutionStatus
    handle: Optional[str] = None
    strategy: Optional[str] = None

    @property
    def resolved(self) -> bool:
        return self.status == ResolutionStatus.RESOLVED

    @classmethod
    def found(cls, handle: str, strategy: str) -> Resolution:
        return cls(status=ResolutionStatus.RESOLVED, handle=handle, strategy=strategy)

    @classmethod
    def not_found(cls, strategy: Optional[str] = None) -> Resolution:
        return cls(status=ResolutionStatus.NOT_FOUND, strategy=strategy)

    @classmethod
    def skipped(cls, strategy: str) -> Resolution:
        return cls(status=ResolutionStatus.SKIPPED, strategy=strategy)


@dataclass
class GuestProfile:
    """Guest attributes written to the directory on provisioning."""

    email: str
    guest_id: str
    event_id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company_id: Optional[str] = None

    def to_metadata(self) -> dict[str, Any]:
        """Build the full metadata document (replaces whatever is stored)."""
        return {
            "provider": GUEST_PROVIDER,
            "role": GUEST_ROLE,
            "guest_id": self.guest_id,
            "event_id": self.event_id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "company_id": self.company_id,
            "email_verified": True,
        }
