"""Abstract interface for the local guest directory.

The guest directory is the application's own system of record for guests. It
may remember the identity directory handle previously assigned to a guest's
email, which lets lookups skip the identity directory entirely. It is a hint:
a miss never means the account does not exist.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class GuestDirectory(ABC):
    """Read-only view of guest email to directory handle mappings.

    Implementations:
        - SupabaseGuestDirectory: Supabase table over PostgREST
        - DynamoDBGuestDirectory: DynamoDB table keyed by email
        - MockGuestDirectory: In-memory for testing
    """

    @abstractmethod
    async def get_auth_handle(self, email: str) -> Optional[str]:
        """Return the stored directory handle for an email.

        Args:
            email: Normalized (trimmed, lowercase) guest email

        Returns:
            The stored handle, or None if the guest or the handle is unknown

        Raises:
            GuestDirectoryError: If the guest directory cannot be read
        """
