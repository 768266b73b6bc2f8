"""Mock guest directory for testing."""

from __future__ import annotations

from typing import Dict, List, Optional

import structlog

from guestpass.core.guest_directory import GuestDirectory
from guestpass.exceptions import GuestDirectoryError
from guestpass.models import normalize_email

log = structlog.get_logger()


class MockGuestDirectory(GuestDirectory):
    """
    Mock guest directory for testing.

    Stores email to handle mappings in memory. Stale or wrong handles can be
    stored on purpose to exercise the "trusted without re-validation" path.

    Example:
        directory = MockGuestDirectory(handles={"guest@example.com": "user-123"})
        handle = await directory.get_auth_handle("guest@example.com")
    """

    def __init__(self, handles: Optional[Dict[str, str]] = None, available: bool = True):
        """Initialize mock guest directory.

        Args:
            handles: Optional dict of email -> handle
            available: When False, every lookup raises GuestDirectoryError
        """
        self._handles: Dict[str, str] = {
            normalize_email(email): handle for email, handle in (handles or {}).items()
        }
        self.available = available
        self.lookups: List[str] = []

    def remember(self, email: str, handle: str) -> None:
        self._handles[normalize_email(email)] = handle

    async def get_auth_handle(self, email: str) -> Optional[str]:
        self.lookups.append(email)
        if not self.available:
            raise GuestDirectoryError("Mock guest directory is unavailable")
        handle = self._handles.get(normalize_email(email))
        log.debug("Mock guest lookup", email=email, found=handle is not None)
        return handle
