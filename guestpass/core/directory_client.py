"""Abstract identity directory client interface.

This module defines the operations any identity directory must provide for
guest provisioning. The interface is provider-agnostic - implementations can
use Supabase Auth, Cognito, or any other service that stores accounts keyed
by email.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from guestpass.models import AccountPage, CreateOutcome, IdentityRecord


class IdentityDirectoryClient(ABC):
    """Abstract client for an external identity directory.

    The directory is the source of truth for account existence and email
    uniqueness. None of these calls are idempotent at the transport level, so
    a conflict on create is reported as a CreateOutcome, not an exception.

    Implementations:
        - SupabaseDirectoryClient: Supabase Auth admin API
        - CognitoDirectoryClient: AWS Cognito user pools
        - MockDirectoryClient: In-memory for testing
    """

    @abstractmethod
    async def create_account(
        self,
        email: str,
        password: str,
        metadata: dict[str, Any],
    ) -> CreateOutcome:
        """Create a new account with a confirmed email.

        Args:
            email: Account email
            password: Initial password (write-only)
            metadata: Full metadata document stored on the account

        Returns:
            CreateOutcome tagged CREATED (with handle) or CONFLICT when the
            email is already registered

        Raises:
            DirectoryError: On any other provider failure
        """

    @abstractmethod
    async def update_account(
        self,
        handle: str,
        password: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        """Overwrite the password and/or metadata of an account.

        Fields left as None are not touched. A metadata document replaces the
        stored one wholesale; nothing is merged.

        Raises:
            DirectoryError: On any non-success response
        """

    @abstractmethod
    async def query_by_email(self, email: str) -> list[IdentityRecord]:
        """Ask the directory for accounts matching an email.

        Providers may return near matches; callers compare emails themselves.

        Raises:
            DirectoryError: If the query endpoint fails or is unavailable
        """

    @abstractmethod
    async def list_accounts(
        self,
        page_size: int,
        cursor: Optional[str] = None,
    ) -> AccountPage:
        """List accounts one page at a time.

        Args:
            page_size: Requested number of accounts per page
            cursor: Opaque cursor from the previous page, None for the first

        Returns:
            AccountPage; has_more is False once the listing is exhausted

        Raises:
            DirectoryError: On provider errors
        """

    async def find_account_by_email(
        self,
        email: str,
        page_size: Optional[int] = None,
        max_pages: Optional[int] = None,
    ) -> Optional[str]:
        """Resolve an email to a handle using only the directory.

        Tries the direct query first, then a bounded paginated scan.

        Returns:
            The account handle, or None if no account matches
        """
        from guestpass.config import ResolutionConfig
        from guestpass.resolution import EmailResolver

        defaults = ResolutionConfig()
        resolver = EmailResolver.for_directory(
            self,
            config=ResolutionConfig(
                page_size=page_size or defaults.page_size,
                max_pages=max_pages or defaults.max_pages,
            ),
        )
        resolution = await resolver.resolve(email)
        return resolution.handle if resolution.resolved else None
