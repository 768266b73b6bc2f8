"""Mock identity directory for local development and tests.

Implements guestpass's IdentityDirectoryClient interface in memory.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional, Tuple

from guestpass.core.directory_client import IdentityDirectoryClient
from guestpass.exceptions import DirectoryError
from guestpass.models import AccountPage, CreateOutcome, IdentityRecord, normalize_email


class MockDirectoryClient(IdentityDirectoryClient):
    """
    In-memory identity directory.

    Enforces case-insensitive email uniqueness the way a real directory does,
    and records every call in ``calls`` so tests can assert which lookups ran.

    Args:
        query_available: When False, query_by_email raises DirectoryError,
            like a provider without an email query endpoint
        create_error: When set, create_account raises DirectoryError with this
            provider message
    """

    def __init__(
        self,
        query_available: bool = True,
        create_error: Optional[str] = None,
    ) -> None:
        # Insertion-ordered: {handle: IdentityRecord}
        self._records: Dict[str, IdentityRecord] = {}
        self._passwords: Dict[str, str] = {}
        self.query_available = query_available
        self.create_error = create_error
        self.calls: List[Tuple[str, Any]] = []

    # ==================== Test helpers ====================

    def seed(
        self,
        email: str,
        password: str = "seeded-password",
        metadata: Optional[dict[str, Any]] = None,
        handle: Optional[str] = None,
    ) -> str:
        """Insert an account directly, bypassing uniqueness checks."""
        handle = handle or str(uuid.uuid4())
        self._records[handle] = IdentityRecord(handle=handle, email=email, metadata=dict(metadata or {}))
        self._passwords[handle] = password
        return handle

    def get_record(self, handle: str) -> Optional[IdentityRecord]:
        return self._records.get(handle)

    def get_password(self, handle: str) -> Optional[str]:
        return self._passwords.get(handle)

    @property
    def account_count(self) -> int:
        return len(self._records)

    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]

    # ==================== IdentityDirectoryClient ====================

    async def create_account(
        self,
        email: str,
        password: str,
        metadata: dict[str, Any],
    ) -> CreateOutcome:
        self.calls.append(("create_account", email))
        if self.create_error:
            raise DirectoryError(
                f"Failed to create account: {self.create_error}",
                "create_account",
                provider_message=self.create_error,
            )

        normalized = normalize_email(email)
        if any(record.matches_email(normalized) for record in self._records.values()):
            return CreateOutcome.conflict("A user with this email address has already been registered")

        handle = str(uuid.uuid4())
        self._records[handle] = IdentityRecord(handle=handle, email=normalized, metadata=dict(metadata))
        self._passwords[handle] = password
        return CreateOutcome.created(handle)

    async def update_account(
        self,
        handle: str,
        password: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        self.calls.append(("update_account", handle))
        record = self._records.get(handle)
        if record is None:
            raise DirectoryError(f"Failed to update account: User not found: {handle}", "update_account")
        if password is not None:
            self._passwords[handle] = password
        if metadata is not None:
            record.metadata = dict(metadata)

    async def query_by_email(self, email: str) -> list[IdentityRecord]:
        self.calls.append(("query_by_email", email))
        if not self.query_available:
            raise DirectoryError("Email query is not available", "query_by_email")
        normalized = normalize_email(email)
        return [record for record in self._records.values() if record.matches_email(normalized)]

    async def list_accounts(
        self,
        page_size: int,
        cursor: Optional[str] = None,
    ) -> AccountPage:
        self.calls.append(("list_accounts", cursor))
        offset = int(cursor) if cursor else 0
        records = list(self._records.values())[offset:offset + page_size]
        has_more = len(records) == page_size
        return AccountPage(
            records=records,
            next_cursor=str(offset + page_size) if has_more else None,
            has_more=has_more,
        )
