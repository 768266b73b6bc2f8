"""Email to handle resolution.

The identity directories offer no guaranteed "get account by email", so a
handle is resolved by running an ordered list of strategies until one gives a
definitive answer:

1. CachedHandleStrategy - handle remembered by the local guest directory
2. DirectQueryStrategy - provider query scoped by email (failures absorbed)
3. PaginatedScanStrategy - bounded walk over the full account listing
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Optional

import structlog

from guestpass.config import ResolutionConfig
from guestpass.core.directory_client import IdentityDirectoryClient
from guestpass.core.guest_directory import GuestDirectory
from guestpass.exceptions import DirectoryError, GuestDirectoryError
from guestpass.models import IdentityRecord, Resolution, ResolutionStatus, normalize_email

log = structlog.get_logger()


def first_match(records: Iterable[IdentityRecord], email: str) -> Optional[IdentityRecord]:
    """Return the first record whose email equals ``email`` ignoring case."""
    for record in records:
        if record.matches_email(email):
            return record
    return None


class ResolutionStrategy(ABC):
    """One way of turning an email into a directory handle."""

    name: str = "strategy"

    @abstractmethod
    async def try_resolve(self, email: str) -> Resolution:
        """Attempt to resolve a normalized email.

        Returns:
            Resolution tagged RESOLVED, NOT_FOUND (definitive), or SKIPPED
            (no answer, try the next strategy)
        """


class CachedHandleStrategy(ResolutionStrategy):
    """Use the handle stored in the guest directory, without re-validation."""

    name = "cached_handle"

    def __init__(self, guest_directory: GuestDirectory):
        self._guest_directory = guest_directory

    async def try_resolve(self, email: str) -> Resolution:
        try:
            handle = await self._guest_directory.get_auth_handle(email)
        except GuestDirectoryError as e:
            log.warning("guest_directory_lookup_failed", email=email, error=e.message)
            return Resolution.skipped(self.name)

        if not handle:
            return Resolution.skipped(self.name)
        return Resolution.found(handle, self.name)


class DirectQueryStrategy(ResolutionStrategy):
    """Ask the directory for the email directly.

    The query endpoint is optional on some providers; any DirectoryError is
    logged and the strategy is skipped.
    """

    name = "direct_query"

    def __init__(self, client: IdentityDirectoryClient):
        self._client = client

    async def try_resolve(self, email: str) -> Resolution:
        try:
            records = await self._client.query_by_email(email)
        except DirectoryError as e:
            log.warning(
                "direct_query_unavailable",
                email=email,
                error=e.message,
                operation=e.operation,
            )
            return Resolution.skipped(self.name)

        match = first_match(records, email)
        if match is None:
            return Resolution.skipped(self.name)
        return Resolution.found(match.handle, self.name)


class PaginatedScanStrategy(ResolutionStrategy):
    """Walk the account listing page by page, bounded by a page ceiling."""

    name = "paginated_scan"

    def __init__(self, client: IdentityDirectoryClient, page_size: int, max_pages: int):
        self._client = client
        self.page_size = page_size
        self.max_pages = max_pages

    async def try_resolve(self, email: str) -> Resolution:
        cursor: Optional[str] = None
        for page_number in range(1, self.max_pages + 1):
            page = await self._client.list_accounts(self.page_size, cursor)
            match = first_match(page.records, email)
            if match is not None:
                log.debug("scan_match", email=email, page=page_number)
                return Resolution.found(match.handle, self.name)
            if not page.has_more:
                return Resolution.not_found(self.name)
            cursor = page.next_cursor

        log.warning("scan_page_limit_reached", email=email, max_pages=self.max_pages)
        return Resolution.not_found(self.name)


class EmailResolver:
    """Runs resolution strategies in order until one is not SKIPPED.

    Example:
        >>> resolver = EmailResolver.build(client, guest_directory, ResolutionConfig())
        >>> resolution = await resolver.resolve("Guest@Example.com")
        >>> resolution.handle
    """

    def __init__(self, strategies: list[ResolutionStrategy]):
        self._strategies = strategies

    @property
    def strategies(self) -> list[ResolutionStrategy]:
        return list(self._strategies)

    @classmethod
    def build(
        cls,
        client: IdentityDirectoryClient,
        guest_directory: Optional[GuestDirectory] = None,
        config: Optional[ResolutionConfig] = None,
    ) -> EmailResolver:
        """Create the standard cache -> query -> scan chain."""
        config = config or ResolutionConfig()
        strategies: list[ResolutionStrategy] = []
        if guest_directory is not None:
            strategies.append(CachedHandleStrategy(guest_directory))
        strategies.append(DirectQueryStrategy(client))
        strategies.append(PaginatedScanStrategy(client, config.page_size, config.max_pages))
        return cls(strategies)

    @classmethod
    def for_directory(
        cls,
        client: IdentityDirectoryClient,
        config: Optional[ResolutionConfig] = None,
    ) -> EmailResolver:
        """Create a chain that only consults the identity directory."""
        return cls.build(client, guest_directory=None, config=config)

    async def resolve(self, email: str) -> Resolution:
        normalized = normalize_email(email)
        for strategy in self._strategies:
            resolution = await strategy.try_resolve(normalized)
            if resolution.status != ResolutionStatus.SKIPPED:
                log.info(
                    "email_resolution_finished",
                    email=normalized,
                    strategy=strategy.name,
                    status=resolution.status.value,
                )
                return resolution

        log.info("email_resolution_exhausted", email=normalized)
        return Resolution.not_found()
