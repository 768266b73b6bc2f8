"""Guest account provisioning.

Ensures exactly one directory account exists for a guest email, with the
guest's current password and metadata, and returns its handle.
"""

from __future__ import annotations

from typing import Optional

import structlog

from guestpass.core.directory_client import IdentityDirectoryClient
from guestpass.exceptions import DirectoryError, MissingInputError
from guestpass.models import CreateStatus, GuestProfile, normalize_email
from guestpass.resolution import EmailResolver

log = structlog.get_logger()


class GuestProvisioner:
    """Create-or-update for guest accounts.

    Creation is attempted first. When the directory reports the email as
    already registered, the existing account is resolved and overwritten with
    the same password and metadata, which relabels any pre-existing account as
    a guest account. Repeated calls are last-write-wins.

    Args:
        client: Identity directory client
        resolver: Email resolver used when the account already exists.
            Defaults to the directory-only chain (direct query, then scan);
            a guest directory hint must not be used here, since the resolved
            account is overwritten.

    Note:
        Use a factory's create_provisioner() instead of instantiating directly.
    """

    def __init__(self, client: IdentityDirectoryClient, resolver: Optional[EmailResolver] = None):
        self._client = client
        self._resolver = resolver or EmailResolver.for_directory(client)

    async def provision(
        self,
        email: str,
        password: str,
        guest_id: str,
        event_id: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        company_id: Optional[str] = None,
    ) -> str:
        """Ensure a guest account exists and return its handle.

        Args:
            email: Guest email (matched case-insensitively)
            password: Password to set on the account
            guest_id: Guest record identifier
            event_id: Event the guest belongs to
            first_name: Optional first name, stored verbatim
            last_name: Optional last name, stored verbatim
            company_id: Optional company identifier, stored verbatim

        Returns:
            Directory handle of the created or updated account

        Raises:
            MissingInputError: If email, password, guest_id or event_id is empty
            DirectoryError: If the directory fails, or reports the email as
                taken but the account cannot be resolved
        """
        normalized = normalize_email(email)
        missing = [
            name
            for name, value in (
                ("email", normalized),
                ("password", password),
                ("event_id", event_id),
                ("guest_id", guest_id),
            )
            if not value
        ]
        if missing:
            raise MissingInputError(missing)

        profile = GuestProfile(
            email=normalized,
            guest_id=guest_id,
            event_id=event_id,
            first_name=first_name,
            last_name=last_name,
            company_id=company_id,
        )
        metadata = profile.to_metadata()

        outcome = await self._client.create_account(normalized, password, metadata)
        if outcome.status == CreateStatus.CREATED and outcome.handle:
            log.info(
                "guest_account_created",
                handle=outcome.handle,
                email=normalized,
                guest_id=guest_id,
                event_id=event_id,
            )
            return outcome.handle

        if outcome.status == CreateStatus.CREATED:
            raise DirectoryError("Directory created an account without a handle", "provision")

        log.info("guest_account_exists", email=normalized, message=outcome.message)
        resolution = await self._resolver.resolve(normalized)
        if not resolution.resolved or not resolution.handle:
            log.error("guest_account_unresolvable", email=normalized)
            raise DirectoryError("User exists but could not be resolved", "provision")

        await self._client.update_account(resolution.handle, password=password, metadata=metadata)
        log.info(
            "guest_account_claimed",
            handle=resolution.handle,
            email=normalized,
            strategy=resolution.strategy,
            guest_id=guest_id,
            event_id=event_id,
        )
        return resolution.handle
