"""Password reset for existing guest accounts."""

from __future__ import annotations

import structlog

from guestpass.core.directory_client import IdentityDirectoryClient
from guestpass.exceptions import AccountNotFoundError, MissingInputError
from guestpass.models import normalize_email
from guestpass.resolution import EmailResolver

log = structlog.get_logger()


class PasswordResetter:
    """Sets a new password on the account registered for an email.

    Never creates accounts. Setting the same password twice leaves the
    directory in the same state.
    """

    def __init__(self, client: IdentityDirectoryClient, resolver: EmailResolver):
        self._client = client
        self._resolver = resolver

    async def reset_password(self, email: str, new_password: str) -> str:
        """Update the password of the account registered for ``email``.

        Returns:
            Handle of the updated account

        Raises:
            MissingInputError: If email or new_password is empty
            AccountNotFoundError: If no account matches the email
            DirectoryError: On directory failures
        """
        normalized = normalize_email(email)
        missing = [
            name
            for name, value in (("email", normalized), ("password", new_password))
            if not value
        ]
        if missing:
            raise MissingInputError(missing)

        resolution = await self._resolver.resolve(normalized)
        if not resolution.resolved or not resolution.handle:
            log.info("password_reset_account_not_found", email=normalized)
            raise AccountNotFoundError(normalized)

        await self._client.update_account(resolution.handle, password=new_password)
        log.info(
            "password_reset",
            handle=resolution.handle,
            email=normalized,
            strategy=resolution.strategy,
        )
        return resolution.handle
