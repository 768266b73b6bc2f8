"""Guestpass exceptions.

All exceptions inherit from GuestpassError for easy catching.
"""

from __future__ import annotations

from typing import Optional


class GuestpassError(Exception):
    """Base exception for Guestpass errors."""

    def __init__(self, message: str, code: str):
        self.message = message
        self.code = code
        super().__init__(message)


class MissingInputError(GuestpassError):
    """Raised when required request fields are missing or empty."""

    def __init__(self, fields: list[str]):
        super().__init__(
            message=f"Missing fields: {', '.join(fields)}",
            code="MISSING_INPUT",
        )
        self.fields = fields


class AccountNotFoundError(GuestpassError):
    """Raised when no directory account matches an email."""

    def __init__(self, email: str):
        super().__init__(
            message=f"No account found for '{email}'",
            code="ACCOUNT_NOT_FOUND",
        )
        self.email = email


class DirectoryError(GuestpassError):
    """Raised when an identity directory operation fails."""

    def __init__(
        self,
        message: str,
        operation: str,
        provider_message: Optional[str] = None,
    ):
        super().__init__(message=message, code="DIRECTORY_ERROR")
        self.operation = operation
        self.provider_message = provider_message


class GuestDirectoryError(GuestpassError):
    """Raised when the local guest directory cannot be read."""

    def __init__(self, message: str):
        super().__init__(message=message, code="GUEST_DIRECTORY_ERROR")
