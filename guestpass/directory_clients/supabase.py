"""Supabase Auth implementation of IdentityDirectoryClient."""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import requests
import structlog

from guestpass.config import SupabaseConfig
from guestpass.core.directory_client import IdentityDirectoryClient
from guestpass.exceptions import DirectoryError
from guestpass.models import AccountPage, CreateOutcome, IdentityRecord

log = structlog.get_logger()

# Substrings of the GoTrue message returned when an email is taken
CONFLICT_MESSAGES = ("already registered", "already been registered")
# Structured error codes returned by newer GoTrue releases
CONFLICT_ERROR_CODES = frozenset({"email_exists", "user_already_exists"})
# App metadata written on every create and update
GUEST_APP_METADATA = {"provider": "email", "providers": ["email", "guest"]}
# Page size for the filtered email query
QUERY_PAGE_SIZE = 50


def is_conflict(message: Optional[str], error_code: Optional[str] = None) -> bool:
    """Classify a failed create as an "email already registered" conflict."""
    if error_code and error_code in CONFLICT_ERROR_CODES:
        return True
    text = (message or "").lower()
    return any(marker in text for marker in CONFLICT_MESSAGES)


class SupabaseDirectoryClient(IdentityDirectoryClient):
    """Supabase Auth admin API client.

    Talks to the GoTrue admin endpoints (``/auth/v1/admin/users``) with the
    project's service role key. Requests run in a worker thread so the
    coroutine API never blocks the event loop, and each one carries the
    configured timeout.

    Args:
        config: Supabase project settings
        session: Optional requests session (shared connection pool, or a stub in tests)

    Note:
        Use SupabaseFactory.create_directory_client() instead of instantiating directly.
    """

    def __init__(self, config: SupabaseConfig, session: Optional[requests.Session] = None):
        self._config = config
        self._users_url = f"{config.url}/auth/v1/admin/users"
        self._session = session or requests.Session()
        self._headers = {
            "apikey": config.service_role_key,
            "Authorization": f"Bearer {config.service_role_key}",
            "Content-Type": "application/json",
        }

    # ==================== HTTP helpers ====================

    async def _request(
        self,
        method: str,
        url: str,
        operation: str,
        params: Optional[dict[str, Any]] = None,
        json_body: Optional[dict[str, Any]] = None,
    ) -> requests.Response:
        """Send one request in a worker thread, translating transport errors."""

        def _send() -> requests.Response:
            return self._session.request(
                method,
                url,
                headers=self._headers,
                params=params,
                json=json_body,
                timeout=self._config.timeout,
            )

        try:
            return await asyncio.to_thread(_send)
        except requests.RequestException as e:
            log.error("supabase_request_failed", operation=operation, error=str(e))
            raise DirectoryError(f"Failed to reach Supabase: {e}", operation) from e

    def _json(self, response: requests.Response, operation: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            log.error("supabase_invalid_response", operation=operation, status_code=response.status_code)
            raise DirectoryError("Supabase returned an invalid response", operation) from e

    def _error_details(self, response: requests.Response) -> tuple[str, Optional[str]]:
        """Extract (message, error_code) from a GoTrue error response."""
        try:
            body = response.json()
        except ValueError:
            return (response.text or f"HTTP {response.status_code}", None)
        if not isinstance(body, dict):
            return (f"HTTP {response.status_code}", None)
        message = (
            body.get("msg")
            or body.get("message")
            or body.get("error_description")
            or body.get("error")
            or f"HTTP {response.status_code}"
        )
        return (str(message), body.get("error_code"))

    def _to_record(self, user: dict[str, Any]) -> IdentityRecord:
        return IdentityRecord(
            handle=user["id"],
            email=user.get("email") or "",
            metadata=user.get("user_metadata") or {},
        )

    def _users_from(self, body: Any, operation: str) -> list[IdentityRecord]:
        users = body.get("users") if isinstance(body, dict) else body
        if not isinstance(users, list):
            raise DirectoryError("Supabase returned an unexpected user listing", operation)
        try:
            return [self._to_record(user) for user in users]
        except (KeyError, TypeError) as e:
            raise DirectoryError("Supabase returned a malformed user", operation) from e

    def _raise_for_status(self, response: requests.Response, operation: str, action: str) -> None:
        if response.ok:
            return
        message, _ = self._error_details(response)
        log.error(
            "supabase_operation_failed",
            operation=operation,
            status_code=response.status_code,
            error=message,
        )
        raise DirectoryError(f"Failed to {action}: {message}", operation, provider_message=message)

    # ==================== IdentityDirectoryClient ====================

    async def create_account(
        self,
        email: str,
        password: str,
        metadata: dict[str, Any],
    ) -> CreateOutcome:
        """Create a confirmed Supabase user with guest metadata."""
        response = await self._request(
            "POST",
            self._users_url,
            "create_account",
            json_body={
                "email": email,
                "password": password,
                "email_confirm": True,
                "user_metadata": metadata,
                "app_metadata": GUEST_APP_METADATA,
            },
        )

        if response.ok:
            body = self._json(response, "create_account")
            user = body.get("user", body) if isinstance(body, dict) else None
            handle = user.get("id") if isinstance(user, dict) else None
            if not handle:
                raise DirectoryError("Supabase returned a user without an id", "create_account")
            log.info("supabase_user_created", handle=handle, email=email)
            return CreateOutcome.created(handle)

        message, error_code = self._error_details(response)
        if is_conflict(message, error_code):
            log.info("supabase_user_exists", email=email)
            return CreateOutcome.conflict(message)

        log.error(
            "supabase_create_user_error",
            email=email,
            status_code=response.status_code,
            error=message,
        )
        raise DirectoryError(
            f"Failed to create account: {message}",
            "create_account",
            provider_message=message,
        )

    async def update_account(
        self,
        handle: str,
        password: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        """Overwrite password and/or user metadata of a Supabase user."""
        body: dict[str, Any] = {}
        if password is not None:
            body["password"] = password
        if metadata is not None:
            body["user_metadata"] = metadata
            body["app_metadata"] = GUEST_APP_METADATA
        if not body:
            return

        response = await self._request(
            "PUT",
            f"{self._users_url}/{handle}",
            "update_account",
            json_body=body,
        )
        self._raise_for_status(response, "update_account", "update account")
        log.info(
            "supabase_user_updated",
            handle=handle,
            password_changed=password is not None,
            metadata_changed=metadata is not None,
        )

    async def query_by_email(self, email: str) -> list[IdentityRecord]:
        """Query users with GoTrue's ``filter`` parameter.

        The filter is a substring search, so results may include near matches.
        """
        response = await self._request(
            "GET",
            self._users_url,
            "query_by_email",
            params={"filter": email, "page": 1, "per_page": QUERY_PAGE_SIZE},
        )
        self._raise_for_status(response, "query_by_email", "query users by email")
        return self._users_from(self._json(response, "query_by_email"), "query_by_email")

    async def list_accounts(
        self,
        page_size: int,
        cursor: Optional[str] = None,
    ) -> AccountPage:
        """List one page of users; the cursor is the 1-based page number."""
        page = int(cursor) if cursor else 1
        response = await self._request(
            "GET",
            self._users_url,
            "list_accounts",
            params={"page": page, "per_page": page_size},
        )
        self._raise_for_status(response, "list_accounts", "list users")
        records = self._users_from(self._json(response, "list_accounts"), "list_accounts")

        # A short page is the last one
        has_more = len(records) >= page_size
        return AccountPage(
            records=records,
            next_cursor=str(page + 1) if has_more else None,
            has_more=has_more,
        )
