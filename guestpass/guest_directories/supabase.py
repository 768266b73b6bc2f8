"""Supabase table-backed guest directory."""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import requests
import structlog

from guestpass.config import SupabaseConfig
from guestpass.core.guest_directory import GuestDirectory
from guestpass.exceptions import GuestDirectoryError
from guestpass.models import normalize_email

log = structlog.get_logger()


class SupabaseGuestDirectory(GuestDirectory):
    """
    Reads stored auth user ids from the application's guests table.

    Queries PostgREST (``/rest/v1/<guests_table>``) with the service role key.
    Emails are matched with ``ilike`` and then compared exactly, so stored
    emails may use any casing.

    Example:
        directory = SupabaseGuestDirectory(SupabaseConfig(
            url="https://abc.supabase.co",
            service_role_key="secret-key",
        ))
        handle = await directory.get_auth_handle("guest@example.com")
    """

    def __init__(self, config: SupabaseConfig, session: Optional[requests.Session] = None):
        if not config.guests_table:
            raise ValueError("SupabaseGuestDirectory requires config.guests_table")
        self._table_url = f"{config.url}/rest/v1/{config.guests_table}"
        self._handle_column = config.guest_handle_column
        self._timeout = config.timeout
        self._session = session or requests.Session()
        self._headers = {
            "apikey": config.service_role_key,
            "Authorization": f"Bearer {config.service_role_key}",
            "Accept": "application/json",
        }
        log.info("Initialized Supabase guest directory", table_url=self._table_url)

    async def get_auth_handle(self, email: str) -> Optional[str]:
        """Fetch the stored handle for a guest email.

        Raises:
            GuestDirectoryError: If the table cannot be queried
        """

        def _fetch_rows() -> Any:
            """Synchronous function to fetch guest rows using requests."""
            response = self._session.get(
                self._table_url,
                headers=self._headers,
                params={
                    "select": f"email,{self._handle_column}",
                    "email": f"ilike.{email}",
                },
                timeout=self._timeout,
            )
            response.raise_for_status()
            return response.json()

        try:
            rows = await asyncio.to_thread(_fetch_rows)
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "unknown"
            log.error("Guests table returned error", status_code=status, error=str(e))
            raise GuestDirectoryError(f"Failed to query guests table: HTTP {status}") from e
        except ValueError as e:
            # requests' JSONDecodeError is also a RequestException
            raise GuestDirectoryError("Guests table returned invalid JSON") from e
        except requests.RequestException as e:
            log.error("Failed to connect to guests table", error=str(e))
            raise GuestDirectoryError(f"Failed to connect to guests table: {e}") from e

        if not isinstance(rows, list):
            log.error("Invalid response from guests table", response_type=type(rows).__name__)
            raise GuestDirectoryError("Guests table returned invalid response format")

        for row in rows:
            if not isinstance(row, dict):
                continue
            handle = row.get(self._handle_column)
            if handle and normalize_email(row.get("email")) == email:
                return str(handle)

        log.debug("No stored handle for guest", email=email)
        return None
