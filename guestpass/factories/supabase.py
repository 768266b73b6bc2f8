"""Factory for Supabase components."""

from typing import Optional

import requests

from guestpass.config import ResolutionConfig, SupabaseConfig
from guestpass.core.directory_client import IdentityDirectoryClient
from guestpass.core.factory import GuestpassFactory
from guestpass.core.guest_directory import GuestDirectory


class SupabaseFactory(GuestpassFactory):
    """Factory for Supabase components.

    Creates a SupabaseDirectoryClient and, when ``config.guests_table`` is set,
    a SupabaseGuestDirectory. Both share one requests session.

    Args:
        config: Supabase project settings.
        resolution: Optional scan bounds for email resolution.
        guest_directory: Optional custom GuestDirectory used instead of the
            guests table.
        session: Optional requests session shared by all HTTP components.

    Examples:
        >>> factory = SupabaseFactory(config=SupabaseConfig.from_env())
        >>> handle = await factory.create_password_resetter().reset_password(
        ...     "guest@example.com", "new-password"
        ... )
    """

    def __init__(
        self,
        config: SupabaseConfig,
        resolution: Optional[ResolutionConfig] = None,
        guest_directory: Optional[GuestDirectory] = None,
        session: Optional[requests.Session] = None,
    ):
        super().__init__(resolution)
        self.config = config
        self._session = session or requests.Session()
        self._client: Optional[IdentityDirectoryClient] = None
        self._guest_directory: Optional[GuestDirectory] = guest_directory

    def create_directory_client(self) -> IdentityDirectoryClient:
        if self._client is None:
            from guestpass.directory_clients.supabase import SupabaseDirectoryClient

            self._client = SupabaseDirectoryClient(self.config, session=self._session)
        return self._client

    def create_guest_directory(self) -> Optional[GuestDirectory]:
        if self._guest_directory is None and self.config.guests_table:
            from guestpass.guest_directories.supabase import SupabaseGuestDirectory

            self._guest_directory = SupabaseGuestDirectory(self.config, session=self._session)
        return self._guest_directory
